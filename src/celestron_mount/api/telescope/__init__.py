"""Protocol engine and facade for talking to the hand controller."""

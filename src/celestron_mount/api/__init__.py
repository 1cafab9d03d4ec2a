"""Mount control API: protocol engine and domain facade."""

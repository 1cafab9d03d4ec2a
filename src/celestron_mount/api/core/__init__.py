"""Core subpackage for shared types, enumerations, constants, and exceptions."""

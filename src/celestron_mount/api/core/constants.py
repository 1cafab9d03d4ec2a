"""
Protocol Constants

Fixed values of the NexStar serial protocol shared by the transport,
framing and facade layers.
"""

from typing import Final


__all__ = [
    "ACK",
    "BAUDRATE",
    "DEGREES_PER_HOUR_ANGLE",
    "DEGREES_PER_REVOLUTION",
    "FRACTION24",
    "INTER_BYTE_TIMEOUT",
    "MAX_PASSTHROUGH_ARGS",
    "PASSTHROUGH_PREFIX",
    "POLL_INTERVAL",
    "RESPONSE_BUFFER_SIZE",
    "RESPONSE_TIMEOUT",
    "REVOLUTION",
    "TERMINATOR",
    "YEAR_OFFSET",
]


# Line settings
BAUDRATE: Final[int] = 9600
"""Hand controller baud rate (8 data bits, no parity, 1 stop bit)."""

RESPONSE_TIMEOUT: Final[float] = 3.5
"""Documented worst-case hand controller response time in seconds."""

POLL_INTERVAL: Final[float] = 0.01
"""Delay between checks for a pending reply, in seconds."""

INTER_BYTE_TIMEOUT: Final[float] = 0.05
"""Silence after which a reply is considered fully flushed, in seconds."""

RESPONSE_BUFFER_SIZE: Final[int] = 32
"""Largest reply read in a single call."""

# Framing
TERMINATOR: Final[bytes] = b"#"
"""Trailing byte of every reply."""

ACK: Final[bytes] = TERMINATOR
"""Reply to a command that returns no data."""

PASSTHROUGH_PREFIX: Final[bytes] = b"P"
"""Leading byte of a device-addressed command."""

MAX_PASSTHROUGH_ARGS: Final[int] = 3

# Angles
REVOLUTION: Final[int] = 0x100000000
"""Integer angle units in one full turn."""

FRACTION24: Final[int] = 0x1000000
"""Units in one full turn for 24-bit GPS fields."""

DEGREES_PER_REVOLUTION: Final[float] = 360.0

DEGREES_PER_HOUR_ANGLE: Final[float] = 15.0
"""Degrees of sky rotation per hour of Right Ascension."""

# Date fields
YEAR_OFFSET: Final[int] = 2000
"""Base of the two-digit year sent by the hand controller."""

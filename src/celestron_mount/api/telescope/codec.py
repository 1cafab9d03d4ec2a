"""
NexStar Angle Codec

The hand controller exchanges angles as 32-bit unsigned fractions of a full
revolution written as 8 uppercase hexadecimal ASCII digits:

    0x00000000 = 0°
    0x40000000 = 90°
    0x80000000 = 180°
    0xFFFFFFFF = 360° - 1 unit

Coordinate pairs are two such fields separated by a comma at offset 8.
Degrees outside [0, 360) are not clamped; they wrap modulo 2^32 when encoded.
"""

from __future__ import annotations

import string

import deal
from returns.result import Failure, Result, Success

from celestron_mount.api.core.constants import DEGREES_PER_REVOLUTION, FRACTION24, REVOLUTION
from celestron_mount.api.core.exceptions import MalformedAngleError


__all__ = [
    "ANGLE_FIELD_WIDTH",
    "COORDINATE_PAIR_WIDTH",
    "decode_angle",
    "decode_coordinate_pair",
    "decode_fraction24",
    "encode_angle",
    "encode_coordinate_pair",
    "slew_rate_bytes",
    "to_degrees",
    "to_int_angle",
]


ANGLE_FIELD_WIDTH = 8
COORDINATE_PAIR_WIDTH = 2 * ANGLE_FIELD_WIDTH + 1

_HEX_DIGITS = frozenset(string.hexdigits)


def decode_angle(raw: bytes | str) -> int:
    """
    Parse one 8-digit hexadecimal angle field.

    Args:
        raw: ASCII bytes or text of the field

    Returns:
        Integer angle in [0, 2^32)

    Raises:
        MalformedAngleError: If the field is not exactly 8 hex digits
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedAngleError(f"Angle field is not ASCII: {bytes(raw)!r}", bytes(raw)) from e
    else:
        text = raw

    # int() alone would also accept signs, whitespace, underscores and a 0x prefix
    if len(text) != ANGLE_FIELD_WIDTH or not _HEX_DIGITS.issuperset(text):
        raise MalformedAngleError(f"Invalid angle field: {text!r}", text.encode("ascii", "replace"))
    return int(text, 16)


def to_degrees(int_angle: int) -> float:
    """Convert an integer mount angle to degrees."""
    return int_angle / REVOLUTION * DEGREES_PER_REVOLUTION


def to_int_angle(degrees: float) -> int:
    """Convert degrees to an integer mount angle, truncating toward zero."""
    return int(degrees / DEGREES_PER_REVOLUTION * REVOLUTION)


def encode_angle(degrees: float) -> str:
    """
    Encode degrees as an 8-digit uppercase hexadecimal field.

    Args:
        degrees: Angle in degrees; values outside [0, 360) wrap

    Returns:
        8-character hexadecimal string
    """
    return f"{to_int_angle(degrees) % REVOLUTION:08X}"


def encode_coordinate_pair(first: float, second: float) -> bytes:
    """
    Encode a pair of angles (RA/Dec or Az/El) as the ``AAAAAAAA,BBBBBBBB`` payload.
    """
    return f"{encode_angle(first)},{encode_angle(second)}".encode("ascii")


def decode_coordinate_pair(payload: bytes) -> Result[tuple[float, float], str]:
    """
    Decode a coordinate pair payload.

    Args:
        payload: Reply without terminator, ``AAAAAAAA,BBBBBBBB``

    Returns:
        Success with (first_degrees, second_degrees) or Failure with error message
    """
    if len(payload) != COORDINATE_PAIR_WIDTH or payload[ANGLE_FIELD_WIDTH : ANGLE_FIELD_WIDTH + 1] != b",":
        return Failure(
            f"Invalid coordinate response format: expected {COORDINATE_PAIR_WIDTH} bytes "
            f"with comma at position {ANGLE_FIELD_WIDTH}, got {bytes(payload)!r}"
        )

    try:
        first = to_degrees(decode_angle(payload[:ANGLE_FIELD_WIDTH]))
        second = to_degrees(decode_angle(payload[ANGLE_FIELD_WIDTH + 1 : COORDINATE_PAIR_WIDTH]))
    except MalformedAngleError as e:
        return Failure(f"Failed to decode coordinate values: {e}")
    return Success((first, second))


def decode_fraction24(raw: bytes) -> float:
    """Convert a 24-bit big-endian fraction of a revolution to degrees."""
    return int.from_bytes(raw[:3], "big") / FRACTION24 * DEGREES_PER_REVOLUTION


@deal.pre(
    lambda rate: isinstance(rate, int) and not isinstance(rate, bool) and 0 <= rate * 4 <= 0xFFFF,
    message="Slew rate must be an integer 0-16383 arcsec/s",
)  # type: ignore[misc,arg-type]
def slew_rate_bytes(rate: int) -> tuple[int, int]:
    """
    Convert a slew rate in arcseconds/second to the motor's two rate bytes.

    The rate is sent in quarter arcseconds, high byte first.

    Args:
        rate: Rate in arcseconds/second

    Returns:
        Tuple of (high_byte, low_byte)
    """
    quarter_arcsec = rate * 4
    return quarter_arcsec // 256, quarter_arcsec % 256

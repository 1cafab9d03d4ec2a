"""
Field codecs for the binary date, time and location replies of the
hand controller and its GPS/RTC sub-devices.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from celestron_mount.api.core.constants import YEAR_OFFSET
from celestron_mount.api.core.exceptions import MalformedResponseError, UnknownEnumValueError
from celestron_mount.api.core.types import GeographicLocation


__all__ = [
    "decode_device_datetime",
    "decode_hand_control_time",
    "decode_location",
    "encode_hand_control_time",
    "encode_location",
    "signed_byte",
]


def signed_byte(value: int) -> int:
    """Interpret a byte as a two's complement signed value."""
    return value - 256 if value >= 128 else value


def _flag(name: str, value: int) -> bool:
    if value not in (0, 1):
        raise UnknownEnumValueError(name, value)
    return value == 1


def decode_hand_control_time(payload: bytes) -> datetime:
    """
    Decode the 8-byte reply of the ``h`` command.

    Layout: hour, minute, second, month, day, year - 2000, UTC offset in
    hours (signed), daylight saving flag. A cleared flag (0) means the local
    clock runs one hour ahead of the offset byte; a set flag (1) means the
    offset byte is the full UTC offset.

    Args:
        payload: Reply without its terminator

    Returns:
        Timezone-aware timestamp in UTC

    Raises:
        MalformedResponseError: If the fields do not form a valid date
        UnknownEnumValueError: If the daylight saving flag is not 0 or 1
    """
    if len(payload) != 8:
        raise MalformedResponseError(f"Time reply must be 8 bytes, got {len(payload)}", payload)

    hour, minute, second, month, day, year, offset, dst = payload
    utc_offset = signed_byte(offset) + (0 if _flag("daylight saving flag", dst) else 1)
    try:
        local = datetime(
            YEAR_OFFSET + year,
            month,
            day,
            hour,
            minute,
            second,
            tzinfo=timezone(timedelta(hours=utc_offset)),
        )
    except ValueError as e:
        raise MalformedResponseError(f"Invalid time data received: {e}", payload) from e
    return local.astimezone(UTC)


def encode_hand_control_time(when: datetime, dst: bool = False) -> bytes:
    """
    Encode a timestamp for the ``H`` command.

    The local fields are taken from ``when`` in its own timezone. With
    ``dst`` cleared the offset byte sent is one hour less than the actual
    UTC offset, mirroring ``decode_hand_control_time``.

    Args:
        when: Timezone-aware timestamp with a whole-hour UTC offset
        dst: Daylight saving flag sent as the last byte

    Returns:
        8 payload bytes
    """
    offset = when.utcoffset()
    if offset is None:
        raise ValueError("Timestamp must be timezone-aware")
    hours, rest = divmod(int(offset.total_seconds()), 3600)
    if rest:
        raise ValueError(f"UTC offset must be a whole number of hours, got {offset}")
    standard = hours - (0 if dst else 1)
    return bytes(
        [
            when.hour,
            when.minute,
            when.second,
            when.month,
            when.day,
            when.year - YEAR_OFFSET,
            standard % 256,
            1 if dst else 0,
        ]
    )


def decode_device_datetime(month_day: bytes, year: bytes, hms: bytes) -> datetime:
    """
    Combine the three passthrough replies of a GPS or RTC unit.

    Args:
        month_day: Two bytes, month then day
        year: Two bytes, big-endian full year
        hms: Three bytes, hour, minute, second

    Returns:
        Timezone-aware timestamp in UTC
    """
    try:
        return datetime(
            int.from_bytes(year[:2], "big"),
            month_day[0],
            month_day[1],
            hms[0],
            hms[1],
            hms[2],
            tzinfo=UTC,
        )
    except (ValueError, IndexError) as e:
        raise MalformedResponseError(
            f"Invalid device date received: {e}", bytes(month_day) + bytes(year) + bytes(hms)
        ) from e


def _to_dms(value: float) -> tuple[int, int, int]:
    total = round(abs(value) * 3600)
    degrees, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return degrees, minutes, seconds


def decode_location(payload: bytes) -> GeographicLocation:
    """
    Decode the 8-byte reply of the ``w`` command.

    Layout: latitude degrees, minutes, seconds, 0=N/1=S, then longitude
    degrees, minutes, seconds, 0=E/1=W.
    """
    if len(payload) != 8:
        raise MalformedResponseError(f"Location reply must be 8 bytes, got {len(payload)}", payload)

    lat_d, lat_m, lat_s, south, lon_d, lon_m, lon_s, west = payload
    latitude = lat_d + lat_m / 60.0 + lat_s / 3600.0
    longitude = lon_d + lon_m / 60.0 + lon_s / 3600.0
    if _flag("latitude hemisphere", south):
        latitude = -latitude
    if _flag("longitude hemisphere", west):
        longitude = -longitude
    return GeographicLocation(latitude=latitude, longitude=longitude)


def encode_location(latitude: float, longitude: float) -> bytes:
    """Encode a location for the ``W`` command, rounded to whole arcseconds."""
    lat_d, lat_m, lat_s = _to_dms(latitude)
    lon_d, lon_m, lon_s = _to_dms(longitude)
    return bytes(
        [
            lat_d,
            lat_m,
            lat_s,
            1 if latitude < 0 else 0,
            lon_d,
            lon_m,
            lon_s,
            1 if longitude < 0 else 0,
        ]
    )

"""
Celestron Mount Control Library

A Python driver for Celestron computerized mounts controlled through the
NexStar hand controller over a serial line.

Supports:
- Reading and setting pointing position (RA/Dec and Az/El)
- Goto, sync and manual slewing at fixed or variable rates
- Tracking mode, date/time and site location
- The optional GPS receiver and real-time clock

Example:
    >>> from celestron_mount import CelestronMount, TrackingMode
    >>> with CelestronMount.open('/dev/ttyUSB0') as mount:
    ...     print(mount.get_info())
    ...     mount.goto_ra_dec(83.82, -5.39)
    ...     while mount.is_goto_in_progress():
    ...         pass
    ...     mount.set_tracking_mode(TrackingMode.EQ_NORTH)
"""

# Enumerations
from celestron_mount.api.core.enums import Device, MountModel, SlewAxis, SlewDir, SlewRate, TrackingMode

# Exceptions
from celestron_mount.api.core.exceptions import (
    CapabilityNotSupportedError,
    CommandError,
    DeviceUnavailableError,
    GpsNotLinkedError,
    MalformedAngleError,
    MalformedResponseError,
    NexstarError,
    NotConnectedError,
    TelescopeConnectionError,
    TelescopeTimeoutError,
    UnexpectedResponseLengthError,
    UnknownEnumValueError,
)

# Type definitions
from celestron_mount.api.core.types import (
    EquatorialCoordinates,
    GeographicLocation,
    HorizontalCoordinates,
    TelescopeConfig,
    TelescopeInfo,
)

# Angle codec
from celestron_mount.api.telescope.codec import decode_angle, encode_angle, to_degrees, to_int_angle
from celestron_mount.api.telescope.gps import CelestronGps

# Main mount class
from celestron_mount.api.telescope.mount import CelestronMount
from celestron_mount.api.telescope.rtc import CelestronRtc


__version__ = "0.1.0"

__all__ = [
    "CapabilityNotSupportedError",
    "CelestronGps",
    # Main class
    "CelestronMount",
    "CelestronRtc",
    "CommandError",
    "Device",
    "DeviceUnavailableError",
    "EquatorialCoordinates",
    "GeographicLocation",
    "GpsNotLinkedError",
    "HorizontalCoordinates",
    "MalformedAngleError",
    "MalformedResponseError",
    "MountModel",
    # Exceptions
    "NexstarError",
    "NotConnectedError",
    "SlewAxis",
    "SlewDir",
    "SlewRate",
    "TelescopeConfig",
    "TelescopeConnectionError",
    "TelescopeInfo",
    "TelescopeTimeoutError",
    "TrackingMode",
    "UnexpectedResponseLengthError",
    "UnknownEnumValueError",
    "decode_angle",
    "encode_angle",
    "to_degrees",
    "to_int_angle",
]

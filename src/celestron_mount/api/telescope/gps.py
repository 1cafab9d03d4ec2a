"""
GPS receiver access through the hand controller.

Only GPS Series mounts expose a GPS sub-device. Its position and time
replies are meaningless until the receiver reports a link, so those
queries check the link first.
"""

from __future__ import annotations

import logging
from datetime import datetime

from celestron_mount.api.core.enums import Device
from celestron_mount.api.core.exceptions import GpsNotLinkedError
from celestron_mount.api.core.types import GeographicLocation
from celestron_mount.api.core.utils import decode_device_datetime
from celestron_mount.api.telescope.codec import decode_fraction24
from celestron_mount.api.telescope.protocol import NexStarProtocol


__all__ = ["CelestronGps"]


logger = logging.getLogger(__name__)


# GPS sub-device commands
GPS_GET_LAT = 1
GPS_GET_LONG = 2
GPS_GET_DATE = 3
GPS_GET_YEAR = 4
GPS_LINKED = 55
GPS_GET_TIME = 51
GET_VERSION = 254


def _signed_degrees(degrees: float) -> float:
    return degrees - 360.0 if degrees >= 180.0 else degrees


class CelestronGps:
    """
    GPS capability of a mount, obtained from ``CelestronMount.get_gps``.
    """

    def __init__(self, protocol: NexStarProtocol) -> None:
        self.protocol = protocol

    def is_linked(self) -> bool:
        """Whether the receiver currently has a fix."""
        return self.protocol.read_passthrough(Device.GPS_UNIT, GPS_LINKED, 1)[0] != 0

    def _require_link(self) -> None:
        if not self.is_linked():
            raise GpsNotLinkedError("GPS unit is not linked.")

    def get_location(self) -> GeographicLocation:
        """
        Get the receiver's position.

        Raises:
            GpsNotLinkedError: If the receiver has no fix
        """
        self._require_link()
        lat = decode_fraction24(self.protocol.read_passthrough(Device.GPS_UNIT, GPS_GET_LAT, 3))
        lon = decode_fraction24(self.protocol.read_passthrough(Device.GPS_UNIT, GPS_GET_LONG, 3))
        location = GeographicLocation(latitude=_signed_degrees(lat), longitude=_signed_degrees(lon))
        logger.debug(f"GPS location: {location}")
        return location

    def get_datetime(self) -> datetime:
        """
        Get the receiver's UTC date and time.

        Raises:
            GpsNotLinkedError: If the receiver has no fix
        """
        self._require_link()
        month_day = self.protocol.read_passthrough(Device.GPS_UNIT, GPS_GET_DATE, 2)
        year = self.protocol.read_passthrough(Device.GPS_UNIT, GPS_GET_YEAR, 2)
        hms = self.protocol.read_passthrough(Device.GPS_UNIT, GPS_GET_TIME, 3)
        return decode_device_datetime(month_day, year, hms)

    def get_device_version(self) -> str:
        """Get the receiver firmware version as "major.minor"."""
        major, minor = self.protocol.read_passthrough(Device.GPS_UNIT, GET_VERSION, 2)
        return f"{major}.{minor}"

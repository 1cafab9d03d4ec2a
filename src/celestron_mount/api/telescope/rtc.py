"""
Real-time clock access through the hand controller.

The RTC has no command that sets the full date and time at once. Setting it
takes three separate passthrough writes (month/day, year, time); if one of
them fails the clock is left partly updated. That state is reported, not
repaired.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import deal

from celestron_mount.api.core.enums import Device
from celestron_mount.api.core.exceptions import NexstarError
from celestron_mount.api.core.utils import decode_device_datetime
from celestron_mount.api.telescope.protocol import NexStarProtocol


__all__ = ["CelestronRtc"]


logger = logging.getLogger(__name__)


# RTC sub-device commands
RTC_GET_DATE = 3
RTC_GET_YEAR = 4
RTC_GET_TIME = 51
RTC_SET_DATE = 131
RTC_SET_YEAR = 132
RTC_SET_TIME = 179
GET_VERSION = 254


class CelestronRtc:
    """
    Real-time clock capability of a mount, obtained from ``CelestronMount.get_rtc``.

    The clock keeps UTC.
    """

    def __init__(self, protocol: NexStarProtocol) -> None:
        self.protocol = protocol

    def get_datetime(self) -> datetime:
        """Get the clock's current UTC date and time."""
        month_day = self.protocol.read_passthrough(Device.RTC_UNIT, RTC_GET_DATE, 2)
        year = self.protocol.read_passthrough(Device.RTC_UNIT, RTC_GET_YEAR, 2)
        hms = self.protocol.read_passthrough(Device.RTC_UNIT, RTC_GET_TIME, 3)
        return decode_device_datetime(month_day, year, hms)

    @deal.pre(
        lambda self, when=None: when is None or when.tzinfo is not None,
        message="Timestamp must be timezone-aware",
    )  # type: ignore[misc,arg-type]
    def set_datetime(self, when: datetime | None = None) -> None:
        """
        Set the clock, by default to the current time.

        Args:
            when: Timezone-aware timestamp; converted to UTC before sending

        Raises:
            NexstarError: If any of the three writes fails. Writes that
                already succeeded are not rolled back.
        """
        use_now = when is None
        when = datetime.now(UTC) if when is None else when.astimezone(UTC)

        self._write_step("date", RTC_SET_DATE, bytes([when.month, when.day]))
        self._write_step("year", RTC_SET_YEAR, when.year.to_bytes(2, "big"))

        if use_now:
            # Each date write costs a round trip
            when = datetime.now(UTC)
        self._write_step("time", RTC_SET_TIME, bytes([when.hour, when.minute, when.second]))
        logger.info(f"RTC set to {when.isoformat()}")

    def _write_step(self, name: str, command: int, args: bytes) -> None:
        try:
            self.protocol.write_passthrough(Device.RTC_UNIT, command, args)
        except NexstarError:
            logger.warning(f"RTC {name} write failed; the clock may hold a partly updated date and time")
            raise

    def get_device_version(self) -> str:
        """Get the clock firmware version as "major.minor"."""
        major, minor = self.protocol.read_passthrough(Device.RTC_UNIT, GET_VERSION, 2)
        return f"{major}.{minor}"

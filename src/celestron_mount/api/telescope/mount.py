"""
Celestron Mount API

High-level interface for pointing, moving and querying a Celestron mount
through its NexStar hand controller.

The driver holds no motion state: a goto or slew returns as soon as the
hand controller acknowledges it, and callers poll ``is_goto_in_progress``
to observe the mount returning to idle. Every method is exactly one command
round trip (``get_info`` and the capability accessors excepted) and nothing
is retried.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from types import TracebackType
from typing import Any

import deal
from returns.result import Failure, Result, Success

from celestron_mount.api.core.constants import POLL_INTERVAL, RESPONSE_TIMEOUT, YEAR_OFFSET
from celestron_mount.api.core.enums import (
    Device,
    MountModel,
    SlewAxis,
    SlewDir,
    SlewRate,
    TrackingMode,
    decode_enum,
)
from celestron_mount.api.core.exceptions import (
    CapabilityNotSupportedError,
    DeviceUnavailableError,
    MalformedResponseError,
    UnknownEnumValueError,
)
from celestron_mount.api.core.types import (
    EquatorialCoordinates,
    GeographicLocation,
    HorizontalCoordinates,
    TelescopeConfig,
    TelescopeInfo,
)
from celestron_mount.api.core.utils import (
    decode_hand_control_time,
    decode_location,
    encode_hand_control_time,
    encode_location,
)
from celestron_mount.api.telescope.codec import (
    COORDINATE_PAIR_WIDTH,
    decode_coordinate_pair,
    encode_coordinate_pair,
    slew_rate_bytes,
)
from celestron_mount.api.telescope.gps import CelestronGps
from celestron_mount.api.telescope.protocol import NexStarProtocol
from celestron_mount.api.telescope.rtc import CelestronRtc
from celestron_mount.api.telescope.transport import SerialChannelOwner, SerialTransport, open_serial_channel


__all__ = ["GPS_MODELS", "MAX_VARIABLE_RATE", "CelestronMount"]


logger = logging.getLogger(__name__)


MAX_VARIABLE_RATE = 0xFFFF // 4
"""Fastest variable slew rate in arcseconds/second."""

GPS_MODELS = frozenset({MountModel.GPS_SERIES})
"""Models that carry a GPS receiver."""

# The hand controller stores the year as a single byte after 2000
MIN_YEAR = YEAR_OFFSET
MAX_YEAR = YEAR_OFFSET + 0xFF

# Motor controller commands
MC_MOVE_POSITIVE = 6
MC_MOVE_NEGATIVE = 7
MC_FIXED_POSITIVE = 36
MC_FIXED_NEGATIVE = 37
GET_VERSION = 254


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class CelestronMount:
    """
    High-level interface for controlling a Celestron mount.

    One worker thread owns the serial channel for the lifetime of the
    instance, so methods may be called from any thread; calls execute one
    at a time in the order they are made.

    Args:
        channel: Already-open serial channel (``serial.Serial`` or equivalent)
        timeout: Longest wait for a reply in seconds
        poll_interval: Delay between checks for a pending reply in seconds

    Example:
        >>> from celestron_mount import CelestronMount, TrackingMode
        >>> with CelestronMount.open('/dev/ttyUSB0') as mount:
        ...     print(mount.get_position_ra_dec())
        ...     mount.set_tracking_mode(TrackingMode.EQ_NORTH)
    """

    def __init__(self, channel: Any, timeout: float = RESPONSE_TIMEOUT, poll_interval: float = POLL_INTERVAL) -> None:
        self.owner = SerialChannelOwner(SerialTransport(channel, timeout=timeout, poll_interval=poll_interval))
        self.protocol = NexStarProtocol(self.owner)

    @classmethod
    def open(cls, config: TelescopeConfig | str | None = None) -> CelestronMount:
        """
        Open the serial port and create a mount driver on it.

        Args:
            config: TelescopeConfig object or port string.
                If None, uses the ``CELESTRON_MOUNT_*`` environment or defaults

        Raises:
            TelescopeConnectionError: If the port cannot be opened
        """
        if config is None:
            config = TelescopeConfig.from_env()
        elif isinstance(config, str):
            config = TelescopeConfig(port=config)

        # Set up logging based on verbosity
        if config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        channel = open_serial_channel(config)
        return cls(channel, timeout=config.timeout, poll_interval=config.poll_interval)

    def close(self) -> None:
        """Release the serial channel. Further calls raise ``NotConnectedError``."""
        self.owner.close()

    @property
    def is_open(self) -> bool:
        return self.owner.is_open

    def __enter__(self) -> CelestronMount:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ========== Position ==========

    def _get_coordinate_pair(self, opcode: str) -> tuple[float, float]:
        payload = self.protocol.read_hand_control(opcode, COORDINATE_PAIR_WIDTH)
        result = decode_coordinate_pair(payload)
        if isinstance(result, Failure):
            raise MalformedResponseError(result.failure(), payload)
        return result.unwrap()

    def get_position_ra_dec(self) -> EquatorialCoordinates:
        """
        Get the current pointing position in right ascension and declination.

        Command: e#
        Response: RRRRRRRR,DDDDDDDD#
        """
        ra, dec = self._get_coordinate_pair("e")
        return EquatorialCoordinates(ra_degrees=ra, dec_degrees=dec)

    def get_position_az_el(self) -> HorizontalCoordinates:
        """
        Get the current pointing position in azimuth and elevation.

        Command: z#
        Response: AAAAAAAA,EEEEEEEE#
        """
        az, el = self._get_coordinate_pair("z")
        return HorizontalCoordinates(azimuth=az, elevation=el)

    # ========== Goto / Sync ==========

    @deal.pre(lambda self, ra_degrees, dec_degrees: _finite(ra_degrees, dec_degrees), message="Coordinates must be finite")  # type: ignore[misc,arg-type]
    def goto_ra_dec(self, ra_degrees: float, dec_degrees: float) -> None:
        """
        Start a goto to right ascension and declination.

        Returns once the hand controller acknowledges; poll
        ``is_goto_in_progress`` for arrival. Does nothing useful on an
        unaligned mount.

        Command: r<RA>,<DEC>
        Response: #

        Args:
            ra_degrees: Right Ascension in degrees
            dec_degrees: Declination in degrees; negative values wrap
        """
        logger.debug(f"GOTO RA/Dec: {ra_degrees}, {dec_degrees}")
        self.protocol.write_hand_control("r", encode_coordinate_pair(ra_degrees, dec_degrees))

    @deal.pre(lambda self, azimuth, elevation: _finite(azimuth, elevation), message="Coordinates must be finite")  # type: ignore[misc,arg-type]
    def goto_az_el(self, azimuth: float, elevation: float) -> None:
        """
        Start a goto to azimuth and elevation.

        Relative to the power-on position if the mount is not aligned.

        Command: r<AZ>,<EL>
        Response: #
        """
        logger.debug(f"GOTO Az/El: {azimuth}, {elevation}")
        self.protocol.write_hand_control("r", encode_coordinate_pair(azimuth, elevation))

    @deal.pre(lambda self, ra_degrees, dec_degrees: _finite(ra_degrees, dec_degrees), message="Coordinates must be finite")  # type: ignore[misc,arg-type]
    def sync(self, ra_degrees: float, dec_degrees: float) -> None:
        """
        Tell the mount it is pointing at the given coordinates.

        Improves the pointing of later gotos by trusting this position.
        The hand controller's handling of sync is only partly documented.

        Command: s<RA>,<DEC>
        Response: #
        """
        self.protocol.write_hand_control("s", encode_coordinate_pair(ra_degrees, dec_degrees))

    def is_goto_in_progress(self) -> bool:
        """
        Check if a goto is in progress.

        Command: L#
        Response: 0# or 1#
        """
        status = self.protocol.read_hand_control("L", 1)[0]
        if status == ord("0"):
            return False
        if status == ord("1"):
            return True
        raise UnknownEnumValueError("goto status", status)

    def cancel_goto(self) -> None:
        """
        Cancel the goto in progress.

        Command: Q#
        Response: <0>#
        """
        status = self.protocol.read_hand_control("Q", 1)[0]
        if status != 0:
            raise UnknownEnumValueError("cancel goto status", status)

    def is_aligned(self) -> bool:
        """
        Check whether the mount has completed an alignment.

        Command: J#
        Response: <0|1>#
        """
        status = self.protocol.read_hand_control("J", 1)[0]
        if status not in (0, 1):
            raise UnknownEnumValueError("alignment status", status)
        return status == 1

    # ========== Tracking ==========

    def get_tracking_mode(self) -> TrackingMode:
        """
        Get the tracking mode.

        Command: t#
        Response: <mode>#
        """
        return decode_enum(TrackingMode, self.protocol.read_hand_control("t", 1)[0])

    @deal.pre(lambda self, mode: isinstance(mode, TrackingMode), message="Mode must be a TrackingMode")  # type: ignore[misc,arg-type]
    def set_tracking_mode(self, mode: TrackingMode) -> None:
        """
        Set the tracking mode.

        Command: T<mode>
        Response: #
        """
        self.protocol.write_hand_control("T", bytes([mode]))

    # ========== Slewing ==========

    @deal.pre(
        lambda self, axis, direction, rate: isinstance(axis, SlewAxis) and isinstance(direction, SlewDir),
        message="Axis and direction must be SlewAxis and SlewDir",
    )  # type: ignore[misc,arg-type]
    @deal.pre(
        lambda self, axis, direction, rate: isinstance(rate, int)
        and not isinstance(rate, bool)
        and 0 <= rate <= MAX_VARIABLE_RATE,
        message=f"Rate must be 0-{MAX_VARIABLE_RATE} arcsec/s",
    )  # type: ignore[misc,arg-type]
    def slew_variable(self, axis: SlewAxis, direction: SlewDir, rate: int) -> None:
        """
        Start a slew at a caller-chosen speed.

        Command: P<3><motor><6|7><rate_hi><rate_lo><0><0>
        Response: #

        Args:
            axis: Axis to slew
            direction: Direction to slew
            rate: Speed in arcseconds/second; 0 stops the axis
        """
        command = MC_MOVE_POSITIVE if direction is SlewDir.POSITIVE else MC_MOVE_NEGATIVE
        self.protocol.write_passthrough(axis.motor, command, bytes(slew_rate_bytes(rate)))

    @deal.pre(
        lambda self, axis, direction, rate: isinstance(axis, SlewAxis)
        and isinstance(direction, SlewDir)
        and isinstance(rate, SlewRate),
        message="Axis, direction and rate must be SlewAxis, SlewDir and SlewRate",
    )  # type: ignore[misc,arg-type]
    def slew_fixed(self, axis: SlewAxis, direction: SlewDir, rate: SlewRate) -> None:
        """
        Start a slew at one of the hand controller's predefined speeds.

        Command: P<2><motor><36|37><rate><0><0><0>
        Response: #
        """
        command = MC_FIXED_POSITIVE if direction is SlewDir.POSITIVE else MC_FIXED_NEGATIVE
        self.protocol.write_passthrough(axis.motor, command, bytes([rate]))

    def stop_slew(self, axis: SlewAxis) -> None:
        """
        Stop an axis.

        Sent as a positive variable-rate slew at rate zero; some hand
        controllers have no separate stop command.
        """
        self.slew_variable(axis, SlewDir.POSITIVE, 0)

    # ========== Time and location ==========

    def get_time(self) -> datetime:
        """
        Get the hand controller's date and time.

        Command: h#
        Response: <H><M><S><month><day><year><offset><dst># (8 bytes)

        Returns:
            Timezone-aware timestamp in UTC
        """
        return decode_hand_control_time(self.protocol.read_hand_control("h", 8))

    @deal.pre(
        lambda self, when, dst=False: when.tzinfo is not None and when.utcoffset() is not None,
        message="Timestamp must be timezone-aware",
    )  # type: ignore[misc,arg-type]
    @deal.pre(
        lambda self, when, dst=False: MIN_YEAR <= when.year <= MAX_YEAR,
        message=f"Year must be {MIN_YEAR}-{MAX_YEAR}",
    )  # type: ignore[misc,arg-type]
    @deal.pre(
        lambda self, when, dst=False: when.utcoffset() is None
        or when.utcoffset() % timedelta(hours=1) == timedelta(0),
        message="UTC offset must be a whole number of hours",
    )  # type: ignore[misc,arg-type]
    def set_time(self, when: datetime, dst: bool = False) -> None:
        """
        Set the hand controller's date and time.

        Command: H<H><M><S><month><day><year><offset><dst>
        Response: #

        Args:
            when: Local time with a whole-hour UTC offset
            dst: Daylight saving flag sent as the last byte
        """
        self.protocol.write_hand_control("H", encode_hand_control_time(when, dst))

    def get_location(self) -> GeographicLocation:
        """
        Get the observing site stored in the hand controller.

        Command: w#
        Response: <lat d><m><s><N|S><lon d><m><s><E|W># (8 bytes)
        """
        return decode_location(self.protocol.read_hand_control("w", 8))

    @deal.pre(
        lambda self, latitude, longitude: -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0,
        message="Latitude must be -90 to 90 and longitude -180 to 180 degrees",
    )  # type: ignore[misc,arg-type]
    def set_location(self, latitude: float, longitude: float) -> None:
        """
        Store the observing site in the hand controller.

        Command: W<lat d><m><s><N|S><lon d><m><s><E|W>
        Response: #
        """
        self.protocol.write_hand_control("W", encode_location(latitude, longitude))

    # ========== Identification ==========

    @deal.pre(lambda self, char="x": len(char) == 1 and char.isascii(), message="Char must be a single ASCII character")  # type: ignore[misc,arg-type]
    def echo(self, char: str = "x") -> bool:
        """
        Test the link: the hand controller repeats one character back.

        Command: K<char>
        Response: <char>#
        """
        return self.protocol.read_hand_control("K", 1, char.encode("ascii")) == char.encode("ascii")

    def get_version(self) -> str:
        """
        Get the hand controller firmware version.

        Command: V#
        Response: <major><minor>#

        Returns:
            Version as "major.minor"
        """
        major, minor = self.protocol.read_hand_control("V", 2)
        return f"{major}.{minor}"

    @deal.pre(
        lambda self, device: isinstance(device, Device) and device is not Device.GPS_UNIT,
        message="Use get_gps() for the GPS unit",
    )  # type: ignore[misc,arg-type]
    def get_device_version(self, device: Device) -> str:
        """
        Get the firmware version of a motor controller or the RTC.

        Command: P<1><device><254><0><0><0><2>
        Response: <major><minor>#
        """
        major, minor = self.protocol.read_passthrough(device, GET_VERSION, 2)
        return f"{major}.{minor}"

    def get_model(self) -> MountModel:
        """
        Get the mount model.

        Command: m#
        Response: <model>#

        Raises:
            UnknownEnumValueError: If the model code is not in the known table
        """
        return decode_enum(MountModel, self.protocol.read_hand_control("m", 1)[0])

    def get_info(self) -> TelescopeInfo:
        """Get model and hand controller firmware version."""
        return TelescopeInfo(model=self.get_model(), version=self.get_version())

    # ========== Optional units ==========

    def try_get_gps(self) -> Result[CelestronGps, CapabilityNotSupportedError]:
        """
        Get the GPS capability if this model has a GPS receiver.

        Returns:
            Success with the GPS accessor, or Failure naming the model
        """
        model = self.get_model()
        if model not in GPS_MODELS:
            return Failure(CapabilityNotSupportedError("GPS", model))
        return Success(CelestronGps(self.protocol))

    def get_gps(self) -> CelestronGps:
        """
        Get the GPS capability.

        Raises:
            CapabilityNotSupportedError: If this model has no GPS receiver
        """
        result = self.try_get_gps()
        if isinstance(result, Failure):
            raise result.failure()
        return result.unwrap()

    def try_get_rtc(self) -> Result[CelestronRtc, CapabilityNotSupportedError]:
        """
        Get the real-time clock capability if the mount answers for one.

        Probes the RTC with a version query.
        """
        try:
            self.protocol.read_passthrough(Device.RTC_UNIT, GET_VERSION, 2)
        except DeviceUnavailableError:
            return Failure(CapabilityNotSupportedError("RTC"))
        return Success(CelestronRtc(self.protocol))

    def get_rtc(self) -> CelestronRtc:
        """
        Get the real-time clock capability.

        Raises:
            CapabilityNotSupportedError: If the mount has no RTC
        """
        result = self.try_get_rtc()
        if isinstance(result, Failure):
            raise result.failure()
        return result.unwrap()

"""
Protocol Enumerations

Closed sets of codes defined by the NexStar protocol. Every member maps
directly to the byte sent to, or received from, the mount.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TypeVar

from celestron_mount.api.core.exceptions import UnknownEnumValueError


__all__ = [
    "Device",
    "MountModel",
    "SlewAxis",
    "SlewDir",
    "SlewRate",
    "TrackingMode",
    "decode_enum",
]


_E = TypeVar("_E", bound=IntEnum)


class TrackingMode(IntEnum):
    """Telescope tracking modes."""

    OFF = 0
    ALT_AZ = 1  # Alt-azimuth tracking
    EQ_NORTH = 2  # Equatorial, northern hemisphere
    EQ_SOUTH = 3  # Equatorial, southern hemisphere


class SlewAxis(IntEnum):
    """Mount axes that can be slewed."""

    RA_AZ = 0
    DEC_EL = 1

    @property
    def motor(self) -> Device:
        """Motor controller that drives this axis."""
        return Device.AZ_RA_MOTOR if self is SlewAxis.RA_AZ else Device.EL_DEC_MOTOR


class SlewDir(IntEnum):
    """Direction of a slew along an axis."""

    POSITIVE = 0
    NEGATIVE = 1


class SlewRate(IntEnum):
    """Predefined slew speeds of the hand controller."""

    STOP = 0
    RATE_1 = 1  # 2x sidereal
    RATE_2 = 2  # 4x sidereal
    RATE_3 = 3  # 8x sidereal
    RATE_4 = 4  # 16x sidereal
    RATE_5 = 5  # 32x sidereal
    RATE_6 = 6  # 0.5°/sec
    RATE_7 = 7  # 1°/sec
    RATE_8 = 8  # 3°/sec
    RATE_9 = 9  # 5°/sec


class Device(IntEnum):
    """Sub-devices reachable through passthrough commands."""

    AZ_RA_MOTOR = 16
    EL_DEC_MOTOR = 17
    GPS_UNIT = 176
    RTC_UNIT = 178

    @property
    def label(self) -> str:
        return _DEVICE_LABELS[self]

    def __str__(self) -> str:
        return self.label


_DEVICE_LABELS = {
    Device.AZ_RA_MOTOR: "Azimuth/RA Motor",
    Device.EL_DEC_MOTOR: "Elevation/Dec Motor",
    Device.GPS_UNIT: "GPS Unit",
    Device.RTC_UNIT: "RTC Unit",
}


class MountModel(IntEnum):
    """Hardware models reported by the ``m`` command."""

    GPS_SERIES = 1
    I_SERIES = 3
    I_SERIES_SE = 4
    CGE = 5
    ADVANCED_GT = 6
    SLT = 7
    CPC = 9
    GT = 10
    SE_4_5 = 11
    SE_6_8 = 12
    CGEM = 14
    ADVANCED_VX = 20
    EVOLUTION = 22

    @property
    def label(self) -> str:
        """Marketing name of the model."""
        return _MODEL_LABELS[self]

    def __str__(self) -> str:
        return self.label


_MODEL_LABELS = {
    MountModel.GPS_SERIES: "GPS Series",
    MountModel.I_SERIES: "i-Series",
    MountModel.I_SERIES_SE: "i-Series SE",
    MountModel.CGE: "CGE",
    MountModel.ADVANCED_GT: "Advanced GT",
    MountModel.SLT: "SLT",
    MountModel.CPC: "CPC",
    MountModel.GT: "GT",
    MountModel.SE_4_5: "4/5 SE",
    MountModel.SE_6_8: "6/8 SE",
    MountModel.CGEM: "CGEM",
    MountModel.ADVANCED_VX: "Advanced VX",
    MountModel.EVOLUTION: "Evolution",
}


def decode_enum(enum_type: type[_E], value: int) -> _E:
    """
    Map a byte received from the mount onto a protocol enumeration.

    Args:
        enum_type: Enumeration the byte belongs to
        value: Raw byte value

    Returns:
        The matching member

    Raises:
        UnknownEnumValueError: If the byte is not a known code
    """
    try:
        return enum_type(value)
    except ValueError:
        raise UnknownEnumValueError(enum_type.__name__, value) from None

"""
Type definitions for Celestron mount control.

This module contains the dataclasses passed between the facade and its
callers, and the connection configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from celestron_mount.api.core.constants import (
    BAUDRATE,
    DEGREES_PER_HOUR_ANGLE,
    INTER_BYTE_TIMEOUT,
    POLL_INTERVAL,
    RESPONSE_TIMEOUT,
)
from celestron_mount.api.core.enums import MountModel


__all__ = [
    "EquatorialCoordinates",
    "GeographicLocation",
    "HorizontalCoordinates",
    "TelescopeConfig",
    "TelescopeInfo",
]


@dataclass(frozen=True)
class EquatorialCoordinates:
    """
    Equatorial coordinate system (RA/Dec) as reported by the mount.

    Both values are raw mount angles in degrees, each a fraction of a full
    revolution in [0, 360). A southern declination is reported as 360 minus
    its magnitude; ``dec_signed`` folds it back into [-180, 180).

    Attributes:
        ra_degrees: Right Ascension in degrees
        dec_degrees: Declination in degrees
    """

    ra_degrees: float
    dec_degrees: float

    @property
    def ra_hours(self) -> float:
        return self.ra_degrees / DEGREES_PER_HOUR_ANGLE

    @property
    def dec_signed(self) -> float:
        return self.dec_degrees - 360.0 if self.dec_degrees >= 180.0 else self.dec_degrees

    def __str__(self) -> str:
        return f"RA {self.ra_degrees:.4f}°, Dec {self.dec_degrees:.4f}°"


@dataclass(frozen=True)
class HorizontalCoordinates:
    """
    Horizontal coordinate system (Az/El) as reported by the mount.

    Attributes:
        azimuth: Azimuth in degrees
        elevation: Elevation in degrees, below-horizon values wrap past 360
    """

    azimuth: float
    elevation: float

    def __str__(self) -> str:
        return f"Az {self.azimuth:.4f}°, El {self.elevation:.4f}°"


@dataclass(frozen=True)
class GeographicLocation:
    """
    Observer's geographic location on Earth.

    Attributes:
        latitude: Latitude in degrees (-90 to +90, positive=North, negative=South)
        longitude: Longitude in degrees (-180 to +180, positive=East, negative=West)
    """

    latitude: float
    longitude: float

    def __str__(self) -> str:
        lat_dir = "N" if self.latitude >= 0 else "S"
        lon_dir = "E" if self.longitude >= 0 else "W"
        return f"{abs(self.latitude):.4f}°{lat_dir}, {abs(self.longitude):.4f}°{lon_dir}"


@dataclass(frozen=True)
class TelescopeInfo:
    """
    Mount hardware information.

    Attributes:
        model: Hardware model
        version: Hand controller firmware version, "major.minor"
    """

    model: MountModel
    version: str

    def __str__(self) -> str:
        return f"{self.model.label}, Firmware {self.version}"


@dataclass
class TelescopeConfig:
    """
    Configuration for the serial connection to the hand controller.

    Attributes:
        port: Serial port path (e.g., '/dev/ttyUSB0' on Linux, 'COM3' on Windows)
        baudrate: Communication speed (fixed at 9600 by the hand controller)
        timeout: Longest wait for a reply in seconds
        poll_interval: Delay between checks for a pending reply in seconds
        inter_byte_timeout: Silence that ends a reply in seconds
        verbose: Enable debug logging
    """

    port: str = "/dev/ttyUSB0"
    baudrate: int = BAUDRATE
    timeout: float = RESPONSE_TIMEOUT
    poll_interval: float = POLL_INTERVAL
    inter_byte_timeout: float = INTER_BYTE_TIMEOUT
    verbose: bool = False

    @classmethod
    def from_env(cls) -> TelescopeConfig:
        """
        Build a configuration from ``CELESTRON_MOUNT_*`` environment variables.

        Unset variables keep their defaults.
        """
        config = cls()
        if port := os.getenv("CELESTRON_MOUNT_PORT"):
            config.port = port
        if timeout := os.getenv("CELESTRON_MOUNT_TIMEOUT"):
            config.timeout = float(timeout)
        config.verbose = os.getenv("CELESTRON_MOUNT_VERBOSE", "false").lower() in ("true", "1", "yes")
        return config

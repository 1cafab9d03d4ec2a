"""
Custom exception classes for Celestron mount control.

This module defines specific exceptions for the different ways a round trip
with the hand controller can fail. Every error surfaces to the caller; the
driver never retries and never substitutes a default value.
"""

from __future__ import annotations


__all__ = [
    "CapabilityNotSupportedError",
    "CommandError",
    "DeviceUnavailableError",
    "GpsNotLinkedError",
    "MalformedAngleError",
    "MalformedResponseError",
    # Base exception
    "NexstarError",
    "NotConnectedError",
    "TelescopeConnectionError",
    "TelescopeTimeoutError",
    "UnexpectedResponseLengthError",
    "UnknownEnumValueError",
]


class NexstarError(Exception):
    """
    Base exception for all NexStar mount errors.

    All custom exceptions in this library inherit from this base class,
    making it easy to catch all mount-related errors.
    """

    pass


class TelescopeConnectionError(NexstarError):
    """
    Raised when the serial line itself fails.

    This can occur when:
    - Serial port cannot be opened
    - A write is rejected or only partially sent
    - USB cable is disconnected mid-command
    """

    pass


class NotConnectedError(NexstarError):
    """
    Raised when attempting to send commands after the driver was closed.
    """

    pass


class TelescopeTimeoutError(NexstarError):
    """
    Raised when the mount does not answer within the response deadline.

    This indicates a broken physical link, which may mean:
    - Mount is not powered on
    - Communication cable is faulty
    - Hand controller is stuck in a menu
    """

    pass


class CommandError(NexstarError):
    """
    Raised when a command returns data that cannot be interpreted.
    """

    pass


class MalformedResponseError(CommandError):
    """
    Raised when a reply breaks the framing rules.

    The raw bytes received are kept on ``raw`` for diagnostics.
    """

    def __init__(self, message: str, raw: bytes = b"") -> None:
        super().__init__(message)
        self.raw = bytes(raw)


class UnexpectedResponseLengthError(MalformedResponseError):
    """Raised when a reply's payload length does not match its command."""

    def __init__(self, command: str, expected: int, raw: bytes) -> None:
        payload_len = max(len(raw) - 1, 0)
        super().__init__(
            f"Command {command!r} expected {expected} data bytes, got {payload_len}: {bytes(raw)!r}",
            raw,
        )
        self.command = command
        self.expected = expected


class MalformedAngleError(MalformedResponseError):
    """Raised when an angle field is not 8 hexadecimal ASCII digits."""

    pass


class DeviceUnavailableError(NexstarError):
    """
    Raised when a passthrough command addresses an absent sub-device or
    a command the sub-device rejects.

    This is an expected condition on hardware without optional units
    (for example a mount with no GPS receiver) and callers may recover
    from it.
    """

    def __init__(self, device: object, command: int) -> None:
        label = getattr(device, "label", device)
        super().__init__(f"Device {label} is unavailable or command {command} is invalid.")
        self.device = device
        self.command = command


class UnknownEnumValueError(NexstarError):
    """Raised when a received byte is not a known protocol code."""

    def __init__(self, enum_name: str, value: int) -> None:
        super().__init__(f"Unknown {enum_name} value: {value}")
        self.enum_name = enum_name
        self.value = value


class CapabilityNotSupportedError(NexstarError):
    """Raised when the connected model does not offer an optional unit."""

    def __init__(self, capability: str, model: object = None) -> None:
        if model is None:
            super().__init__(f"No {capability} device on this mount.")
        else:
            super().__init__(f"No {capability} device on model {getattr(model, 'label', model)}.")
        self.capability = capability
        self.model = model


class GpsNotLinkedError(NexstarError):
    """Raised when GPS data is requested before the receiver has a fix."""

    pass

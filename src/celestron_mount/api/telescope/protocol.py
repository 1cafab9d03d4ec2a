"""
NexStar Communication Protocol Implementation

This module builds and interprets the two command dialects of the NexStar
hand controller:

- Direct commands: one ASCII opcode, optionally followed by a payload.
  The reply is ``<data>#`` where the data length is fixed per opcode.
- Passthrough commands: an 8-byte frame routed by the hand controller to
  an internal sub-device (motor controller, GPS receiver, real-time clock):

      'P', argc + 1, device, command, arg0, arg1, arg2, reply_length

  A reply of ``reply_length + 1`` bytes is a success. A reply one byte longer
  means the device is absent or rejected the command. Any other length is a
  framing error.

Commands that return no data are still answered with a bare '#', which must
always be read so it cannot corrupt the next reply.
"""

from __future__ import annotations

import logging
from typing import Protocol

import deal
from returns.result import Failure, Result, Success

from celestron_mount.api.core.constants import ACK, MAX_PASSTHROUGH_ARGS, PASSTHROUGH_PREFIX, TERMINATOR
from celestron_mount.api.core.enums import Device
from celestron_mount.api.core.exceptions import (
    DeviceUnavailableError,
    MalformedResponseError,
    NexstarError,
    UnexpectedResponseLengthError,
)


__all__ = [
    "CommandLink",
    "NexStarProtocol",
    "build_hand_control_frame",
    "build_passthrough_frame",
    "parse_hand_control_response",
    "parse_passthrough_response",
]


logger = logging.getLogger(__name__)


class CommandLink(Protocol):
    """Anything that can run one frame/reply round trip."""

    def exchange(self, frame: bytes) -> bytes: ...


def _opcode(opcode: bytes | str) -> bytes:
    return opcode.encode("ascii") if isinstance(opcode, str) else bytes(opcode)


@deal.pre(lambda opcode, args=b"": len(_opcode(opcode)) == 1, message="Opcode must be a single byte")  # type: ignore[misc,arg-type]
def build_hand_control_frame(opcode: bytes | str, args: bytes = b"") -> bytes:
    """
    Build a direct hand controller command.

    Args:
        opcode: Single ASCII command character
        args: Command payload

    Returns:
        Frame bytes
    """
    return _opcode(opcode) + bytes(args)


@deal.pre(
    lambda device, command, args=b"", response_len=0: len(args) <= MAX_PASSTHROUGH_ARGS,
    message="Passthrough commands take at most 3 argument bytes",
)  # type: ignore[misc,arg-type]
@deal.pre(
    lambda device, command, args=b"", response_len=0: 0 <= command <= 0xFF and 0 <= response_len <= 0xFF,
    message="Command and response length must fit in one byte",
)  # type: ignore[misc,arg-type]
def build_passthrough_frame(device: Device, command: int, args: bytes = b"", response_len: int = 0) -> bytes:
    """
    Build an 8-byte passthrough command.

    Args:
        device: Target sub-device
        command: Sub-device command code
        args: Up to 3 argument bytes, zero padded
        response_len: Number of data bytes expected back

    Returns:
        Frame bytes
    """
    padded = bytes(args).ljust(MAX_PASSTHROUGH_ARGS, b"\x00")
    return PASSTHROUGH_PREFIX + bytes([len(args) + 1, int(device), command]) + padded + bytes([response_len])


def parse_hand_control_response(raw: bytes, expected_len: int, command: str = "") -> Result[bytes, NexstarError]:
    """
    Strip the terminator from a direct command reply and check its length.

    Args:
        raw: Full reply including terminator
        expected_len: Data bytes the opcode returns
        command: Opcode, for error messages

    Returns:
        Success with the data bytes, or Failure with the error to raise
    """
    if raw[-1:] != TERMINATOR:
        return Failure(MalformedResponseError(f"Reply does not end in {TERMINATOR!r}: {raw!r}", raw))
    if len(raw) != expected_len + 1:
        return Failure(UnexpectedResponseLengthError(command, expected_len, raw))
    return Success(bytes(raw[:expected_len]))


def parse_passthrough_response(
    raw: bytes, expected_len: int, device: Device, command: int
) -> Result[bytes, NexstarError]:
    """
    Classify a passthrough reply by its length.

    Args:
        raw: Full reply including terminator
        expected_len: Data bytes requested in the frame
        device: Addressed sub-device
        command: Sub-device command code

    Returns:
        Success with the data bytes; Failure with ``DeviceUnavailableError``
        when the reply is one byte too long; Failure with
        ``MalformedResponseError`` for any other length
    """
    if raw[-1:] != TERMINATOR:
        return Failure(MalformedResponseError(f"Reply does not end in {TERMINATOR!r}: {raw!r}", raw))
    if len(raw) == expected_len + 1:
        return Success(bytes(raw[:expected_len]))
    if len(raw) == expected_len + 2:
        return Failure(DeviceUnavailableError(device, command))
    return Failure(
        MalformedResponseError(
            f"Invalid data length {len(raw)} on command {command} from device {device.label}: "
            f"expected {expected_len} bytes ({raw!r}).",
            raw,
        )
    )


def _unwrap(result: Result[bytes, NexstarError]) -> bytes:
    if isinstance(result, Failure):
        raise result.failure()
    return result.unwrap()


class NexStarProtocol:
    """
    Low-level implementation of the NexStar command dialects.

    This class handles:
    - Framing of direct and passthrough commands
    - Draining the acknowledgement of commands that return no data
    - Validating reply length and terminator

    Args:
        link: Round-trip executor, normally a ``SerialChannelOwner``
    """

    def __init__(self, link: CommandLink) -> None:
        self.link = link

    def read_hand_control(self, opcode: bytes | str, expected_len: int, args: bytes = b"") -> bytes:
        """
        Send a direct command that returns data.

        Returns:
            Data bytes without terminator

        Raises:
            UnexpectedResponseLengthError: If the data length is not ``expected_len``
        """
        raw = self.link.exchange(build_hand_control_frame(opcode, args))
        return _unwrap(parse_hand_control_response(raw, expected_len, _opcode(opcode).decode("ascii")))

    def write_hand_control(self, opcode: bytes | str, args: bytes = b"") -> None:
        """
        Send a direct command that returns no data and drain its acknowledgement.

        Raises:
            UnexpectedResponseLengthError: If the reply is not a bare '#'
        """
        raw = self.link.exchange(build_hand_control_frame(opcode, args))
        if raw != ACK:
            raise UnexpectedResponseLengthError(_opcode(opcode).decode("ascii"), 0, raw)

    def read_passthrough(self, device: Device, command: int, response_len: int) -> bytes:
        """
        Send a passthrough command that returns ``response_len`` data bytes.

        Raises:
            DeviceUnavailableError: If the device is absent or rejects the command
            MalformedResponseError: If the reply length is otherwise wrong
        """
        raw = self.link.exchange(build_passthrough_frame(device, command, response_len=response_len))
        return _unwrap(parse_passthrough_response(raw, response_len, device, command))

    def write_passthrough(self, device: Device, command: int, args: bytes = b"") -> None:
        """
        Send a passthrough command that returns no data and drain its acknowledgement.

        Raises:
            DeviceUnavailableError: If the device is absent or rejects the command
            MalformedResponseError: If the acknowledgement is malformed
        """
        raw = self.link.exchange(build_passthrough_frame(device, command, args))
        _unwrap(parse_passthrough_response(raw, 0, device, command))

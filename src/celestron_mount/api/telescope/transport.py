"""
Serial Transport for the NexStar hand controller

The hand controller answers every command, including commands that return
no data, with a reply ending in '#'. The reply is buffered by the mount and
flushed some 10-100 ms after the command, so a round trip is:

    write the frame -> poll until bytes are pending -> read once

``SerialTransport`` performs that cycle on a raw channel. ``SerialChannelOwner``
gives one worker thread sole ownership of the transport; every caller hands
it a frame and blocks on a future, so at most one round trip is ever in
flight and commands execute in submission order.
"""

from __future__ import annotations

import concurrent.futures
import logging
import queue
import threading
import time
from typing import Any

import serial

from celestron_mount.api.core.constants import (
    POLL_INTERVAL,
    RESPONSE_BUFFER_SIZE,
    RESPONSE_TIMEOUT,
    TERMINATOR,
)
from celestron_mount.api.core.exceptions import (
    MalformedResponseError,
    NotConnectedError,
    TelescopeConnectionError,
    TelescopeTimeoutError,
)
from celestron_mount.api.core.types import TelescopeConfig


__all__ = ["SerialChannelOwner", "SerialTransport", "open_serial_channel"]


logger = logging.getLogger(__name__)


def open_serial_channel(config: TelescopeConfig) -> serial.Serial:
    """
    Open the serial port with the hand controller's fixed line settings.

    Args:
        config: Connection configuration

    Returns:
        Open pyserial port

    Raises:
        TelescopeConnectionError: If the port cannot be opened
    """
    try:
        logger.debug(f"Opening serial connection to {config.port} at {config.baudrate} baud")
        channel = serial.Serial(
            port=config.port,
            baudrate=config.baudrate,
            timeout=config.timeout,
            inter_byte_timeout=config.inter_byte_timeout,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
        )
        logger.info(f"Serial connection opened successfully on {config.port}")
        return channel
    except serial.SerialException as e:
        logger.error(f"Failed to open serial port {config.port}: {e}")
        raise TelescopeConnectionError(f"Failed to open port {config.port}: {e}") from e


class SerialTransport:
    """
    One write/poll/read round trip on a serial channel.

    Not thread-safe on its own; share it only through ``SerialChannelOwner``.

    Args:
        channel: Open ``serial.Serial`` or an object with the same
            ``write``/``read``/``in_waiting``/``reset_input_buffer``/``close`` surface
        timeout: Longest wait for the first reply byte in seconds
        poll_interval: Delay between checks for pending bytes in seconds
    """

    def __init__(self, channel: Any, timeout: float = RESPONSE_TIMEOUT, poll_interval: float = POLL_INTERVAL) -> None:
        self.channel = channel
        self.timeout = timeout
        self.poll_interval = poll_interval

    def write(self, data: bytes) -> None:
        """
        Send a complete frame.

        Raises:
            TelescopeConnectionError: If the write fails or is partial
        """
        logger.debug(f"TRANSMITTED: {list(data)}")
        try:
            # Discard any stale reply so it cannot be mistaken for this one
            self.channel.reset_input_buffer()
            written = self.channel.write(data)
        except (serial.SerialException, OSError) as e:
            logger.error(f"Failed to write to port: {e}")
            raise TelescopeConnectionError(f"Failed to write {data!r}: {e}") from e

        if written is not None and written != len(data):
            logger.error(f"Partial write: {written} of {len(data)} bytes")
            raise TelescopeConnectionError(f"Partial write: {written} of {len(data)} bytes sent")

    def await_readable(self) -> None:
        """
        Block until the mount has started flushing its reply.

        Raises:
            TelescopeTimeoutError: If no byte is pending within ``timeout``
            TelescopeConnectionError: If the channel fails while polling
        """
        start_time = time.time()
        while True:
            try:
                pending = self.channel.in_waiting
            except (serial.SerialException, OSError) as e:
                logger.error(f"Failed to poll port: {e}")
                raise TelescopeConnectionError(f"Failed to poll port: {e}") from e
            if pending > 0:
                return
            if time.time() - start_time > self.timeout:
                logger.error(f"No reply within {self.timeout}s")
                raise TelescopeTimeoutError(f"No reply within {self.timeout}s") from None
            time.sleep(self.poll_interval)

    def read(self) -> bytes:
        """
        Read one reply with a single read call.

        Returns:
            The reply including its terminator

        Raises:
            TelescopeTimeoutError: If nothing was received
            MalformedResponseError: If the reply does not end in '#'
            TelescopeConnectionError: If the read fails
        """
        try:
            data = bytes(self.channel.read(RESPONSE_BUFFER_SIZE))
        except (serial.SerialException, OSError) as e:
            logger.error(f"Failed to read from port: {e}")
            raise TelescopeConnectionError(f"Failed to read from port: {e}") from e

        logger.debug(f"RECEIVED: {list(data)}")
        if not data:
            raise TelescopeTimeoutError("No data received") from None
        if data[-1:] != TERMINATOR:
            raise MalformedResponseError(f"Reply does not end in {TERMINATOR!r}: {data!r}", data)
        return data

    def exchange(self, frame: bytes) -> bytes:
        """Write a frame and return the full reply to it."""
        self.write(frame)
        self.await_readable()
        return self.read()

    def close(self) -> None:
        if getattr(self.channel, "is_open", True):
            self.channel.close()


_Request = tuple[bytes, concurrent.futures.Future[bytes]]


class SerialChannelOwner:
    """
    Worker thread that exclusively owns a ``SerialTransport``.

    Callers on any thread submit frames through ``exchange``; the worker runs
    them one at a time in arrival order and hands back the reply, or the
    exception the round trip raised, through a future.

    Example:
        >>> owner = SerialChannelOwner(SerialTransport(channel))
        >>> owner.exchange(b"V")
        b'\\x04\\x15#'
        >>> owner.close()
    """

    def __init__(self, transport: SerialTransport, name: str = "nexstar-serial") -> None:
        self.transport = transport
        self._requests: queue.Queue[_Request | None] = queue.Queue()
        self._state_lock = threading.Lock()
        self._closed = False
        self._shut_down = False
        self._thread = threading.Thread(target=self._serve, name=name, daemon=True)
        self._thread.start()

    @property
    def is_open(self) -> bool:
        return not self._closed

    def exchange(self, frame: bytes) -> bytes:
        """
        Run one round trip on the owning thread and wait for its reply.

        Raises:
            NotConnectedError: If the owner has been closed
            NexstarError: Whatever the round trip raised
        """
        future: concurrent.futures.Future[bytes] = concurrent.futures.Future()
        with self._state_lock:
            if self._closed:
                raise NotConnectedError("Serial channel is closed")
            self._requests.put((frame, future))
        return future.result()

    def _serve(self) -> None:
        try:
            while True:
                request = self._requests.get()
                if request is None:
                    break
                frame, future = request
                if not future.set_running_or_notify_cancel():
                    continue
                try:
                    future.set_result(self.transport.exchange(frame))
                except BaseException as e:
                    future.set_exception(e)
                    if not isinstance(e, Exception):
                        logger.error(f"Serial worker stopped by {type(e).__name__}")
                        break
        finally:
            with self._state_lock:
                self._closed = True
            self._fail_pending()

    def _fail_pending(self) -> None:
        while True:
            try:
                request = self._requests.get_nowait()
            except queue.Empty:
                return
            if request is not None:
                request[1].set_exception(NotConnectedError("Serial worker has stopped"))

    def close(self) -> None:
        """Stop the worker after pending requests finish and close the channel."""
        with self._state_lock:
            if self._shut_down:
                return
            self._shut_down = True
            self._closed = True
            self._requests.put(None)
        self._thread.join()
        self.transport.close()
        logger.info("Serial connection closed")

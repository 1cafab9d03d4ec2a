"""
Unit tests for the exception hierarchy
"""

import unittest

from celestron_mount.api.core.enums import Device, MountModel
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


class TestExceptionHierarchy(unittest.TestCase):
    """Test suite for exception inheritance"""

    def test_all_inherit_from_base(self):
        """Test every error can be caught as NexstarError"""
        for error in (
            TelescopeConnectionError,
            NotConnectedError,
            TelescopeTimeoutError,
            CommandError,
            MalformedResponseError,
            GpsNotLinkedError,
        ):
            with self.subTest(error=error):
                self.assertTrue(issubclass(error, NexstarError))

    def test_framing_errors_are_command_errors(self):
        """Test framing errors share a category"""
        self.assertTrue(issubclass(MalformedResponseError, CommandError))
        self.assertTrue(issubclass(UnexpectedResponseLengthError, MalformedResponseError))
        self.assertTrue(issubclass(MalformedAngleError, MalformedResponseError))

    def test_device_unavailable_is_not_malformed(self):
        """Test an absent device is distinct from a framing error"""
        self.assertFalse(issubclass(DeviceUnavailableError, MalformedResponseError))
        self.assertTrue(issubclass(DeviceUnavailableError, NexstarError))


class TestExceptionMessages(unittest.TestCase):
    """Test suite for exception attributes and messages"""

    def test_malformed_keeps_raw(self):
        """Test raw bytes are kept for diagnostics"""
        error = MalformedResponseError("bad", bytearray(b"\x01#"))
        self.assertEqual(error.raw, b"\x01#")
        self.assertEqual(str(error), "bad")

    def test_unexpected_length(self):
        """Test the length error reports the payload size"""
        error = UnexpectedResponseLengthError("V", 2, b"\x04#")
        self.assertEqual(error.command, "V")
        self.assertEqual(error.expected, 2)
        self.assertIn("expected 2 data bytes, got 1", str(error))

    def test_device_unavailable(self):
        """Test the device label appears in the message"""
        error = DeviceUnavailableError(Device.RTC_UNIT, 254)
        self.assertEqual(str(error), "Device RTC Unit is unavailable or command 254 is invalid.")
        self.assertEqual(error.command, 254)

    def test_unknown_enum_value(self):
        """Test the enum name and value appear in the message"""
        self.assertEqual(str(UnknownEnumValueError("TrackingMode", 9)), "Unknown TrackingMode value: 9")

    def test_capability_not_supported(self):
        """Test messages with and without a model"""
        self.assertEqual(str(CapabilityNotSupportedError("RTC")), "No RTC device on this mount.")
        error = CapabilityNotSupportedError("GPS", MountModel.CGEM)
        self.assertEqual(str(error), "No GPS device on model CGEM.")
        self.assertIs(error.model, MountModel.CGEM)


if __name__ == "__main__":
    unittest.main()

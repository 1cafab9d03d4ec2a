"""
Unit tests for the GPS capability
"""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from celestron_mount.api.core.enums import Device
from celestron_mount.api.core.exceptions import DeviceUnavailableError, GpsNotLinkedError
from celestron_mount.api.telescope.gps import CelestronGps
from celestron_mount.api.telescope.protocol import NexStarProtocol


class TestCelestronGps(unittest.TestCase):
    """Test suite for GPS queries"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.link = MagicMock()
        self.gps = CelestronGps(NexStarProtocol(self.link))

    def frames(self):
        return [call.args[0] for call in self.link.exchange.call_args_list]

    def test_is_linked(self):
        """Test the link status command"""
        self.link.exchange.side_effect = [b"\x01#", b"\x00#"]

        self.assertTrue(self.gps.is_linked())
        self.assertFalse(self.gps.is_linked())
        self.assertEqual(self.frames()[0], b"P\x01\xb0\x37\x00\x00\x00\x01")

    def test_get_location(self):
        """Test 24-bit fractions with southern and western values folded negative"""
        self.link.exchange.side_effect = [b"\x01#", b"\x20\x00\x00#", b"\xc0\x00\x00#"]

        location = self.gps.get_location()

        self.assertEqual(location.latitude, 45.0)
        self.assertEqual(location.longitude, -90.0)
        self.assertEqual(
            self.frames(),
            [
                b"P\x01\xb0\x37\x00\x00\x00\x01",
                b"P\x01\xb0\x01\x00\x00\x00\x03",
                b"P\x01\xb0\x02\x00\x00\x00\x03",
            ],
        )

    def test_get_location_not_linked(self):
        """Test position is refused without a fix"""
        self.link.exchange.side_effect = [b"\x00#"]

        with self.assertRaises(GpsNotLinkedError):
            self.gps.get_location()
        self.assertEqual(self.link.exchange.call_count, 1)

    def test_get_datetime(self):
        """Test date, year and time are combined as UTC"""
        self.link.exchange.side_effect = [b"\x01#", b"\x06\x0f#", b"\x07\xe8#", b"\x0a\x1e\x2d#"]

        self.assertEqual(self.gps.get_datetime(), datetime(2024, 6, 15, 10, 30, 45, tzinfo=UTC))

    def test_get_datetime_not_linked(self):
        """Test time is refused without a fix"""
        self.link.exchange.side_effect = [b"\x00#"]

        with self.assertRaises(GpsNotLinkedError):
            self.gps.get_datetime()

    def test_get_device_version(self):
        """Test receiver firmware version"""
        self.link.exchange.return_value = b"\x01\x06#"

        self.assertEqual(self.gps.get_device_version(), "1.6")
        self.assertEqual(self.frames(), [b"P\x01\xb0\xfe\x00\x00\x00\x02"])

    def test_unavailable_receiver(self):
        """Test a missing receiver surfaces DeviceUnavailableError"""
        self.link.exchange.return_value = b"\x00\x00#"

        with self.assertRaises(DeviceUnavailableError) as context:
            self.gps.is_linked()
        self.assertEqual(context.exception.device, Device.GPS_UNIT)


if __name__ == "__main__":
    unittest.main()

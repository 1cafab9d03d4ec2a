"""
Unit tests for the real-time clock capability
"""

import unittest
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import deal

from celestron_mount.api.core.exceptions import DeviceUnavailableError
from celestron_mount.api.telescope.protocol import NexStarProtocol
from celestron_mount.api.telescope.rtc import CelestronRtc


SET_DATE = b"P\x03\xb2\x83\x06\x0f\x00\x00"
SET_YEAR = b"P\x03\xb2\x84\x07\xe8\x00\x00"
SET_TIME = b"P\x04\xb2\xb3\x0a\x1e\x2d\x00"


class TestCelestronRtc(unittest.TestCase):
    """Test suite for RTC queries and updates"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.link = MagicMock()
        self.rtc = CelestronRtc(NexStarProtocol(self.link))

    def frames(self):
        return [call.args[0] for call in self.link.exchange.call_args_list]

    def test_get_datetime(self):
        """Test the three reads are combined as UTC"""
        self.link.exchange.side_effect = [b"\x06\x0f#", b"\x07\xe8#", b"\x0a\x1e\x2d#"]

        self.assertEqual(self.rtc.get_datetime(), datetime(2024, 6, 15, 10, 30, 45, tzinfo=UTC))
        self.assertEqual(
            self.frames(),
            [
                b"P\x01\xb2\x03\x00\x00\x00\x02",
                b"P\x01\xb2\x04\x00\x00\x00\x02",
                b"P\x01\xb2\x33\x00\x00\x00\x03",
            ],
        )

    def test_set_datetime(self):
        """Test date, year and time writes in order"""
        self.link.exchange.return_value = b"#"

        self.rtc.set_datetime(datetime(2024, 6, 15, 10, 30, 45, tzinfo=UTC))

        self.assertEqual(self.frames(), [SET_DATE, SET_YEAR, SET_TIME])

    def test_set_datetime_converts_to_utc(self):
        """Test a local timestamp is sent as UTC"""
        self.link.exchange.return_value = b"#"

        self.rtc.set_datetime(datetime(2024, 6, 15, 12, 30, 45, tzinfo=timezone(timedelta(hours=2))))

        self.assertEqual(self.frames(), [SET_DATE, SET_YEAR, SET_TIME])

    @patch("celestron_mount.api.telescope.rtc.datetime")
    def test_set_datetime_defaults_to_now(self, mock_datetime):
        """Test the current time is used when none is given"""
        mock_datetime.now.return_value = datetime(2024, 6, 15, 10, 30, 45, tzinfo=UTC)
        self.link.exchange.return_value = b"#"

        self.rtc.set_datetime()

        self.assertEqual(self.frames(), [SET_DATE, SET_YEAR, SET_TIME])
        mock_datetime.now.assert_called_with(UTC)

    def test_set_datetime_naive(self):
        """Test a naive timestamp is rejected"""
        with self.assertRaises(deal.PreContractError):
            self.rtc.set_datetime(datetime(2024, 6, 15, 10, 30, 45))
        self.link.exchange.assert_not_called()

    def test_set_datetime_partial_failure(self):
        """Test a failed write stops the sequence and is raised"""
        self.link.exchange.side_effect = [b"#", b"\x00#"]

        with self.assertLogs("celestron_mount.api.telescope.rtc", level="WARNING") as logs:
            with self.assertRaises(DeviceUnavailableError):
                self.rtc.set_datetime(datetime(2024, 6, 15, 10, 30, 45, tzinfo=UTC))

        self.assertEqual(self.frames(), [SET_DATE, SET_YEAR])
        self.assertIn("year", logs.output[0])

    def test_get_device_version(self):
        """Test clock firmware version"""
        self.link.exchange.return_value = b"\x02\x01#"

        self.assertEqual(self.rtc.get_device_version(), "2.1")


if __name__ == "__main__":
    unittest.main()

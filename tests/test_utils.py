"""
Unit tests for date, time and location field codecs
"""

import unittest
from datetime import UTC, datetime, timedelta, timezone

from celestron_mount.api.core.exceptions import MalformedResponseError, UnknownEnumValueError
from celestron_mount.api.core.utils import (
    decode_device_datetime,
    decode_hand_control_time,
    decode_location,
    encode_hand_control_time,
    encode_location,
    signed_byte,
)


class TestSignedByte(unittest.TestCase):
    """Test suite for two's complement bytes"""

    def test_signed_byte(self):
        """Test the sign boundary"""
        self.assertEqual(signed_byte(0), 0)
        self.assertEqual(signed_byte(127), 127)
        self.assertEqual(signed_byte(128), -128)
        self.assertEqual(signed_byte(255), -1)


class TestHandControlTime(unittest.TestCase):
    """Test suite for the 8-byte time payload"""

    def test_decode_flag_set(self):
        """Test a set DST flag leaves the offset byte as the UTC offset"""
        when = decode_hand_control_time(bytes([1, 0, 0, 1, 1, 25, 2, 1]))
        self.assertEqual(when, datetime(2024, 12, 31, 23, 0, 0, tzinfo=UTC))

    def test_decode_flag_cleared(self):
        """Test a cleared DST flag adds one hour to the offset byte"""
        when = decode_hand_control_time(bytes([1, 0, 0, 1, 1, 25, 2, 0]))
        self.assertEqual(when, datetime(2024, 12, 31, 22, 0, 0, tzinfo=UTC))

    def test_decode_bad_dst_flag(self):
        """Test a DST byte other than 0 or 1 raises"""
        with self.assertRaises(UnknownEnumValueError):
            decode_hand_control_time(bytes([1, 0, 0, 1, 1, 25, 0, 5]))

    def test_decode_wrong_size(self):
        """Test payloads other than 8 bytes raise"""
        with self.assertRaises(MalformedResponseError):
            decode_hand_control_time(bytes(7))

    def test_encode_utc(self):
        """Test encoding a UTC timestamp with the flag cleared"""
        payload = encode_hand_control_time(datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC))
        self.assertEqual(payload, bytes([3, 4, 5, 1, 2, 30, 255, 0]))

    def test_encode_utc_flag_set(self):
        """Test encoding a UTC timestamp with the flag set"""
        payload = encode_hand_control_time(datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC), dst=True)
        self.assertEqual(payload, bytes([3, 4, 5, 1, 2, 30, 0, 1]))

    def test_encode_matches_decode(self):
        """Test timestamps survive encode then decode with either flag"""
        local = datetime(2024, 6, 15, 10, 30, 0, tzinfo=timezone(timedelta(hours=-4)))
        for dst in (False, True):
            with self.subTest(dst=dst):
                self.assertEqual(decode_hand_control_time(encode_hand_control_time(local, dst=dst)), local)

    def test_encode_fractional_offset(self):
        """Test offsets that are not whole hours are rejected"""
        with self.assertRaises(ValueError):
            encode_hand_control_time(datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=5, minutes=30))))

    def test_encode_naive(self):
        """Test naive timestamps are rejected"""
        with self.assertRaises(ValueError):
            encode_hand_control_time(datetime(2024, 1, 1))


class TestDeviceDatetime(unittest.TestCase):
    """Test suite for GPS/RTC date assembly"""

    def test_decode(self):
        """Test the three replies combine as UTC"""
        when = decode_device_datetime(b"\x02\x1d", b"\x07\xe8", b"\x17\x3b\x3b")
        self.assertEqual(when, datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC))

    def test_decode_invalid(self):
        """Test an impossible date raises"""
        with self.assertRaises(MalformedResponseError):
            decode_device_datetime(b"\x02\x1e", b"\x07\xe8", b"\x00\x00\x00")


class TestLocation(unittest.TestCase):
    """Test suite for the 8-byte location payload"""

    def test_decode(self):
        """Test degrees, minutes, seconds and hemisphere flags"""
        location = decode_location(bytes([51, 28, 38, 0, 0, 0, 36, 1]))
        self.assertAlmostEqual(location.latitude, 51 + 28 / 60 + 38 / 3600)
        self.assertAlmostEqual(location.longitude, -36 / 3600)

    def test_decode_wrong_size(self):
        """Test payloads other than 8 bytes raise"""
        with self.assertRaises(MalformedResponseError):
            decode_location(bytes(9))

    def test_encode_rounds_to_arcseconds(self):
        """Test fractional arcseconds are rounded"""
        self.assertEqual(
            encode_location(51 + 28 / 60 + 38.4 / 3600, -(36.6 / 3600)),
            bytes([51, 28, 38, 0, 0, 0, 37, 1]),
        )


if __name__ == "__main__":
    unittest.main()

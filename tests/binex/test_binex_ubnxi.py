"""Test :mod:`rnxcodec.binex.ubnxi`

"""
# Standard library imports
import unittest

# External library imports
import pytest

# rnxcodec imports
from rnxcodec.binex import ubnxi
from rnxcodec.lib import exceptions


@pytest.mark.quick
class TestUbnxi(unittest.TestCase):
    def test_one_byte(self):
        self.assertEqual(ubnxi.encode(0), b"\x00")
        self.assertEqual(ubnxi.encode(127), b"\x7f")
        self.assertEqual(ubnxi.decode(b"\x7f"), (127, 1))

    def test_two_bytes(self):
        self.assertEqual(ubnxi.encode(128), b"\x81\x00")
        self.assertEqual(ubnxi.decode(b"\x81\x00"), (128, 2))
        self.assertEqual(ubnxi.encode(128, big_endian=False), b"\x80\x01")
        self.assertEqual(ubnxi.decode(b"\x80\x01", big_endian=False), (128, 2))

    def test_four_bytes(self):
        self.assertEqual(ubnxi.encode(2 ** 21), b"\x80\xc0\x80\x00")
        self.assertEqual(ubnxi.decode(b"\x80\xc0\x80\x00"), (2 ** 21, 4))

    def test_max_value(self):
        self.assertEqual(ubnxi.encode(ubnxi.MAX_UBNXI), b"\xff\xff\xff\xff")
        self.assertEqual(ubnxi.decode(b"\xff\xff\xff\xff"), (ubnxi.MAX_UBNXI, 4))

    def test_sizes(self):
        for value, size in [(0, 1), (127, 1), (128, 2), (16383, 2), (16384, 3), (2 ** 21 - 1, 3), (2 ** 21, 4)]:
            with self.subTest(value=value):
                self.assertEqual(ubnxi.num_bytes(value), size)

    def test_roundtrip_both_byte_orders(self):
        for value in (0, 1, 200, 16383, 16384, 1048575, 2 ** 21 + 12345, ubnxi.MAX_UBNXI):
            for big_endian in (True, False):
                with self.subTest(value=value, big_endian=big_endian):
                    data = ubnxi.encode(value, big_endian)
                    self.assertEqual(ubnxi.decode(data, big_endian=big_endian), (value, len(data)))

    def test_offset(self):
        self.assertEqual(ubnxi.decode(b"\xe2\x01\x81\x00", offset=2), (128, 2))

    def test_out_of_range(self):
        for value in (-1, ubnxi.MAX_UBNXI + 1):
            with self.subTest(value=value):
                with self.assertRaises(exceptions.DifferenceOverflowError):
                    ubnxi.encode(value)

    def test_truncated(self):
        with self.assertRaises(exceptions.TruncationError):
            ubnxi.decode(b"\x81")
        with self.assertRaises(exceptions.TruncationError):
            ubnxi.decode(b"")

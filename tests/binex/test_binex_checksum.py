"""Test :mod:`rnxcodec.binex.checksum`

The CRC-16 vectors are record ID, message length and message of GPS ephemeris records.
"""
# Standard library imports
import unittest

# External library imports
import pytest

# rnxcodec imports
from rnxcodec.binex import checksum
from rnxcodec.lib.enums import ChecksumKind

SITE_METADATA = bytes.fromhex("001f0139872000000017") + b"BINEX Stream Restarted!"

EPHEMERIS_1 = bytes.fromhex(
    "018100011d07f60003d8720003f480318000000000002000000000acdc0000b838c3000000002030d55c00bf"
    "f8964c656eda413f6d97d5d000000040b421a239400000322000004344f800b3180000427860003649a00037"
    "1660004002a82c0b2a180cc00823b897bdf9993fee2355ce2e1170b131a400adac000041a0000000000204"
)

EPHEMERIS_2 = bytes.fromhex(
    "018100010707f60003d8720003f48031b000000000001d00000000abc00000b9093b600000001d30c330003f"
    "f9a2c92653c27b3f712ce0d800000040b421b0f160000033a0000043986400b2600000c22fa000b60ce00036"
    "83c000bffea89afb4969b2bfd7733f124aa8693fef09abae2165d4b133e800aea1c00041a0000000000204"
)


@pytest.mark.quick
class TestChecksums(unittest.TestCase):
    def test_xor8(self):
        self.assertEqual(checksum.xor8(bytes([0, 1, 2, 3, 4])), 4)
        self.assertEqual(checksum.xor8(SITE_METADATA), 0x84)

    def test_crc16(self):
        self.assertEqual(checksum.crc16(EPHEMERIS_1), 0x7D49)
        self.assertEqual(checksum.crc16(EPHEMERIS_2), 0x6C23)
        self.assertEqual(checksum.crc16(b"123456789"), 0x31C3)

    def test_crc32(self):
        self.assertEqual(checksum.crc32(b"123456789"), 0x89A1897F)
        self.assertEqual(checksum.crc32(b""), 0)

    def test_md5(self):
        self.assertEqual(checksum.md5(b""), 0xD41D8CD98F00B204E9800998ECF8427E)

    def test_crc_parameters(self):
        self.assertEqual(checksum.Crc32Binex.calc(b"123456789"), checksum.Crc32Binex._check_result)
        self.assertEqual(checksum.crc32(b"\x80"), 0x690CE0EE)
        self.assertEqual(checksum.crc16(b"\x01"), 0x1021)
        self.assertEqual(checksum.crc16(bytearray(b"123456789")), 0x31C3)


@pytest.mark.quick
class TestChecksumKind(unittest.TestCase):
    def test_regular(self):
        self.assertEqual(checksum.checksum_kind(127), ChecksumKind.xor8)
        self.assertEqual(checksum.checksum_kind(128), ChecksumKind.crc16)
        self.assertEqual(checksum.checksum_kind(4095), ChecksumKind.crc16)
        self.assertEqual(checksum.checksum_kind(4096), ChecksumKind.crc32)
        self.assertEqual(checksum.checksum_kind(1048575), ChecksumKind.crc32)
        self.assertEqual(checksum.checksum_kind(1048576), ChecksumKind.md5)

    def test_enhanced(self):
        self.assertEqual(checksum.checksum_kind(127, enhanced=True), ChecksumKind.crc16)
        self.assertEqual(checksum.checksum_kind(128, enhanced=True), ChecksumKind.crc32)
        self.assertEqual(checksum.checksum_kind(1048575, enhanced=True), ChecksumKind.crc32)
        self.assertEqual(checksum.checksum_kind(1048576, enhanced=True), ChecksumKind.md5)


@pytest.mark.quick
def test_calculate_byte_order():
    assert checksum.calculate(EPHEMERIS_1, big_endian=True) == b"\x7d\x49"
    assert checksum.calculate(EPHEMERIS_1, big_endian=False) == b"\x49\x7d"
    assert checksum.calculate(SITE_METADATA) == b"\x84"


@pytest.mark.quick
def test_calculate_md5():
    data = bytes(1048576)
    digest = checksum.calculate(data, big_endian=False)
    assert len(digest) == 16
    assert int.from_bytes(digest, "big") == checksum.md5(data)

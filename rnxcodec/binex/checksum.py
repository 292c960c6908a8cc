"""Checksums of BINEX messages

Description:
------------

A BINEX message ends with a checksum of the record ID, the message length and the message itself. The kind of
checksum depends on the number of bytes covered, and on whether the message uses the enhanced (longer) checksums:

| Bytes covered        | Regular | Enhanced |
|----------------------|---------|----------|
| < 128                | XOR-8   | CRC-16   |
| < 4096               | CRC-16  | CRC-32   |
| < 1048576            | CRC-32  | CRC-32   |
| otherwise            | MD5     | MD5      |

The CRCs are computed most significant bit first, starting from zero, with the polynomials 0x1021 (CRC-16, the
XMODEM CRC) and 0x04C11DB7 (CRC-32). They are written in the byte order of the message.

"""

# Standard library imports
import hashlib

# External library imports
from crccheck.checksum import ChecksumXor8
from crccheck.crc import CrcBase, Crc16Xmodem

# rnxcodec imports
from rnxcodec.lib.enums import ChecksumKind


class Crc32Binex(CrcBase):
    """CRC-32 of BINEX messages: no reflection, zero initial value and no final xor"""

    _width = 32
    _poly = 0x04C11DB7
    _initvalue = 0x00000000
    _reflect_input = False
    _reflect_output = False
    _xor_output = 0x00000000
    _check_result = 0x89A1897F


def xor8(data):
    return ChecksumXor8.calc(data)


def crc16(data):
    return Crc16Xmodem.calc(data)


def crc32(data):
    return Crc32Binex.calc(data)


def md5(data):
    return int.from_bytes(hashlib.md5(data).digest(), "big")


_CALCULATORS = {ChecksumKind.xor8: xor8, ChecksumKind.crc16: crc16, ChecksumKind.crc32: crc32, ChecksumKind.md5: md5}


def checksum_kind(num_bytes, enhanced=False):
    """Kind of checksum used for a message

    Args:
        num_bytes (int):   Number of bytes covered by the checksum.
        enhanced (bool):   Whether the message uses enhanced checksums.

    Returns:
        ChecksumKind: Kind of checksum, valued by its length in bytes.
    """
    if num_bytes < 128:
        return ChecksumKind.crc16 if enhanced else ChecksumKind.xor8
    if num_bytes < 4096 and not enhanced:
        return ChecksumKind.crc16
    if num_bytes < 1048576:
        return ChecksumKind.crc32
    return ChecksumKind.md5


def calculate(data, enhanced=False, big_endian=True):
    """Checksum bytes of a message

    Args:
        data (bytes):       Record ID, message length and message.
        enhanced (bool):    Use enhanced checksums.
        big_endian (bool):  Byte order of the message. MD5 digests are always written as they are.

    Returns:
        Bytes: The checksum, as written after the message.
    """
    kind = checksum_kind(len(data), enhanced)
    value = _CALCULATORS[kind](data)
    byteorder = "big" if big_endian or kind == ChecksumKind.md5 else "little"
    return value.to_bytes(kind.value, byteorder)

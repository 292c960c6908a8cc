"""BINEX variable length unsigned integers (ubnxi)

Description:
------------

Record IDs, message lengths and many fields inside BINEX messages are written as ubnxi, unsigned integers of 1 to 4
bytes. The first three bytes carry 7 bits of the value each, with the high bit set when another byte follows. The
fourth byte carries 8 bits, so the largest value is 2**29 - 1.

In big endian messages the first byte holds the most significant bits, in little endian messages the least
significant bits.

Example:
--------

    >>> encode(128)
    b'\\x81\\x00'
    >>> decode(b'\\x81\\x00')
    (128, 2)

"""

# rnxcodec imports
from rnxcodec.lib import exceptions

MAX_UBNXI = 2 ** 29 - 1
MAX_BYTES = 4


def num_bytes(value):
    """Number of bytes needed to write a value"""
    if value < 0 or value > MAX_UBNXI:
        raise exceptions.DifferenceOverflowError(f"Value {value} can not be written as ubnxi")
    if value < 1 << 7:
        return 1
    if value < 1 << 14:
        return 2
    if value < 1 << 21:
        return 3
    return 4


def encode(value, big_endian=True):
    """Write an unsigned integer as ubnxi

    Args:
        value (int):        Value between 0 and 2**29 - 1.
        big_endian (bool):  Byte order.

    Returns:
        Bytes: 1 to 4 bytes.
    """
    size = num_bytes(value)
    if size == 4 and big_endian:
        # The last byte carries the 8 least significant bits
        return bytes([(value >> 22) | 0x80, (value >> 15) & 0x7F | 0x80, (value >> 8) & 0x7F | 0x80, value & 0xFF])
    if size == 4:
        return bytes([value & 0x7F | 0x80, (value >> 7) & 0x7F | 0x80, (value >> 14) & 0x7F | 0x80, value >> 21])

    groups = [(value >> (7 * idx)) & 0x7F for idx in range(size)]
    if big_endian:
        groups.reverse()
    return bytes(g | 0x80 for g in groups[:-1]) + bytes([groups[-1]])


def decode(data, offset=0, big_endian=True):
    """Read an ubnxi

    Args:
        data (bytes):       Bytes to read from.
        offset (int):       Position of the first byte.
        big_endian (bool):  Byte order.

    Returns:
        Tuple: The value and the number of bytes read.
    """
    groups = list()
    for idx in range(MAX_BYTES):
        if offset + idx >= len(data):
            raise exceptions.TruncationError(f"Data ended inside an ubnxi at byte {offset + idx}", index=offset)
        byte = data[offset + idx]
        if idx == MAX_BYTES - 1:
            groups.append((byte, 8))
            break
        groups.append((byte & 0x7F, 7))
        if not byte & 0x80:
            break

    value = 0
    if big_endian:
        for group, bits in groups:
            value = (value << bits) | group
    else:
        shift = 0
        for group, bits in groups:
            value |= group << shift
            shift += bits
    return value, len(groups)

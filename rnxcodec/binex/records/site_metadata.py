"""BINEX record 0x00: site and receiver metadata

Description:
------------

The record starts with a time tag, given as minutes since the GPS epoch (1980-01-06 00:00) and quarter seconds into
the minute, followed by a byte telling the source of the metadata. The rest of the record is a list of fields, each
with a field ID (ubnxi), the length of the text (ubnxi) and the text itself.

Example:
--------

    01 39 87 20 | 00 | 00 | 00 17 "BINEX Stream Restarted!"
    minutes       qsec  src  field 0x00, 23 characters

"""

# Standard library imports
from collections import namedtuple

# External library imports
import numpy as np

# Midgard imports
from midgard.dev import plugins

# rnxcodec imports
from rnxcodec.binex import ubnxi
from rnxcodec.lib import exceptions

GPS_EPOCH = np.datetime64("1980-01-06T00:00:00", "ns")
NS_PER_MINUTE = 60 * 1_000_000_000
NS_PER_QUARTER_SECOND = 250_000_000

SiteMetadata = namedtuple("SiteMetadata", ["time", "source", "fields"])
SiteMetadata.__doc__ = """Time tag, source of the metadata and list of (field ID, text) pairs"""


@plugins.register_named("decode")
def decode(message):
    payload = message.payload
    if len(payload) < 6:
        raise exceptions.FormatError(f"Site metadata record is {len(payload)} bytes, expected at least 6")
    byteorder = "big" if message.big_endian else "little"
    minutes = int.from_bytes(payload[0:4], byteorder)
    quarter_seconds, source = payload[4], payload[5]
    time = GPS_EPOCH + np.timedelta64(minutes * NS_PER_MINUTE + quarter_seconds * NS_PER_QUARTER_SECOND, "ns")

    fields = list()
    pos = 6
    while pos < len(payload):
        try:
            field_id, size = ubnxi.decode(payload, pos, message.big_endian)
            pos += size
            length, size = ubnxi.decode(payload, pos, message.big_endian)
            pos += size
        except exceptions.TruncationError:
            raise exceptions.FormatError(f"Site metadata field at byte {pos} is cut short") from None
        if pos + length > len(payload):
            raise exceptions.FormatError(f"Site metadata field 0x{field_id:02x} is longer than the record")
        fields.append((field_id, payload[pos : pos + length].decode("latin-1")))
        pos += length
    return SiteMetadata(time, source, fields)


@plugins.register_named("encode")
def encode(content, big_endian=True):
    byteorder = "big" if big_endian else "little"
    nanoseconds = int((np.datetime64(content.time, "ns") - GPS_EPOCH).astype(np.int64))
    minutes, rest = divmod(nanoseconds, NS_PER_MINUTE)
    quarter_seconds, rest = divmod(rest, NS_PER_QUARTER_SECOND)
    if rest or minutes < 0:
        raise exceptions.FormatError(f"Time {content.time} can not be written as minutes and quarter seconds")

    payload = minutes.to_bytes(4, byteorder) + bytes([quarter_seconds, content.source])
    for field_id, text in content.fields:
        data = text.encode("latin-1")
        payload += ubnxi.encode(field_id, big_endian) + ubnxi.encode(len(data), big_endian) + data
    return payload

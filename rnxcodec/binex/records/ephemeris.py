"""BINEX record 0x01: broadcast ephemerides

Description:
------------

The first byte of the record is the subrecord ID. Subrecord 0x01 holds a decoded GPS ephemeris of 128 bytes, with the
orbit and clock parameters written as 4 and 8 byte IEEE floats:

| Field      | Type   | Field      | Type   | Field      | Type   |
|------------|--------|------------|--------|------------|--------|
| subrecord  | uint1  | iode       | sint4  | cus        | real4  |
| prn        | uint1  | delta_n    | real4  | omega0     | real8  |
| week       | uint2  | m0         | real8  | omega      | real8  |
| tow        | sint4  | e          | real8  | i0         | real8  |
| toc        | sint4  | sqrt_a     | real8  | omega_dot  | real4  |
| tgd        | real4  | cic        | real4  | idot       | real4  |
| iodc       | sint4  | crc        | real4  | ura        | real4  |
| af2        | real4  | cis        | real4  | health     | uint2  |
| af1        | real4  | crs        | real4  | fit        | uint2  |
| af0        | real4  | cuc        | real4  |            |        |

Other subrecords are kept as opaque bytes.

"""

# Standard library imports
from collections import namedtuple
import struct

# External library imports
import numpy as np

# Midgard imports
from midgard.dev import plugins

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import Header
from rnxcodec.data.record import NavigationRecord
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import Constellation

GPS_EPOCH = np.datetime64("1980-01-06T00:00:00", "ns")
SECONDS_PER_WEEK = 7 * 86400

GPS_EPHEMERIS = 0x01
_GPS_FORMAT = "BBHiififffifdddffffffdddfffHH"

GpsEphemeris = namedtuple(
    "GpsEphemeris",
    [
        "prn",
        "week",
        "tow",
        "toc",
        "tgd",
        "iodc",
        "af2",
        "af1",
        "af0",
        "iode",
        "delta_n",
        "m0",
        "e",
        "sqrt_a",
        "cic",
        "crc",
        "cis",
        "crs",
        "cuc",
        "cus",
        "omega0",
        "omega",
        "i0",
        "omega_dot",
        "idot",
        "ura",
        "health",
        "fit",
    ],
)

# Subrecords that are not decoded
OpaqueEphemeris = namedtuple("OpaqueEphemeris", ["subrecord", "data"])


def _struct(big_endian):
    return struct.Struct((">" if big_endian else "<") + _GPS_FORMAT)


@plugins.register_named("decode")
def decode(message):
    payload = message.payload
    if not payload:
        raise exceptions.FormatError("Empty ephemeris record")
    if payload[0] != GPS_EPHEMERIS:
        return OpaqueEphemeris(payload[0], payload[1:])

    layout = _struct(message.big_endian)
    if len(payload) != layout.size:
        raise exceptions.FormatError(f"GPS ephemeris record is {len(payload)} bytes, expected {layout.size}")
    return GpsEphemeris(*layout.unpack(payload)[1:])


@plugins.register_named("encode")
def encode(content, big_endian=True):
    if isinstance(content, OpaqueEphemeris):
        return bytes([content.subrecord]) + bytes(content.data)
    try:
        return _struct(big_endian).pack(GPS_EPHEMERIS, *content)
    except struct.error as err:
        raise exceptions.DifferenceOverflowError(f"GPS ephemeris of PRN {content.prn} can not be encoded: {err}") from None


def time_of_clock(ephemeris):
    """Time of clock of a GPS ephemeris, as GPS time"""
    seconds = ephemeris.week * SECONDS_PER_WEEK + ephemeris.toc
    return GPS_EPOCH + np.timedelta64(seconds, "s").astype("timedelta64[ns]")


def navigation_record(ephemerides):
    """Collect GPS ephemerides in a navigation record

    Args:
        ephemerides (Iterable):  GpsEphemeris objects. Other objects are ignored.

    Returns:
        NavigationRecord: Ephemerides keyed by time of clock and satellite.
    """
    record = NavigationRecord(Header(version="3.04", file_type="N", sat_system="G"))
    for eph in ephemerides:
        if not isinstance(eph, GpsEphemeris):
            continue
        record.add_ephemeris(Epoch(time_of_clock(eph)), Sv(Constellation.gps, eph.prn), eph, ordered=False)
    record.sort()
    return record

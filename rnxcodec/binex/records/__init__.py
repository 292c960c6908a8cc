"""Framework for BINEX record layouts

Description:
------------

The layout of the payload of a BINEX message is given by its record ID. Each known record is defined in a separate
.py-file, with one function decoding the payload and one encoding it. The functions are registered with the
:func:`~midgard.dev.plugins.register_named` decorator as follows::

    from midgard.dev import plugins

    @plugins.register_named("decode")
    def decode(message):
        ...

    @plugins.register_named("encode")
    def encode(content, big_endian=True):
        ...

The module handling each record ID is listed in `RECORD_NAMES`. Messages with other record IDs are kept as opaque
payloads.

"""

# Midgard imports
from midgard.dev import plugins

# rnxcodec imports
from rnxcodec.lib import exceptions

# Do not support * imports
__all__ = []

RECORD_NAMES = {0x00: "site_metadata", 0x01: "ephemeris"}


def names():
    """Names of the known records"""
    return sorted(RECORD_NAMES.values())


def decode(message):
    """Decode the payload of a message

    Args:
        message (Message):  BINEX message.

    Returns:
        The decoded record, or None if the record ID is not known.
    """
    record_name = RECORD_NAMES.get(message.record_id)
    if record_name is None:
        return None
    return plugins.call(package_name=__name__, plugin_name=record_name, part="decode", message=message)


def encode(record_id, content, big_endian=True):
    """Encode a record as the payload of a message

    Args:
        record_id (int):    BINEX record ID.
        content:            The record, as returned by `decode`.
        big_endian (bool):  Byte order of the message.

    Returns:
        Bytes: Payload of the message.
    """
    record_name = RECORD_NAMES.get(record_id)
    if record_name is None:
        raise exceptions.FormatError(f"Can not encode unknown BINEX record 0x{record_id:02x}")
    return plugins.call(
        package_name=__name__, plugin_name=record_name, part="encode", content=content, big_endian=big_endian
    )

"""BINEX binary exchange format

Description:
------------

BINEX streams are sequences of self-delimited messages, each framed by a sync byte, a record ID, the message length
and a checksum (see `rnxcodec.binex.message`). The payload of known record IDs can be decoded with the plugins in
`rnxcodec.binex.records`, while other payloads are kept opaque.

Example:
--------

    >>> from rnxcodec import binex
    >>> messages, errors = binex.decode_messages(data)
    >>> b"".join(binex.write_message(m) for m in messages) == data
    True

"""

# Import relevant functions and classes
from rnxcodec.binex.message import FrameDecoder, Message, decode_messages, write_message  # noqa

# Do not support *-imports
__all__ = []

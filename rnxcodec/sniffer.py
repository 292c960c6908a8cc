"""Detect the format of a byte stream and dispatch to the right codec

Example:
--------

    >>> from rnxcodec import sniffer
    >>> sniffer.sniff(data)
    (<FileFormat.crinex: 'crinex'>, True)
    >>> record = sniffer.decode(data)

Description:
------------

The format is recognized from the first bytes of the stream:

| Format | Recognized by                                            | Decoded by                                     |
|--------|----------------------------------------------------------|------------------------------------------------|
| gzip   | the bytes `1f 8b`                                        | unwrapped, then sniffed again                  |
| CRINEX | `CRINEX VERS` in columns 61-80 of the first line         | `rnxcodec.crinex.decompress_record`            |
| RINEX  | `RINEX VERSION / TYPE` in columns 61-80 of the first line | `rnxcodec.rinex.read_observations`             |
| BINEX  | a sync byte as the first byte                            | `rnxcodec.binex.decode_messages`               |

"""

# Standard library imports
import gzip
import zlib

# rnxcodec imports
from rnxcodec import binex
from rnxcodec import crinex
from rnxcodec import rinex
from rnxcodec.binex.message import SYNC_BYTES
from rnxcodec.lib import exceptions
from rnxcodec.lib import log
from rnxcodec.lib.enums import FileFormat

GZIP_MAGIC = b"\x1f\x8b"


def _unwrap(data):
    if not data.startswith(GZIP_MAGIC):
        return data, False
    try:
        return gzip.decompress(data), True
    except (OSError, EOFError, zlib.error) as err:
        raise exceptions.FormatError(f"Invalid gzip stream: {err}") from None


def _detect(data):
    first_line = data.split(b"\n", 1)[0].rstrip(b"\r")
    label = first_line[60:]
    if label.startswith(b"CRINEX VERS"):
        return FileFormat.crinex
    if label.startswith(b"RINEX VERSION / TYPE"):
        return FileFormat.rinex
    if data and data[0] in SYNC_BYTES:
        return FileFormat.binex
    return FileFormat.unknown


def sniff(data):
    """Detect the format of a byte stream

    Args:
        data (bytes):  The start of the stream. For gzipped streams the whole stream is needed.

    Returns:
        Tuple: The format and whether the stream is gzipped.
    """
    data, gzipped = _unwrap(bytes(data))
    return _detect(data), gzipped


def decode(data, **options):
    """Decode a stream in any of the known formats

    Args:
        data (bytes):  The stream, optionally gzipped.
        options:       Options passed on to the codec.

    Returns:
        ObservationRecord for RINEX and CRINEX streams, a tuple of messages and errors for BINEX streams.
    """
    data, gzipped = _unwrap(bytes(data))
    file_format = _detect(data)
    log.debug(f"Decoding {'gzipped ' if gzipped else ''}{file_format.value} stream")
    if file_format == FileFormat.crinex:
        return crinex.decompress_record(data, **options)
    if file_format == FileFormat.rinex:
        try:
            text = data.decode("ascii")
        except UnicodeDecodeError as err:
            raise exceptions.FormatError(f"RINEX stream is not ASCII text: {err}") from None
        return rinex.read_observations(text)
    if file_format == FileFormat.binex:
        return binex.decode_messages(data, **options)
    raise exceptions.FormatError("Unknown format, expected RINEX, Compact RINEX or BINEX")


def encode(record, compact=True, compress_gzip=False, **options):
    """Encode an observation record

    Args:
        record (ObservationRecord):  The observations.
        compact (bool):              Write Compact RINEX instead of RINEX.
        compress_gzip (bool):        Wrap the result in gzip.
        options:                     Options passed on to the Compact RINEX compressor.

    Returns:
        Bytes: The encoded stream.
    """
    if compact:
        data = crinex.compress_record(record, **options)
    else:
        data = rinex.write_observations(record).encode("ascii")
    return gzip.compress(data) if compress_gzip else data

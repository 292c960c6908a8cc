"""Compact RINEX (Hatanaka compression)

Description:
------------

Compact RINEX is a lossless compression of RINEX observation files. Numeric fields are replaced by finite differences
of their values (`rnxcodec.crinex.field`), and text lines by the characters that changed since the previous epoch
(`rnxcodec.crinex.line`). The stream codec in `rnxcodec.crinex.stream` puts these together epoch by epoch.

Example:
--------

    >>> from rnxcodec import crinex
    >>> record = crinex.decompress_record(crx_bytes)
    >>> crinex.compress_record(record) == crx_bytes
    True

"""

# Import relevant functions and classes
from rnxcodec.crinex.stream import Compressor, Decompressor  # noqa
from rnxcodec.crinex.stream import compress, compress_record, decompress, decompress_record  # noqa

# Do not support *-imports
__all__ = []

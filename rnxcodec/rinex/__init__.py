"""Reading and writing RINEX text

Description:
------------

The RINEX text layer converts between the lines of RINEX observation files and the record model in `rnxcodec.data`.
It is used by the Compact RINEX codec to produce and consume plain RINEX text, and by the sniffer to read plain RINEX
observation files.

"""

# Import relevant functions
from rnxcodec.rinex.header import read_header, write_header  # noqa
from rnxcodec.rinex.observation import read_observations, write_observations  # noqa

# Do not support *-imports
__all__ = []

"""Layouts of Compact RINEX files

Description:
------------

Compact RINEX 1.0 compresses RINEX 2 files and Compact RINEX 3.0 compresses RINEX 3 and 4 files. The two differ in
where the satellite list starts on the epoch line, in the marker used for full lines and in the precision of the
receiver clock offset:

| CRINEX | RINEX  | Full line marker | Satellite list | Clock offset   |
|--------|--------|------------------|----------------|----------------|
| 1.0    | 2      | `&`              | column 33      | 10**-9 seconds  |
| 3.0    | 3, 4   | `>`              | column 42      | 10**-12 seconds |

The layout is chosen once from the header and passed to the stream codec.

"""

# Standard library imports
from collections import namedtuple

# rnxcodec imports
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions
from rnxcodec.rinex import observation


class Layout(namedtuple("Layout", ["crinex_version", "rinex_version", "marker", "sat_list_start", "clock_decimals"])):
    """Column layout of one Compact RINEX version"""

    __slots__ = ()

    def format_epoch_line(self, epoch, sats):
        """Epoch line with the full satellite list

        Args:
            epoch (Epoch):  Time and flag.
            sats (List):    Satellites observed at the epoch.

        Returns:
            String: The epoch line, without trailing blanks.
        """
        prefix = observation.format_epoch_line(epoch, len(sats), self.rinex_version)
        sat_list = "".join(str(sv) for sv in sats)
        return f"{prefix:{self.sat_list_start}s}{sat_list}".rstrip()

    def parse_epoch_line(self, line):
        """Parse an epoch line with the full satellite list

        Args:
            line (str):  The epoch line.

        Returns:
            Tuple: The decoded epoch line (see `rnxcodec.rinex.observation.EpochLine`) and the list of satellites.
        """
        epoch_line = observation.parse_epoch_line(line, self.rinex_version)
        if epoch_line.flag.is_event:
            return epoch_line, list()

        sat_list = line[self.sat_list_start :].rstrip()
        if len(sat_list) != 3 * epoch_line.num_sat:
            raise exceptions.FormatError(
                f"Epoch line lists {len(sat_list) / 3:g} satellites, expected {epoch_line.num_sat}: {line!r}"
            )
        sats = [Sv.from_str(sat_list[i : i + 3]) for i in range(0, len(sat_list), 3)]
        if len(set(sats)) != len(sats):
            raise exceptions.FormatError(f"Satellite listed twice on epoch line {line!r}")
        return epoch_line, sats


CRX1 = Layout(crinex_version="1.0", rinex_version=2, marker="&", sat_list_start=32, clock_decimals=9)
CRX3 = Layout(crinex_version="3.0", rinex_version=3, marker=">", sat_list_start=41, clock_decimals=12)


def from_crinex_version(version):
    """Layout of a Compact RINEX version, as written in the CRINEX VERS / TYPE line"""
    try:
        major = int(float(version))
    except ValueError:
        raise exceptions.FormatError(f"Invalid Compact RINEX version {version!r}") from None
    if major == 1:
        return CRX1
    if major == 3:
        return CRX3
    raise exceptions.FormatError(f"Unsupported Compact RINEX version {version!r}")


def from_rinex_version(major_version):
    """Layout used to compress a RINEX version"""
    return CRX1 if observation.layout_version(major_version) == 2 else CRX3

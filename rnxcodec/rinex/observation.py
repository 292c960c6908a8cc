"""Reading and writing RINEX observation files

Example:
--------

    from rnxcodec.rinex import observation
    record = observation.read_observations(text)
    text = observation.write_observations(record)

Description:
------------

The body of a RINEX observation file consists of epochs. Each epoch starts with an epoch line giving the time, the
epoch flag and the number of satellites, followed by the observations of each satellite. Each observation is written
as a 16 character field: the value in F14.3 format, the loss of lock indicator (LLI) and the signal strength indicator
(SSI).

RINEX 2 and RINEX 3/4 lay out epochs differently:

| Version | Epoch line                                 | Satellites                  | Observations                   |
|---------|--------------------------------------------|-----------------------------|--------------------------------|
| 2       | 2-digit year, clock F12.9 in columns 69-80 | 12 per line from column 33  | 5 per line, continuation lines |
| 3, 4    | starts with `>`, clock F15.12 at column 42 | first 3 columns of obs line | one line per satellite         |

Epochs with flags 2 to 5 are special events followed by the given number of header lines instead of observations.
They are kept verbatim in `ObservationRecord.events`.

The formatting and parsing of the epoch line prefix is shared with the Compact RINEX codec.

"""

# Standard library imports
from collections import namedtuple

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.observation import Cell, ObservationEpoch, OBS_DECIMALS
from rnxcodec.data.record import ObservationRecord
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions
from rnxcodec.lib import log
from rnxcodec.lib.enums import EpochFlag
from rnxcodec.rinex.fields import format_decimal, parse_decimal
from rnxcodec.rinex.header import read_header, write_header

# Decoded epoch line. The epoch is None for special events with a blank date
EpochLine = namedtuple("EpochLine", ["epoch", "flag", "num_sat"])

OBS_WIDTH = 16
SATS_PER_LINE_V2 = 12
OBS_PER_LINE_V2 = 5

# Clock offset decimals and width, and the column where the satellite list starts
CLOCK_FORMAT = {2: (9, 12), 3: (12, 15)}
SAT_LIST_START = {2: 32, 3: 41}

# ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
#  05  3 24 13 10 36.0000000  0  5G06G09G12G15G18                       -.123456789
# > 2006 03 24 13 10 36.0000000  0  5      -0.123456789012
_EPOCH_COLUMNS = {
    2: {
        "year": (1, 3),
        "month": (4, 6),
        "day": (7, 9),
        "hour": (10, 12),
        "minute": (13, 15),
        "second": (15, 26),
        "flag": (28, 29),
        "num_sat": (29, 32),
    },
    3: {
        "year": (2, 6),
        "month": (7, 9),
        "day": (10, 12),
        "hour": (13, 15),
        "minute": (16, 18),
        "second": (18, 29),
        "flag": (31, 32),
        "num_sat": (32, 35),
    },
}


def layout_version(major_version):
    """RINEX 1 and 2 share one epoch layout, RINEX 3 and 4 another"""
    return 2 if major_version < 3 else 3


def parse_epoch_line(line, version):
    """Parse the time, flag and number of satellites of an epoch line

    Args:
        line (str):     Epoch line.
        version (int):  Layout version, 2 or 3.

    Returns:
        EpochLine: Epoch, epoch flag and number of satellites.
    """
    if version == 3 and not line.startswith(">"):
        raise exceptions.FormatError(f"Epoch line does not start with '>': {line!r}")
    fields = {name: line[start:end].strip() for name, (start, end) in _EPOCH_COLUMNS[version].items()}
    try:
        flag = EpochFlag(int(fields["flag"] or 0))
        num_sat = int(fields["num_sat"] or 0)
        if not fields["year"] and flag.is_event:
            return EpochLine(None, flag, num_sat)

        year = int(fields["year"])
        if version == 2:
            year += 2000 if year < 80 else 1900
        seconds = parse_decimal(fields["second"], 7)
        if seconds is None:
            raise ValueError("missing seconds")
        epoch = Epoch.from_components(
            year, int(fields["month"]), int(fields["day"]), int(fields["hour"]), int(fields["minute"]), seconds * 100, flag
        )
    except ValueError as err:
        raise exceptions.FormatError(f"Invalid epoch line {line!r}: {err}") from None
    return EpochLine(epoch, flag, num_sat)


def format_epoch_line(epoch, num_sat, version):
    """Format the time, flag and number of satellites of an epoch line

    Args:
        epoch (Epoch):   Time and flag.
        num_sat (int):   Number of satellites.
        version (int):   Layout version, 2 or 3.

    Returns:
        String: The first 32 (version 2) or 35 (version 3) characters of the epoch line.
    """
    year, month, day, hour, minute, nanoseconds = epoch.components()
    if nanoseconds % 100:
        raise exceptions.FormatError(f"Epoch {epoch} can not be written with 7 decimals in the seconds")
    seconds, fraction = divmod(nanoseconds // 100, 10 ** 7)
    flag = int(epoch.flag)
    if version == 2:
        return (
            f" {year % 100:02d} {month:2d} {day:2d} {hour:2d} {minute:2d}{seconds:3d}.{fraction:07d}  {flag:d}{num_sat:3d}"
        )
    return f"> {year:4d} {month:02d} {day:02d} {hour:02d} {minute:02d}{seconds:3d}.{fraction:07d}  {flag:d}{num_sat:3d}"


def parse_obs_field(text):
    """Parse one 16 character observation field, None if the value is blank"""
    text = text.ljust(OBS_WIDTH)
    mantissa = parse_decimal(text[:14], OBS_DECIMALS)
    if mantissa is None:
        return None
    return Cell(mantissa, text[14], text[15])


def format_obs_field(cell):
    """Format one observation as a 16 character field"""
    if cell is None:
        return " " * OBS_WIDTH
    return f"{format_decimal(cell.mantissa, OBS_DECIMALS, 14)}{cell.lli or ' '}{cell.ssi or ' '}"


def _parse_obs_fields(sv, text, codes):
    """Cells of one satellite, from the concatenated observation fields"""
    if len(text.rstrip()) > len(codes) * OBS_WIDTH:
        raise exceptions.FormatError(f"More observations for {sv} than the {len(codes)} declared in the header")
    cells = dict()
    for idx, code in enumerate(codes):
        cell = parse_obs_field(text[idx * OBS_WIDTH : (idx + 1) * OBS_WIDTH])
        if cell is not None:
            cells[code] = cell
    return cells


class _Lines:
    """Iterator over the lines of the body, reporting truncation with the partially read record"""

    def __init__(self, lines, record):
        self._lines = lines
        self.record = record

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._lines)

    def next_line(self, what):
        try:
            return next(self._lines)
        except StopIteration:
            raise exceptions.TruncationError(
                f"File ended while reading {what}", index=len(self.record), partial=self.record
            ) from None


def _read_event(lines, line, epoch_line):
    event_lines = [lines.next_line("special event records") for _ in range(epoch_line.num_sat)]
    lines.record.add_event(line, event_lines)


def _read_epoch_v2(lines, line):
    epoch_line = parse_epoch_line(line, 2)
    if epoch_line.flag.is_event:
        return _read_event(lines, line, epoch_line)

    clock = parse_decimal(line[68:80], CLOCK_FORMAT[2][0])
    sat_list = line[32:68]
    for _ in range(1, (epoch_line.num_sat + SATS_PER_LINE_V2 - 1) // SATS_PER_LINE_V2):
        sat_list += lines.next_line("satellite list")[32:68]
    sats = [Sv.from_str(sat_list[i : i + 3]) for i in range(0, 3 * epoch_line.num_sat, 3)]

    codes = lines.record.header.observables(None)
    num_lines = max((len(codes) + OBS_PER_LINE_V2 - 1) // OBS_PER_LINE_V2, 1)
    satellites = dict()
    for sv in sats:
        text = "".join(lines.next_line(f"observations of {sv}").ljust(80)[:80] for _ in range(num_lines))
        satellites[sv] = _parse_obs_fields(sv, text, codes)
    lines.record.add(epoch_line.epoch, ObservationEpoch(clock, satellites))


def _read_epoch_v3(lines, line):
    epoch_line = parse_epoch_line(line, 3)
    if epoch_line.flag.is_event:
        return _read_event(lines, line, epoch_line)

    clock = parse_decimal(line[41:56], CLOCK_FORMAT[3][0])
    satellites = dict()
    for _ in range(epoch_line.num_sat):
        obs_line = lines.next_line("observations")
        sv = Sv.from_str(obs_line[0:3])
        if sv in satellites:
            raise exceptions.FormatError(f"Satellite {sv} is listed twice in epoch {epoch_line.epoch}")
        satellites[sv] = _parse_obs_fields(sv, obs_line[3:], lines.record.header.observables(sv))
    lines.record.add(epoch_line.epoch, ObservationEpoch(clock, satellites))


def read_observations(text):
    """Read a RINEX observation file

    Args:
        text (str):  Contents of the file.

    Returns:
        ObservationRecord: Header and observations.
    """
    all_lines = iter(text.splitlines())
    header = read_header(all_lines)
    if header.file_type != "O":
        raise exceptions.FormatError(f"Expected a RINEX observation file, got file type {header.file_type!r}")

    record = ObservationRecord(header)
    lines = _Lines(all_lines, record)
    read_epoch = _read_epoch_v2 if layout_version(header.major_version) == 2 else _read_epoch_v3
    for line in lines:
        if not line.strip():
            continue
        try:
            read_epoch(lines, line)
        except exceptions.CodecError as err:
            if err.index is None:
                err.index = len(record)
            raise

    log.debug(f"Read {len(record)} epochs and {len(record.events)} special events from RINEX {header.version}")
    return record


def _write_events(record, anchor):
    lines = list()
    for event in record.events_at(anchor):
        lines.append(event.epoch_line)
        lines.extend(event.lines)
    return lines


def _epoch_lines_v2(record, epoch, content):
    sats = [str(sv) for sv in content.satellites]
    prefix = format_epoch_line(epoch, len(sats), 2)
    decimals, width = CLOCK_FORMAT[2]
    clock = "" if content.clock is None else format_decimal(content.clock, decimals, width)

    lines = list()
    for idx in range(0, max(len(sats), 1), SATS_PER_LINE_V2):
        sat_list = "".join(sats[idx : idx + SATS_PER_LINE_V2])
        if idx == 0:
            lines.append(f"{prefix}{sat_list:36s}{clock}".rstrip())
        else:
            lines.append(f"{'':32s}{sat_list}")

    codes = record.header.observables(None)
    for cells in content.satellites.values():
        fields = [format_obs_field(cells.get(code)) for code in codes]
        for idx in range(0, max(len(fields), 1), OBS_PER_LINE_V2):
            lines.append("".join(fields[idx : idx + OBS_PER_LINE_V2]).rstrip())
    return lines


def _epoch_lines_v3(record, epoch, content):
    prefix = format_epoch_line(epoch, len(content.satellites), 3)
    decimals, width = CLOCK_FORMAT[3]
    lines = [prefix if content.clock is None else f"{prefix}      {format_decimal(content.clock, decimals, width)}"]
    for sv, cells in content.satellites.items():
        fields = "".join(format_obs_field(cells.get(code)) for code in record.header.observables(sv))
        lines.append(f"{sv}{fields}".rstrip())
    return lines


def write_observations(record):
    """Write a RINEX observation file

    Args:
        record (ObservationRecord):  Header and observations.

    Returns:
        String: Contents of the file, with newline line endings.
    """
    epoch_lines = _epoch_lines_v2 if layout_version(record.header.major_version) == 2 else _epoch_lines_v3
    lines = write_header(record.header)
    for idx, (epoch, content) in enumerate(record.items()):
        lines.extend(_write_events(record, idx))
        try:
            lines.extend(epoch_lines(record, epoch, content))
        except exceptions.CodecError as err:
            err.index = idx
            raise
    lines.extend(_write_events(record, len(record)))
    return "".join(f"{line}\n" for line in lines)

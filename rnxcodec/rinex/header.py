"""Reading and writing RINEX headers

Example:
--------

    from rnxcodec.rinex import header
    lines = iter(text.splitlines())
    hdr = header.read_header(lines)     # Consumes lines up to and including END OF HEADER

Description:
------------

Header lines are identified by the label in columns 61-80. Each label we care about is listed in `_HEADER_DEF`
together with the function that parses it and the column ranges of its fields. Lines with other labels are only kept
verbatim in `Header.lines`.

Observable codes are declared by `# / TYPES OF OBSERV` in RINEX 2 files and by `SYS / # / OBS TYPES` in RINEX 3 and 4
files. Both may continue on several lines.

"""

# Standard library imports
from datetime import datetime, timezone

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import Header, SHARED_OBSERVABLES
from rnxcodec.lib import exceptions
from rnxcodec.lib import log
from rnxcodec.rinex.fields import parse_decimal


END_OF_HEADER = "END OF HEADER"


def _parse_version_type(header, fields, _):
    header.version = fields["version"]
    header.file_type = fields["file_type"] or "O"
    header.sat_system = fields["sat_sys"] or "G"


def _parse_string(header, fields, _):
    header.meta.update(fields)


def _parse_float(header, fields, _):
    header.meta.update({k: float(v) for k, v in fields.items() if v})


def _parse_integer(header, fields, _):
    header.meta.update({k: int(v) for k, v in fields.items() if v})


def _parse_comment(header, fields, _):
    header.meta.setdefault("comment", list()).append(fields["comment"])


def _parse_position(header, fields, _):
    header.meta["approx_position"] = tuple(float(fields[k]) for k in ("pos_x", "pos_y", "pos_z"))


def _parse_types_of_observ(header, fields, cache):
    """RINEX 2 observable codes, shared by all constellations"""
    if fields["num_obstypes"]:
        cache["num_obstypes"] = int(fields["num_obstypes"])
        header.obs_types[SHARED_OBSERVABLES] = list()
    if SHARED_OBSERVABLES not in header.obs_types:
        raise exceptions.FormatError("Continuation of '# / TYPES OF OBSERV' without a preceding first line")
    header.obs_types[SHARED_OBSERVABLES].extend(fields[f] for f in sorted(fields) if f.startswith("type_") and fields[f])


def _parse_sys_obs_types(header, fields, cache):
    """RINEX 3 and 4 observable codes, one list per constellation"""
    if fields["satellite_sys"]:
        cache["sys"] = fields["satellite_sys"]
        header.obs_types[cache["sys"]] = list()
    if "sys" not in cache:
        raise exceptions.FormatError("Continuation of 'SYS / # / OBS TYPES' without a preceding first line")
    header.obs_types[cache["sys"]].extend(fields[f] for f in sorted(fields) if f.startswith("type_") and fields[f])


def _parse_time_of_obs(header, fields, cache):
    if not fields["year"]:
        return
    seconds = parse_decimal(fields["second"], 7)
    epoch = Epoch.from_components(
        int(fields["year"]),
        int(fields["month"]),
        int(fields["day"]),
        int(fields["hour"]),
        int(fields["minute"]),
        seconds * 100,
    )
    header.meta[cache["label"]] = epoch.time
    if fields["time_sys"]:
        header.meta["time_sys"] = fields["time_sys"]


def _parse_leap_seconds(header, fields, _):
    header.meta["leap_seconds"] = {k: int(v) if v.lstrip("-").isdigit() else v for k, v in fields.items() if v}


_TIME_OF_OBS_FIELDS = {
    "year": (0, 6),
    "month": (6, 12),
    "day": (12, 18),
    "hour": (18, 24),
    "minute": (24, 30),
    "second": (30, 43),
    "time_sys": (48, 51),
}

_HEADER_DEF = {
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    #      3.02           OBSERVATION DATA    M (MIXED)           RINEX VERSION / TYPE
    "RINEX VERSION / TYPE": (_parse_version_type, {"version": (0, 20), "file_type": (20, 21), "sat_sys": (40, 41)}),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    # MAKERINEX 2.0.20023 BKG/GOWETTZELL      2016-03-02 00:20    PGM / RUN BY / DATE
    "PGM / RUN BY / DATE": (_parse_string, {"program": (0, 20), "run_by": (20, 40), "file_created": (40, 60)}),
    "COMMENT": (_parse_comment, {"comment": (0, 60)}),
    "MARKER NAME": (_parse_string, {"marker_name": (0, 60)}),
    "MARKER NUMBER": (_parse_string, {"marker_number": (0, 20)}),
    "MARKER TYPE": (_parse_string, {"marker_type": (0, 20)}),
    "OBSERVER / AGENCY": (_parse_string, {"observer": (0, 20), "agency": (20, 60)}),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    # 3008040             SEPT POLARX4        2.9.0               REC # / TYPE / VERS
    "REC # / TYPE / VERS": (
        _parse_string,
        {"receiver_number": (0, 20), "receiver_type": (20, 40), "receiver_version": (40, 60)},
    ),
    "ANT # / TYPE": (_parse_string, {"antenna_number": (0, 20), "antenna_type": (20, 40)}),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    #   3275756.7623   321111.1395  5445046.6477                  APPROX POSITION XYZ
    "APPROX POSITION XYZ": (_parse_position, {"pos_x": (0, 14), "pos_y": (14, 28), "pos_z": (28, 42)}),
    "ANTENNA: DELTA H/E/N": (
        _parse_float,
        {"antenna_height": (0, 14), "antenna_east": (14, 28), "antenna_north": (28, 42)},
    ),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    #     14    C1    C2    C5    P1    P2    L1    L2    L5    D1# / TYPES OF OBSERV
    #           D2    D5    S1    S2    S5                        # / TYPES OF OBSERV
    "# / TYPES OF OBSERV": (
        _parse_types_of_observ,
        {"num_obstypes": (0, 6), **{f"type_{i + 1}": (6 + 6 * i, 12 + 6 * i) for i in range(9)}},
    ),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    # G   26 C1C C1P L1C L1P D1C D1P S1C S1P C2P C2W C2S C2L C2X  SYS / # / OBS TYPES
    #        L2P L2W L2S L2L L2X D2P D2W D2S D2L D2X S2P S2W S2S  SYS / # / OBS TYPES
    "SYS / # / OBS TYPES": (
        _parse_sys_obs_types,
        {
            "satellite_sys": (0, 1),
            "num_obstypes": (3, 6),
            **{f"type_{i + 1:02d}": (7 + 4 * i, 10 + 4 * i) for i in range(13)},
        },
    ),
    "INTERVAL": (_parse_float, {"interval": (0, 10)}),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    #  2016    03    01    00    00   00.0000000     GPS         TIME OF FIRST OBS
    "TIME OF FIRST OBS": (_parse_time_of_obs, _TIME_OF_OBS_FIELDS),
    "TIME OF LAST OBS": (_parse_time_of_obs, _TIME_OF_OBS_FIELDS),
    # ----+----1----+----2----+----3----+----4----+----5----+----6----+----7----+----8
    #     16    17  1851     3                                    LEAP SECONDS
    "LEAP SECONDS": (
        _parse_leap_seconds,
        {"leap_seconds": (0, 6), "future_past_leap_seconds": (6, 12), "week": (12, 18), "week_day": (18, 24)},
    ),
    "# OF SATELLITES": (_parse_integer, {"num_satellites": (0, 6)}),
}


def read_header(lines):
    """Read header lines up to and including END OF HEADER

    Args:
        lines (Iterator):  Lines of the file without line endings. Header lines are consumed from the iterator.

    Returns:
        Header: The header with verbatim lines and parsed metadata.
    """
    header = Header(obs_types=dict())
    cache = dict()
    for line in lines:
        header.lines.append(line)
        label = line[60:].strip()
        if label == END_OF_HEADER:
            break
        if label not in _HEADER_DEF:
            continue

        parser, field_def = _HEADER_DEF[label]
        fields = {name: line[start:end].strip() for name, (start, end) in field_def.items()}
        cache["label"] = label.lower().replace(" ", "_")
        try:
            parser(header, fields, cache)
        except ValueError as err:
            raise exceptions.FormatError(f"Invalid header line {line!r}: {err}") from None
    else:
        raise exceptions.TruncationError(f"Header ended after {len(header.lines)} lines without {END_OF_HEADER}")

    if not header.lines[0][60:].startswith("RINEX VERSION / TYPE"):
        raise exceptions.FormatError(f"Header does not start with 'RINEX VERSION / TYPE': {header.lines[0]!r}")
    log.debug(f"Read RINEX {header.version} header with observables {header.obs_types}")
    return header


def write_header(header):
    """Lines of a RINEX header

    The verbatim lines are used when the header was read from a file. Otherwise a minimal header is generated from the
    version, file type and observable codes.

    Args:
        header (Header):  Header to write.

    Returns:
        List: Header lines without line endings.
    """
    if header.lines:
        return list(header.lines)

    file_type = {"O": "OBSERVATION DATA", "M": "METEOROLOGICAL DATA", "N": "NAVIGATION DATA"}.get(
        header.file_type, header.file_type
    )
    lines = [f"{header.version:>9s}{'':11s}{file_type:20s}{header.sat_system:20s}RINEX VERSION / TYPE"]
    created = datetime.now(timezone.utc).strftime("%Y%m%d %H%M%S UTC")
    lines.append(f"{'rnxcodec':20s}{'':20s}{created:20s}PGM / RUN BY / DATE")

    if SHARED_OBSERVABLES in header.obs_types:
        codes = header.obs_types[SHARED_OBSERVABLES]
        for idx in range(0, max(len(codes), 1), 9):
            num = f"{len(codes):6d}" if idx == 0 else " " * 6
            types = "".join(f"{c:>6s}" for c in codes[idx : idx + 9])
            lines.append(f"{num}{types:54s}# / TYPES OF OBSERV")
    else:
        for sys in sorted(header.obs_types):
            codes = header.obs_types[sys]
            for idx in range(0, max(len(codes), 1), 13):
                first = f"{sys:1s}{len(codes):5d}" if idx == 0 else " " * 6
                lines.append(f"{first} {' '.join(codes[idx : idx + 13]):53s}SYS / # / OBS TYPES")

    lines.append(f"{'':60s}{END_OF_HEADER}")
    return lines

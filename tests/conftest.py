"""Common functions for all tests

"""

# Third party imports
import pytest

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import CrinexInfo, Header
from rnxcodec.data.observation import Cell, ObservationEpoch
from rnxcodec.data.record import ObservationRecord
from rnxcodec.data.satellite import Sv


def pytest_configure(config):
    config.addinivalue_line("markers", "quick: fast unit tests")


def obs_field(value, lli=" ", ssi=" "):
    """One RINEX observation field, the value in F14.3 format followed by the flags"""
    return f"{value:>14s}{lli}{ssi}"


#
# RINEX 3
#
RINEX3_HEADER = [
    f"{'3.04':>9s}{'':11s}{'OBSERVATION DATA':20s}{'M':20s}RINEX VERSION / TYPE",
    f"{'G':1s}{2:5d} {'C1C L1C':53s}SYS / # / OBS TYPES",
    f"{'E':1s}{1:5d} {'C1C':53s}SYS / # / OBS TYPES",
    f"{'':60s}END OF HEADER",
]

RINEX3_BODY = [
    "> 2020 01 01 00 00  0.0000000  0  2       0.000000000123",
    "G01" + obs_field("20000000.000") + obs_field("105000000.123", "1", "7"),
    "E11" + obs_field("22000000.500"),
    "> 2020 01 01 00 00 15.0000000  4  1",
    f"{'EVENT INSERTED BETWEEN TWO EPOCHS':60s}COMMENT",
    "> 2020 01 01 00 00 30.0000000  0  2       0.000000000125",
    "G01" + obs_field("20000001.000") + obs_field("105000005.246", "1", "7"),
    "E11",
]


@pytest.fixture
def rinex3_text():
    """A small RINEX 3 observation file with a special event"""
    return "".join(f"{line.rstrip()}\n" for line in RINEX3_HEADER + RINEX3_BODY)


#
# RINEX 2
#
RINEX2_HEADER = [
    f"{'2.11':>9s}{'':11s}{'OBSERVATION DATA':20s}{'G (GPS)':20s}RINEX VERSION / TYPE",
    f"{3:6d}{'C1':>6s}{'L1':>6s}{'S1':>6s}{'':36s}# / TYPES OF OBSERV",
    f"{'':60s}END OF HEADER",
]

RINEX2_BODY = [
    f" 20  1  1  0  0  0.0000000  0  2{'G01G02':36s}-0.123456789",
    obs_field("23629347.915") + obs_field("124167015.234", "1", "8") + obs_field("45.000"),
    obs_field("21000123.456") + obs_field("-353.000") + obs_field("38.250"),
    f" 20  1  1  0  0 30.0000000  0  2{'G01G02':36s}-0.123456790",
    obs_field("23629350.915") + obs_field("124167031.000", " ", "8") + obs_field("45.250"),
    obs_field("21000120.456") + obs_field("") + obs_field("38.000"),
]


@pytest.fixture
def rinex2_text():
    """A small RINEX 2 observation file"""
    lines = RINEX2_HEADER + RINEX2_BODY
    return "".join(f"{line.rstrip()}\n" for line in lines)


#
# Records
#
@pytest.fixture
def header3():
    """RINEX 3 header with GPS and Galileo observables, as read from a Compact RINEX file"""
    return Header(
        version="3.04",
        obs_types={"G": ["C1C", "L1C"], "E": ["C1C"]},
        lines=list(RINEX3_HEADER),
        crinex=CrinexInfo("3.0", "rnxcodec", "18-Oct-26 10:00", 3),
    )


@pytest.fixture
def record3(header3):
    """Observation record with blanks, flags and a satellite that comes and goes"""
    g01, e11 = Sv("G", 1), Sv("E", 11)
    record = ObservationRecord(header3)
    record.add(
        Epoch.from_components(2020, 1, 1, 0, 0, 0),
        ObservationEpoch(123, {g01: {"C1C": Cell(20000000000), "L1C": Cell(105000000123, "1", "7")}, e11: {}}),
    )
    record.add(
        Epoch.from_components(2020, 1, 1, 0, 0, 30 * 10 ** 9),
        ObservationEpoch(None, {g01: {"C1C": Cell(20000001000), "L1C": Cell(105000005246, None, "7")}}),
    )
    record.add(
        Epoch.from_components(2020, 1, 1, 0, 1, 0),
        ObservationEpoch(
            -5, {g01: {"L1C": Cell(105000010370, "4")}, e11: {"C1C": Cell(22000003000, None, "9")}}
        ),
    )
    return record

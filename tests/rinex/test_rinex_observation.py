"""Test :mod:`rnxcodec.rinex`

"""
# Standard library imports
import unittest

# External library imports
import numpy as np
import pytest

# rnxcodec imports
from rnxcodec import rinex
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import Header
from rnxcodec.data.observation import Cell, ObservationEpoch
from rnxcodec.data.record import ObservationRecord
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import EpochFlag
from rnxcodec.rinex import observation
from rnxcodec.rinex.fields import format_decimal, parse_decimal

G01, G02, E11 = Sv("G", 1), Sv("G", 2), Sv("E", 11)


@pytest.mark.quick
class TestDecimalFields(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_decimal("  23629347.915", 3), 23629347915)
        self.assertEqual(parse_decimal("-.353", 3), -353)
        self.assertEqual(parse_decimal("17", 3), 17000)
        self.assertEqual(parse_decimal("1.50", 1), 15)
        self.assertIsNone(parse_decimal("      ", 3))

    def test_parse_invalid(self):
        for text in ("1.2.3", "abc", "-", "1.2345"):
            with self.subTest(text=text):
                with self.assertRaises(exceptions.FormatError):
                    parse_decimal(text, 3)

    def test_format(self):
        self.assertEqual(format_decimal(-353, 3, 14), "        -0.353")
        self.assertEqual(format_decimal(-123456789, 9, 12), "-0.123456789")
        self.assertEqual(format_decimal(None, 3, 14), " " * 14)

    def test_format_too_wide(self):
        with self.assertRaises(exceptions.DifferenceOverflowError):
            format_decimal(10 ** 14, 3, 14)


@pytest.mark.quick
class TestEpochLine(unittest.TestCase):
    def test_format_v2(self):
        e = Epoch.from_components(2005, 3, 24, 13, 10, 36 * 10 ** 9)
        self.assertEqual(observation.format_epoch_line(e, 5, 2), " 05  3 24 13 10 36.0000000  0  5")

    def test_format_v3(self):
        e = Epoch.from_components(2006, 3, 24, 13, 10, 36_500_000_000, EpochFlag.power_failure)
        self.assertEqual(observation.format_epoch_line(e, 5, 3), "> 2006 03 24 13 10 36.5000000  1  5")

    def test_parse_v2(self):
        line = " 98  3 24 13 10 36.0000000  0  5G06G09G12G15G18"
        epoch_line = observation.parse_epoch_line(line, 2)
        self.assertEqual(epoch_line.epoch.time, np.datetime64("1998-03-24T13:10:36", "ns"))
        self.assertEqual(epoch_line.num_sat, 5)

    def test_parse_event_without_date(self):
        epoch_line = observation.parse_epoch_line(">" + " " * 30 + "4  2", 3)
        self.assertIsNone(epoch_line.epoch)
        self.assertEqual(epoch_line.flag, EpochFlag.header_info)
        self.assertEqual(epoch_line.num_sat, 2)

    def test_parse_invalid(self):
        with self.assertRaises(exceptions.FormatError):
            observation.parse_epoch_line("  2020 01 01 00 00  0.0000000  0  1", 3)
        with self.assertRaises(exceptions.FormatError):
            observation.parse_epoch_line("> 2020 13 01 00 00  0.0000000  0  1", 3)


@pytest.mark.quick
def test_read_rinex3(rinex3_text):
    record = rinex.read_observations(rinex3_text)
    first = Epoch.from_components(2020, 1, 1, 0, 0, 0)

    assert record.header.obs_types == {"G": ["C1C", "L1C"], "E": ["C1C"]}
    assert len(record) == 2
    assert record[first].clock == 123
    assert record.cell(first, G01, "L1C") == Cell(105000000123, "1", "7")
    assert record.cell(first, E11, "C1C") == Cell(22000000500)
    assert len(record.events) == 1
    assert record.events[0].anchor == 1
    assert record.events[0].lines[0].startswith("EVENT INSERTED")


@pytest.mark.quick
def test_write_rinex3(rinex3_text):
    assert rinex.write_observations(rinex.read_observations(rinex3_text)) == rinex3_text


@pytest.mark.quick
def test_read_rinex2(rinex2_text):
    record = rinex.read_observations(rinex2_text)
    second = Epoch.from_components(2020, 1, 1, 0, 0, 30 * 10 ** 9)

    assert record.header.version == "2.11"
    assert record.header.observables(None) == ["C1", "L1", "S1"]
    assert record[second].clock == -123456790
    assert record.cell(second, G01, "L1") == Cell(124167031000, None, "8")
    assert record.cell(second, G02, "L1") is None
    assert record.cell(second, G02, "S1") == Cell(38000)


@pytest.mark.quick
def test_write_rinex2(rinex2_text):
    assert rinex.write_observations(rinex.read_observations(rinex2_text)) == rinex2_text


@pytest.mark.quick
def test_rinex2_continuation_lines():
    header = Header(version="2.11", sat_system="G", obs_types={"*": ["C1", "L1", "L2", "P1", "P2", "S1"]})
    record = ObservationRecord(header)
    sats = [Sv("G", prn) for prn in range(1, 15)]
    cells = {code: Cell(1000 * (idx + 1)) for idx, code in enumerate(header.obs_types["*"])}
    record.add(Epoch(np.datetime64("2021-06-01T12:00:00")), ObservationEpoch(None, {sv: dict(cells) for sv in sats}))

    text = rinex.write_observations(record)
    body = text.split("END OF HEADER\n")[1].splitlines()

    assert body[0].endswith("G01G02G03G04G05G06G07G08G09G10G11G12")
    assert body[1] == " " * 32 + "G13G14"
    assert len(body) == 2 + 2 * len(sats)
    assert rinex.read_observations(text) == record


@pytest.mark.quick
def test_read_header_metadata():
    lines = [
        f"{'3.04':>9s}{'':11s}{'OBSERVATION DATA':20s}{'G':20s}RINEX VERSION / TYPE",
        f"{'NYA1':60s}MARKER NAME",
        f"{3275756.7623:14.4f}{321111.1395:14.4f}{5445046.6477:14.4f}{'':18s}APPROX POSITION XYZ",
        f"{30.0:10.3f}{'':50s}INTERVAL",
        f"{2020:6d}{1:6d}{1:6d}{0:6d}{0:6d}{0.0:13.7f}{'GPS':>8s}{'':9s}TIME OF FIRST OBS",
        f"{'G':1s}{1:5d} {'C1C':53s}SYS / # / OBS TYPES",
        f"{'':60s}END OF HEADER",
    ]
    header = rinex.read_header(iter(lines))

    assert header.meta["marker_name"] == "NYA1"
    assert header.meta["approx_position"] == (3275756.7623, 321111.1395, 5445046.6477)
    assert header.meta["interval"] == 30.0
    assert header.meta["time_of_first_obs"] == np.datetime64("2020-01-01T00:00:00", "ns")
    assert header.meta["time_sys"] == "GPS"
    assert rinex.write_header(header) == lines


@pytest.mark.quick
def test_header_errors():
    with pytest.raises(exceptions.TruncationError):
        rinex.read_header(iter([f"{'3.04':>9s}{'':11s}{'OBSERVATION DATA':20s}{'G':20s}RINEX VERSION / TYPE"]))
    with pytest.raises(exceptions.FormatError):
        rinex.read_header(iter([f"{'':60s}COMMENT", f"{'':60s}END OF HEADER"]))


@pytest.mark.quick
def test_truncated_body(rinex3_text):
    text = "\n".join(rinex3_text.splitlines()[:-1])
    with pytest.raises(exceptions.TruncationError) as excinfo:
        rinex.read_observations(text)
    assert len(excinfo.value.partial) == 1


@pytest.mark.quick
def test_navigation_file_is_rejected():
    text = f"{'3.04':>9s}{'':11s}{'NAVIGATION DATA':20s}{'G':20s}RINEX VERSION / TYPE\n{'':60s}END OF HEADER\n"
    with pytest.raises(exceptions.FormatError):
        rinex.read_observations(text)

"""Test :mod:`rnxcodec.data`

"""
# Standard library imports
import unittest

# External library imports
import numpy as np
import pytest

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import Header
from rnxcodec.data.observation import Cell, ObservationEpoch
from rnxcodec.data.record import MeteoRecord, ObservationRecord
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import Constellation, EpochFlag

G07, E11 = Sv("G", 7), Sv("E", 11)


def epoch(second, flag=EpochFlag.ok):
    return Epoch.from_components(2020, 1, 1, 0, 0, second * 10 ** 9, flag)


@pytest.mark.quick
class TestModel(unittest.TestCase):
    def test_satellite(self):
        self.assertEqual(Sv.from_str("G07"), G07)
        self.assertEqual(Sv.from_str(" 7"), G07)
        self.assertEqual(Sv.from_str("E11").constellation, Constellation.galileo)
        self.assertEqual(str(Sv("R", 3)), "R03")
        self.assertLess(E11, G07)

    def test_invalid_satellite(self):
        with self.assertRaises(exceptions.FormatError):
            Sv.from_str("X01")

    def test_epoch_components(self):
        e = Epoch.from_components(2020, 2, 29, 23, 59, 59_999_999_900)
        self.assertEqual(e.time, np.datetime64("2020-02-29T23:59:59.9999999", "ns"))
        self.assertEqual(e.components(), (2020, 2, 29, 23, 59, 59_999_999_900))

    def test_invalid_date(self):
        with self.assertRaises(exceptions.FormatError):
            Epoch.from_components(2021, 2, 29, 0, 0, 0)

    def test_cell(self):
        cell = Cell.from_float(-353.25, " ", "7")
        self.assertEqual(cell, Cell(-353250, None, "7"))
        self.assertEqual(cell.value, -353.25)

    def test_header_observables(self):
        header = Header(obs_types={"G": ["C1C", "L1C"]})
        self.assertEqual(header.observables(G07), ["C1C", "L1C"])
        with self.assertRaises(exceptions.UnknownObservableError):
            header.observables(E11)
        with self.assertRaises(exceptions.UnknownObservableError):
            header.observables(None)

    def test_shared_observables(self):
        header = Header(version="2.11", obs_types={"*": ["C1", "L1"]})
        self.assertEqual(header.major_version, 2)
        self.assertEqual(header.observables(E11), ["C1", "L1"])


@pytest.mark.quick
class TestObservationRecord(unittest.TestCase):
    def setUp(self):
        self.record = ObservationRecord(Header(obs_types={"G": ["C1C", "L1C"], "E": ["C1C"]}))
        self.record.add(epoch(0), ObservationEpoch(17, {G07: {"C1C": Cell(21000123456)}}))
        self.record.add(epoch(30), ObservationEpoch(None, {G07: {"L1C": Cell(110000000000, "1")}, E11: {}}))

    def test_cell(self):
        self.assertEqual(self.record.cell(epoch(0), G07, "C1C"), Cell(21000123456))
        self.assertIsNone(self.record.cell(epoch(0), G07, "L1C"))
        self.assertIsNone(self.record.cell(epoch(0), E11, "C1C"))
        self.assertIsNone(self.record.cell(epoch(60), G07, "C1C"))

    def test_satellites(self):
        self.assertEqual(self.record.satellites, [E11, G07])

    def test_undeclared_observable(self):
        with self.assertRaises(exceptions.UnknownObservableError):
            self.record.add(epoch(60), ObservationEpoch(None, {E11: {"L5Q": Cell(1)}}))
        with self.assertRaises(exceptions.UnknownObservableError):
            self.record.add(epoch(60), ObservationEpoch(None, {Sv("R", 1): {"C1C": Cell(1)}}))

    def test_duplicate_epoch(self):
        with self.assertRaises(exceptions.FormatError):
            self.record.add(epoch(30), ObservationEpoch())

    def test_out_of_order(self):
        with self.assertRaises(exceptions.FormatError):
            self.record.add(epoch(15), ObservationEpoch())

    def test_same_time_other_flag(self):
        self.record.add(epoch(30, EpochFlag.power_failure), ObservationEpoch())
        self.assertEqual(len(self.record), 3)

    def test_unordered_then_sort(self):
        self.record.add(epoch(15), ObservationEpoch(), ordered=False)
        self.record.sort()
        self.assertEqual(self.record.epochs, [epoch(0), epoch(15), epoch(30)])

    def test_event_flag_is_rejected(self):
        with self.assertRaises(exceptions.FormatError):
            self.record.add(epoch(60, EpochFlag.header_info), ObservationEpoch())

    def test_events(self):
        self.record.add_event("> 2020 01 01 00 00 45.0000000  4  0   ", [])
        self.assertEqual(self.record.events_at(2)[0].epoch_line, "> 2020 01 01 00 00 45.0000000  4  0")
        self.assertEqual(self.record.events_at(1), [])

    def test_equality(self):
        other = ObservationRecord(Header(obs_types={"G": ["C1C", "L1C"], "E": ["C1C"]}))
        for e, content in self.record.items():
            other.add(e, content)
        self.assertEqual(other, self.record)
        other.add_event("> 2020 01 01 00 01  0.0000000  5  0", [])
        self.assertNotEqual(other, self.record)

    def test_as_dataframe(self):
        df = self.record.as_dataframe()
        self.assertEqual(list(df.columns), ["time", "flag", "satellite", "observable", "value", "lli", "ssi"])
        self.assertEqual(len(df), 2)
        self.assertEqual(df.loc[1, "satellite"], "G07")
        self.assertEqual(df.loc[1, "value"], 110000000.0)
        self.assertEqual(df.loc[1, "lli"], "1")
        self.assertEqual(df.loc[0, "time"], np.datetime64("2020-01-01T00:00:00", "ns"))


@pytest.mark.quick
def test_meteo_record():
    record = MeteoRecord(Header(version="3.04", file_type="M", obs_types={"*": ["PR", "TD"]}))
    record.add(epoch(0), {"PR": Cell(1013250), "TD": Cell(21500)})

    assert record.cell(epoch(0), "TD") == Cell(21500)
    assert record.cell(epoch(0), "HR") is None
    with pytest.raises(exceptions.UnknownObservableError):
        record.add(epoch(30), {"HR": Cell(55000)})


@pytest.mark.quick
def test_split_and_merge(record3):
    record3.add_event("> 2020 01 01 00 00 45.0000000  5  0", [], anchor=2)
    before, after = record3.split(Epoch.from_components(2020, 1, 1, 0, 0, 30 * 10 ** 9))

    assert len(before) == 1 and len(after) == 2
    assert after.epochs[0] == Epoch.from_components(2020, 1, 1, 0, 0, 30 * 10 ** 9)
    assert after.events[0].anchor == 1
    assert before.header == record3.header

    assert after.merge(before) == record3
    assert before.merge(after) == record3


@pytest.mark.quick
def test_split_at_time(record3):
    before, after = record3.split(np.datetime64("2020-01-01T00:05:00"))
    assert before == record3
    assert len(after) == 0


@pytest.mark.quick
def test_merge_rejects_overlap_and_other_observables(record3):
    with pytest.raises(exceptions.FormatError):
        record3.merge(record3)

    other = ObservationRecord(Header(version="3.04", obs_types={"G": ["C1C"]}))
    with pytest.raises(exceptions.FormatError):
        record3.merge(other)
    with pytest.raises(exceptions.FormatError):
        record3.merge(MeteoRecord(record3.header))

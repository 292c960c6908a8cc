"""Records of RINEX data

Description:
------------

A record maps epochs to the data observed at each epoch, together with the header of the file. There is one record
class for each kind of RINEX file handled by rnxcodec:

| Record              | Content of each epoch                                         |
|---------------------|---------------------------------------------------------------|
| ObservationRecord   | ObservationEpoch: clock offset and cells per satellite        |
| MeteoRecord         | Dictionary of cells, keyed by observable code                 |
| NavigationRecord    | Dictionary of ephemerides, keyed by satellite                 |

All records share the same discipline for epochs, implemented in `Record`: epochs are added in non-decreasing time
order, and the same epoch may not be added twice. Epochs can be added out of order by passing `ordered=False`, in
which case the caller must call `sort()` once all epochs are added.

Example:
--------

    >>> record = ObservationRecord(header)
    >>> record.add(epoch, ObservationEpoch(satellites={Sv("G", 7): {"C1C": Cell(21000123456)}}))
    >>> record.cell(epoch, Sv("G", 7), "C1C")
    Cell(mantissa=21000123456, lli=None, ssi=None)

"""

# Standard library imports
import copy
from collections import namedtuple

# External library imports
import numpy as np
import pandas as pd

# rnxcodec imports
from rnxcodec.data.epoch import Epoch
from rnxcodec.data.header import Header, SHARED_OBSERVABLES
from rnxcodec.data.observation import ObservationEpoch
from rnxcodec.data.satellite import Sv
from rnxcodec.lib import exceptions

# Special event epochs, with the number of regular epochs preceding them and their verbatim lines
Event = namedtuple("Event", ["anchor", "epoch_line", "lines"])


class Record:
    """Epoch-indexed data with a header

    Subclasses validate the content of each epoch by overriding `_validate`.
    """

    def __init__(self, header=None):
        self.header = Header() if header is None else header
        self._data = dict()
        self._last_time = None

    def add(self, epoch, content, ordered=True):
        """Add the content of one epoch

        Args:
            epoch (Epoch):   Timestamp and flag.
            content:         Data observed at the epoch.
            ordered (bool):  Require that epochs are added in non-decreasing time order.
        """
        if not isinstance(epoch, Epoch):
            epoch = Epoch(*epoch)
        if epoch in self._data:
            raise exceptions.FormatError(f"Duplicate epoch {epoch}", index=len(self._data))
        if ordered and self._last_time is not None and epoch.time < self._last_time:
            raise exceptions.FormatError(f"Epoch {epoch} is earlier than the previous epoch", index=len(self._data))
        self._validate(epoch, content)
        self._data[epoch] = content
        if self._last_time is None or epoch.time > self._last_time:
            self._last_time = epoch.time

    def _validate(self, epoch, content):
        pass

    def sort(self):
        """Order the epochs by time and then by flag"""
        self._data = {e: self._data[e] for e in sorted(self._data)}

    def merge(self, other):
        """Merge the epochs of two records into a new record

        Args:
            other (Record):  Record of the same kind, with the same observables and no epochs in common.

        Returns:
            Record: New record with the header of this record and the epochs of both, in time order.
        """
        if type(self) is not type(other):
            raise exceptions.FormatError(f"Can not merge a {type(other).__name__} into a {type(self).__name__}")
        if self.header.obs_types != other.header.obs_types:
            raise exceptions.FormatError("Can not merge records with different observables")

        merged = type(self)(copy.deepcopy(self.header))
        for record in (self, other):
            for epoch, content in record.items():
                if epoch in merged:
                    raise exceptions.FormatError(f"Epoch {epoch} is in both records")
                merged.add(epoch, copy.deepcopy(content), ordered=False)
        merged.sort()
        return merged

    def split(self, epoch):
        """Split the record in two at the given time

        Args:
            epoch (Epoch):  Epoch, or time, where the second record starts.

        Returns:
            Tuple: Record of the epochs before the given time, and record of the epochs at or after it.
        """
        time = epoch.time if isinstance(epoch, Epoch) else np.datetime64(epoch, "ns")
        before, after = type(self)(copy.deepcopy(self.header)), type(self)(copy.deepcopy(self.header))
        for this_epoch, content in self.items():
            part = before if this_epoch.time < time else after
            part.add(this_epoch, copy.deepcopy(content), ordered=False)
        return before, after

    @property
    def epochs(self):
        return list(self._data)

    def items(self):
        return self._data.items()

    def __getitem__(self, epoch):
        return self._data[epoch]

    def __contains__(self, epoch):
        return epoch in self._data

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.header == other.header and list(self._data.items()) == list(other._data.items())

    def __repr__(self):
        return f"{type(self).__name__}(header={self.header!r}, num_epochs={len(self)})"


class ObservationRecord(Record):
    """Observations of a RINEX observation file

    Special event epochs (flags 2 to 5) carry header information instead of observations. They are kept in `events`,
    each one anchored by the number of regular epochs preceding it.
    """

    def __init__(self, header=None):
        super().__init__(header)
        self.events = list()

    def _validate(self, epoch, content):
        if epoch.flag.is_event:
            raise exceptions.FormatError(f"Special event {epoch} must be added with add_event", index=len(self))
        for sv, cells in content.satellites.items():
            declared = self.header.observables(sv)
            for code in cells:
                if code not in declared:
                    raise exceptions.UnknownObservableError(
                        f"Observable {code!r} of {sv} is not declared in the header", index=len(self)
                    )

    def add_event(self, epoch_line, lines, anchor=None):
        """Add a special event epoch

        Args:
            epoch_line (str):  The epoch line of the event, verbatim.
            lines (List):      The special records following the epoch line, verbatim.
            anchor (int):      Number of regular epochs before the event, default is all epochs added so far.
        """
        anchor = len(self) if anchor is None else anchor
        self.events.append(Event(anchor, epoch_line.rstrip(), [ln.rstrip() for ln in lines]))

    def events_at(self, anchor):
        """Events placed after `anchor` regular epochs"""
        return [e for e in self.events if e.anchor == anchor]

    def merge(self, other):
        """Merge two observation records, see `Record.merge`

        Events stay after the same regular epoch as in the record they come from.
        """
        merged = super().merge(other)
        position = {epoch: idx for idx, epoch in enumerate(merged.epochs)}
        for record in (self, other):
            epochs = record.epochs
            for event in record.events:
                anchor = position[epochs[event.anchor - 1]] + 1 if event.anchor else 0
                merged.events.append(event._replace(anchor=anchor))
        merged.events.sort(key=lambda e: e.anchor)
        return merged

    def split(self, epoch):
        """Split an observation record in two, see `Record.split`

        Events between the last epoch before the split and the first epoch after it stay with the first record.
        """
        before, after = super().split(epoch)
        for event in self.events:
            if event.anchor <= len(before):
                before.events.append(event)
            else:
                after.events.append(event._replace(anchor=event.anchor - len(before)))
        return before, after

    def cell(self, epoch, sv, code):
        """Look up one cell, None if the value is absent"""
        try:
            return self._data[epoch].cell(sv, code)
        except KeyError:
            return None

    @property
    def satellites(self):
        """All satellites observed in the record"""
        return sorted({sv for content in self._data.values() for sv in content.satellites})

    def as_dataframe(self):
        """Return the observations as a pandas DataFrame, one row for each cell

        Returns:
            pandas.DataFrame: Columns time, flag, satellite, observable, value, lli and ssi.
        """
        rows = [
            (epoch.time, int(epoch.flag), str(sv), code, cell.value, cell.lli, cell.ssi)
            for epoch, content in self._data.items()
            for sv, cells in content.satellites.items()
            for code, cell in cells.items()
        ]
        columns = ["time", "flag", "satellite", "observable", "value", "lli", "ssi"]
        df = pd.DataFrame(rows, columns=columns)
        df["time"] = df["time"].astype("datetime64[ns]")
        return df

    def __eq__(self, other):
        equal = super().__eq__(other)
        if equal is NotImplemented or not equal:
            return equal
        return self.events == other.events


class MeteoRecord(Record):
    """Meteorological observations, keyed by observable code"""

    def _validate(self, epoch, content):
        declared = self.header.obs_types.get(SHARED_OBSERVABLES, list())
        for code in content:
            if code not in declared:
                raise exceptions.UnknownObservableError(
                    f"Meteorological observable {code!r} is not declared in the header", index=len(self)
                )

    def cell(self, epoch, code):
        return self._data.get(epoch, dict()).get(code)


class NavigationRecord(Record):
    """Broadcast ephemerides, keyed by the time of clock and the satellite"""

    def _validate(self, epoch, content):
        for sv in content:
            if not isinstance(sv, Sv):
                raise exceptions.FormatError(f"Invalid satellite {sv!r} at {epoch}", index=len(self))

    def add_ephemeris(self, epoch, sv, ephemeris, ordered=True):
        """Add the ephemeris of one satellite, merging with other satellites at the same time of clock"""
        if not isinstance(epoch, Epoch):
            epoch = Epoch(epoch)
        if epoch not in self._data:
            self.add(epoch, {sv: ephemeris}, ordered=ordered)
        elif sv in self._data[epoch]:
            raise exceptions.FormatError(f"Duplicate ephemeris for {sv} at {epoch}")
        else:
            self._data[epoch][sv] = ephemeris

    def ephemeris(self, sv, time):
        """The latest ephemeris of a satellite with time of clock not after the given time, None if there is none"""
        time = np.datetime64(time, "ns")
        candidates = [e for e, content in self._data.items() if sv in content and e.time <= time]
        return self._data[max(candidates)][sv] if candidates else None

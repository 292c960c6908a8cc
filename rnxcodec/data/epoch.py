"""Observation epochs

Description:
------------

An epoch is a timestamp together with an epoch flag. Timestamps are stored as `numpy.datetime64` with nanosecond
resolution, so that the 7 decimals of the seconds field in RINEX files are kept exactly.

"""

# Standard library imports
from collections import namedtuple

# External library imports
import numpy as np

# rnxcodec imports
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import EpochFlag

NS_PER_SECOND = 1_000_000_000


class Epoch(namedtuple("Epoch", ["time", "flag"])):
    """A timestamp and an epoch flag, ordered by time first"""

    __slots__ = ()

    def __new__(cls, time, flag=EpochFlag.ok):
        return super().__new__(cls, np.datetime64(time, "ns"), EpochFlag(flag))

    @classmethod
    def from_components(cls, year, month, day, hour, minute, nanoseconds, flag=EpochFlag.ok):
        """Create an epoch from calendar components

        Args:
            year (int):         Four digit year.
            month (int):        Month.
            day (int):          Day of month.
            hour (int):         Hour.
            minute (int):       Minute.
            nanoseconds (int):  Nanoseconds into the minute.
            flag (EpochFlag):   Epoch flag.

        Returns:
            Epoch: The epoch.
        """
        try:
            minute_start = np.datetime64(f"{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}", "ns")
        except ValueError:
            raise exceptions.FormatError(
                f"Invalid date {year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}"
            ) from None
        return cls(minute_start + np.timedelta64(nanoseconds, "ns"), flag)

    def components(self):
        """Split the timestamp into calendar components

        Returns:
            Tuple: year, month, day, hour, minute and nanoseconds into the minute.
        """
        minute_start = self.time.astype("datetime64[m]")
        nanoseconds = int((self.time - minute_start).astype("timedelta64[ns]").astype(np.int64))
        dt = minute_start.item()
        return dt.year, dt.month, dt.day, dt.hour, dt.minute, nanoseconds

    def __str__(self):
        return f"{np.datetime_as_string(self.time, unit='ns')} ({self.flag.name})"

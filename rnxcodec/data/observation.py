"""Observation cells and epochs

Description:
------------

A cell holds one observed value as an integer mantissa at a fixed scale, together with the loss of lock indicator
(LLI) and the signal strength indicator (SSI). Observations in RINEX files carry 3 decimals, so the phase 123.456 is
stored as the mantissa 123456.

An observation epoch collects the receiver clock offset and the cells of all satellites observed at one instant. A
missing cell means that the receiver did not track that signal, which is different from a value of zero.

"""

# Standard library imports
from collections import namedtuple
from typing import Dict, Optional

# rnxcodec imports
from rnxcodec.data.satellite import Sv

OBS_DECIMALS = 3
OBS_SCALE = 10 ** OBS_DECIMALS


class Cell(namedtuple("Cell", ["mantissa", "lli", "ssi"])):
    """One observed value with its quality flags

    Args:
        mantissa (int):  Value times 10**3.
        lli (str):       Loss of lock indicator, a single character or None.
        ssi (str):       Signal strength indicator, a single character or None.
    """

    __slots__ = ()

    def __new__(cls, mantissa, lli=None, ssi=None):
        return super().__new__(cls, int(mantissa), _flag(lli), _flag(ssi))

    @classmethod
    def from_float(cls, value, lli=None, ssi=None):
        return cls(round(value * OBS_SCALE), lli, ssi)

    @property
    def value(self):
        """The observed value as a float"""
        return self.mantissa / OBS_SCALE


def _flag(flag):
    """Blank flags are stored as None"""
    if flag is None or flag in ("", " "):
        return None
    return str(flag)


class ObservationEpoch:
    """Receiver clock offset and the observations of all satellites at one epoch

    Args:
        clock:       Receiver clock offset as an integer mantissa (scale given by the file layout), or None.
        satellites:  Observations, keyed by satellite and then by observable code.
    """

    def __init__(self, clock: Optional[int] = None, satellites: Optional[Dict[Sv, Dict[str, Cell]]] = None) -> None:
        self.clock = clock
        self.satellites = dict() if satellites is None else satellites

    def cell(self, sv, code):
        """The cell of one observable slot, None if the value is absent"""
        return self.satellites.get(sv, dict()).get(code)

    def __eq__(self, other):
        if not isinstance(other, ObservationEpoch):
            return NotImplemented
        return self.clock == other.clock and self.satellites == other.satellites

    def __repr__(self):
        return f"{type(self).__name__}(clock={self.clock}, satellites={self.satellites})"

"""RINEX header metadata

Description:
------------

The header of a RINEX file declares the format version, the file type, the satellite system and the observable codes
valid for the whole file. RINEX 2 declares one list of observable codes shared by all constellations, which is stored
under the key `*`. RINEX 3 and 4 declare one list per constellation, stored under the constellation letter.

The header lines are kept verbatim, so that a header can be written back exactly as it was read.

"""

# Standard library imports
from collections import namedtuple
from typing import Any, Dict, List, Optional

# rnxcodec imports
from rnxcodec.lib import exceptions

# Information from the two extra header lines of a Compact RINEX file
CrinexInfo = namedtuple("CrinexInfo", ["version", "program", "date", "order"])
CrinexInfo.__new__.__defaults__ = ("rnxcodec", "", None)

SHARED_OBSERVABLES = "*"


class Header:
    """Metadata of a RINEX file

    Args:
        version:     RINEX format version, for instance "2.11" or "3.04".
        file_type:   File type, "O" for observations, "M" for meteorological data and "N" for navigation data.
        sat_system:  Satellite system letter, "M" for mixed files.
        obs_types:   Observable codes, keyed by constellation letter or by `*` for RINEX 2 files.
        meta:        Other information read from the header.
        lines:       Verbatim header lines, without line endings.
        crinex:      Compact RINEX information, None for plain RINEX.
    """

    def __init__(
        self,
        version: str = "3.04",
        file_type: str = "O",
        sat_system: str = "M",
        obs_types: Optional[Dict[str, List[str]]] = None,
        meta: Optional[Dict[str, Any]] = None,
        lines: Optional[List[str]] = None,
        crinex: Optional[CrinexInfo] = None,
    ) -> None:
        self.version = version
        self.file_type = file_type
        self.sat_system = sat_system
        self.obs_types = dict() if obs_types is None else obs_types
        self.meta = dict() if meta is None else meta
        self.lines = list() if lines is None else lines
        self.crinex = crinex

    @property
    def major_version(self) -> int:
        try:
            return int(float(self.version))
        except ValueError:
            raise exceptions.FormatError(f"Invalid RINEX version {self.version!r}") from None

    def observables(self, sv):
        """Observable codes declared for the constellation of a satellite

        Args:
            sv (Sv):  Satellite, or None for the codes shared by all constellations in RINEX 2 files.

        Returns:
            List: Observable codes, in the order they are declared in the header.
        """
        if SHARED_OBSERVABLES in self.obs_types:
            return self.obs_types[SHARED_OBSERVABLES]
        if sv is None:
            raise exceptions.UnknownObservableError("No observables declared for all constellations")
        try:
            return self.obs_types[sv.constellation.value]
        except KeyError:
            raise exceptions.UnknownObservableError(
                f"No observables declared for constellation {sv.constellation.name} ({sv})"
            ) from None

    def __eq__(self, other):
        if not isinstance(other, Header):
            return NotImplemented
        return (
            self.version == other.version
            and self.file_type == other.file_type
            and self.sat_system == other.sat_system
            and self.obs_types == other.obs_types
        )

    def __repr__(self):
        return f"{type(self).__name__}(version={self.version!r}, file_type={self.file_type!r}, obs_types={self.obs_types})"

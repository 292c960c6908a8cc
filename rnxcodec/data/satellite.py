"""Satellite identifiers

Description:
------------

A satellite is identified by its constellation and a slot number (PRN), written as for instance `G07` or `E11` in
RINEX files. Slot numbers are sparse across constellations, so satellites are only ever used as keys in mappings.

"""

# Standard library imports
from collections import namedtuple

# rnxcodec imports
from rnxcodec.lib import enums
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import Constellation


class Sv(namedtuple("Sv", ["constellation", "prn"])):
    """A satellite (space vehicle), hashable and ordered by constellation letter and slot number"""

    __slots__ = ()

    def __new__(cls, constellation, prn):
        if not isinstance(constellation, Constellation):
            try:
                constellation = Constellation(constellation)
            except ValueError:
                constellation = enums.get_value("constellation", constellation)
        return super().__new__(cls, constellation, int(prn))

    @classmethod
    def from_str(cls, text):
        """Parse a satellite identifier like `G07`, `G 7` or ` 7`

        A blank constellation letter means GPS, as in RINEX 2 files.

        Args:
            text (str):  Satellite identifier.

        Returns:
            Sv: The satellite.
        """
        letter, number = text[:1], text[1:].strip()
        letter = "G" if letter in ("", " ") else letter.upper()
        try:
            return cls(Constellation(letter), int(number))
        except ValueError:
            raise exceptions.FormatError(f"Invalid satellite identifier {text!r}") from None

    def __str__(self):
        return f"{self.constellation.value}{self.prn:02d}"

    def __repr__(self):
        return f"Sv({str(self)!r})"

"""Package for the rnxcodec record model


"""

# Import relevant classes from the record model
from rnxcodec.data.epoch import Epoch  # noqa
from rnxcodec.data.header import CrinexInfo, Header  # noqa
from rnxcodec.data.observation import Cell, ObservationEpoch  # noqa
from rnxcodec.data.record import Event, MeteoRecord, NavigationRecord, ObservationRecord, Record  # noqa
from rnxcodec.data.satellite import Sv  # noqa

# Do not support *-imports
__all__ = []

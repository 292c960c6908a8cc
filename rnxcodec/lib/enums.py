"""Definition of rnxcodec-specific enumerations

Description:
------------

Custom enumerations used by rnxcodec for structured names. The enumerations are registered with Midgard, so they can
be looked up by name using `get_enum` and `get_value`.


"""

# Standard library imports
import enum

# External library imports
import colorama

# Make Midgard-enums functions available
from midgard.collections.enums import get_enum, get_value, register_enum  # noqa


#
# ENUMS
#
@register_enum("log_level")
class LogLevel(int, enum.Enum):
    """Levels used when deciding how much log output to show"""

    all = enum.auto()
    debug = enum.auto()
    time = enum.auto()
    dev = enum.auto()
    info = enum.auto()
    out = enum.auto()
    warn = enum.auto()
    check = enum.auto()
    error = enum.auto()
    fatal = enum.auto()
    none = enum.auto()


@register_enum("log_color")
class LogColor(str, enum.Enum):
    """Colors used when logging"""

    dev = (colorama.Fore.BLUE,)
    time = (colorama.Fore.WHITE,)
    out = (colorama.Style.BRIGHT,)
    check = (colorama.Style.BRIGHT + colorama.Fore.YELLOW,)
    warn = colorama.Fore.YELLOW
    error = colorama.Fore.RED
    fatal = colorama.Style.BRIGHT + colorama.Fore.RED


@register_enum("constellation")
class Constellation(str, enum.Enum):
    """Satellite systems, identified by the letter used in RINEX files"""

    gps = "G"
    glonass = "R"
    galileo = "E"
    beidou = "C"
    sbas = "S"
    qzss = "J"
    irnss = "I"
    leo = "L"
    doris = "D"
    mixed = "M"


@register_enum("epoch_flag")
class EpochFlag(enum.IntEnum):
    """Epoch flags of RINEX observation files"""

    ok = 0
    power_failure = 1
    antenna_moving = 2
    new_site = 3
    header_info = 4
    external_event = 5
    cycle_slip = 6

    @property
    def is_event(self):
        """Special event epochs are followed by header records instead of observations"""
        return 2 <= self.value <= 5


@register_enum("crinex_error_policy")
class ErrorPolicy(str, enum.Enum):
    """What the CRINEX decompressor does with a malformed epoch"""

    abort = "abort"
    skip = "skip"


@register_enum("crinex_state")
class DecoderState(enum.Enum):
    """States of the Compact RINEX decompressor"""

    await_header = "await_header"
    await_epoch = "await_epoch"
    in_epoch = "in_epoch"
    in_event = "in_event"
    skip_epoch = "skip_epoch"
    done = "done"


@register_enum("checksum_kind")
class ChecksumKind(enum.IntEnum):
    """BINEX checksums, valued by their length in bytes"""

    xor8 = 1
    crc16 = 2
    crc32 = 4
    md5 = 16


@register_enum("file_format")
class FileFormat(str, enum.Enum):
    """Formats recognized by the sniffer"""

    rinex = "rinex"
    crinex = "crinex"
    binex = "binex"
    unknown = "unknown"

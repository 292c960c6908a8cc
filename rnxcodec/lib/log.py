"""rnxcodec library module for logging

Description:
------------

This module provides simple logging inside rnxcodec. To write a log message, simply call one of the log-functions
corresponding to the log levels defined in `rnxcodec.lib.enums`.


Example:
--------

    >>> from rnxcodec.lib import log
    >>> log.init("info", prefix="crinex")
    >>> log.info(f"Decompressed {12:d} epochs")
    INFO  [crinex] Decompressed 12 epochs

"""

# Standard library imports
import functools

# Midgard imports
from midgard.dev import log as mg_log

# rnxcodec imports
from rnxcodec.lib import enums  # Log levels and colors for rnxcodec
from rnxcodec.lib import exceptions

# Make functions from Midgard available
from midgard.dev.log import log, init  # noqa


# Make each log level available as a function
for level in enums.get_enum("log_level"):
    globals()[level.name] = functools.partial(mg_log.log, level=level.name)


# Overwrite log.fatal to raise an exception
def fatal(log_text):
    mg_log.log(log_text, "fatal")
    raise exceptions.RnxCodecExit(f"Exiting rnxcodec due to {log_text!r}") from None

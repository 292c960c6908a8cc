"""rnxcodec library module for handling of configuration settings

Example:
--------

    >>> from rnxcodec.lib import config
    >>> config.codec.crinex.order.int
    3

Description:
------------

This module is used to read the rnxcodec configuration settings. We first try to read configuration settings from the
current working directory, then from the user's ~/.rnxcodec directory and finally from the config directory inside
the package (see `_CONFIG_DIRECTORIES`). Personal changes to the config can be done in a file called
rnxcodec_local.conf, which has priority over rnxcodec.conf (see `_CONFIG_FILENAMES`).

The configuration is split into sections, and each section consists of `key=value`-pairs. To read a configuration
entry, use `config.codec.section.key`, for instance `config.codec.crinex.order` reads the key `order` in the `crinex`
section. To actually use a configuration entry you should convert it to the required data type using one of the
properties `str`, `int`, `float`, `bool` or `list`.

Codec options given explicitly by the caller override the configuration. This is done with `get`::

    >>> config.codec.get("order", value=order, section="crinex").int

which returns the explicit value if `order` is not None, and the configured value otherwise.

"""

# Standard library imports
import pathlib

# Midgard imports
from midgard.config.config import Configuration

# rnxcodec imports
from rnxcodec.lib import enums  # noqa  # Register rnxcodec enums


# Directory containing the default configuration
CONFIG_DIR = pathlib.Path(__file__).resolve().parent.parent / "config"

# Prioritized list of possible names of config files
_CONFIG_FILENAMES = ("rnxcodec_local.conf", "rnxcodec.conf")

# Prioritized list of possible locations for config files
_CONFIG_DIRECTORIES = (pathlib.Path.cwd(), pathlib.Path.home() / ".rnxcodec", CONFIG_DIR)


def config_paths():
    """Existing configuration files, with the highest priority first"""
    return [d / f for d in _CONFIG_DIRECTORIES for f in _CONFIG_FILENAMES if (d / f).exists()]


def read_codec_config():
    """Read the codec configuration from file

    Returns:
        Configuration: The codec configuration.
    """
    return Configuration.read_from_file("rnxcodec", *config_paths())


# Read the configuration when the module is imported
codec = read_codec_config()

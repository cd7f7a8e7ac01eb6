#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot - host side loader for Rockchip RK3366 boot ROM.

Talks to a Rockchip SoC sitting in its Mask-ROM (or USB-Plug) recovery state:
reads the chip identification record and uploads executable code into SRAM
or DRAM so the SoC can run it as a second stage loader.

MULTIPLE INTERFACES:
    - Pure Python library (see :class:`rkboot.rkusb.RockUsb`)
    - Command line tool ``rkhost``
"""

import logging
import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs

from .__version__ import __version__ as rkboot_version


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


def value_to_log_level(value: Optional[str], default: int = logging.INFO) -> int:
    """Convert logging level name (or number) into logging level value.

    :param value: Level name such as "debug", "INFO" or a number as string.
    :param default: Level used when the value is empty or unknown.
    :return: Logging level.
    """
    if not value:
        return default
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default


version: Version = parse(rkboot_version)

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)


# The RKBoot behavior settings
RKBOOT_VERSION_BASE = version.base_version
RKBOOT_PLATFORM_DIRS = PlatformDirs(
    appauthor="rkboot",
    appname="rkboot",
    version=RKBOOT_VERSION_BASE,
)

# console log level used by the applications unless -v/-vv is given
RKBOOT_LOG_LEVEL = value_to_log_level(os.environ.get("RKBOOT_LOG_LEVEL"))

RKBOOT_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("RKBOOT_DEBUG_LOGGING_DISABLED"))
RKBOOT_DEBUG_LOG_FILE = os.environ.get(
    "RKBOOT_DEBUG_LOG_FILE", os.path.join(RKBOOT_PLATFORM_DIRS.user_log_dir, "debug.log")
)

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot logging setup with colored console output and a debug log file."""

import logging
import logging.config
import logging.handlers
import os
import platform
import re
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from rkboot import RKBOOT_DEBUG_LOG_FILE, RKBOOT_DEBUG_LOGGING_DISABLED, __version__
from rkboot.utils.misc import find_file, load_configuration

colorama.just_fix_windows_console()

LOGGING_CONFIG_SEARCH_PATHS = [os.path.expanduser("~/.rkboot")]


def load_logging_config(search_paths: Optional[list[str]] = None) -> Optional[str]:
    """Apply "logging.yaml" (or JSON) configuration if such file exists.

    :param search_paths: Directories to look into, defaults to ~/.rkboot.
    :return: Path to the applied configuration file, None if there is none.
    """
    config_file = find_file(
        "logging.yaml",
        use_cwd=False,
        search_paths=search_paths or LOGGING_CONFIG_SEARCH_PATHS,
        raise_exc=False,
    )
    if not config_file:
        return None
    logging.config.dictConfig(load_configuration(config_file))
    return config_file


class ColoredFormatter(logging.Formatter):
    """Logging formatter coloring records by their level.

    Debug and warning-and-above records carry also the source location.
    """

    FORMAT = logging.BASIC_FORMAT
    FORMAT_DEBUG = FORMAT + " (%(relativeCreated)dms since start, %(filename)s:%(lineno)d)"

    LEVEL_COLORS = {
        logging.DEBUG: colorama.Fore.BLUE,
        logging.INFO: colorama.Fore.WHITE + colorama.Style.BRIGHT,
        logging.WARNING: colorama.Fore.YELLOW,
        logging.ERROR: colorama.Fore.RED,
        logging.CRITICAL: colorama.Fore.RED + colorama.Style.BRIGHT,
    }
    FORMATS = {
        logging.DEBUG: FORMAT_DEBUG,
        logging.INFO: FORMAT,
        logging.WARNING: FORMAT_DEBUG,
        logging.ERROR: FORMAT_DEBUG,
        logging.CRITICAL: FORMAT_DEBUG,
    }

    def __init__(self, colored: bool = True) -> None:
        """Initialize the formatter.

        :param colored: Use terminal colors.
        """
        super().__init__()
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        """Format the record according to its level.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        fmt = self.FORMATS.get(record.levelno, self.FORMAT)
        if self.colored:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            fmt = color + fmt + colorama.Fore.RESET + colorama.Style.RESET_ALL
        elif isinstance(record.msg, str):
            record.msg = re.sub(r"\x1b\[\d{1,3}m", "", record.msg)
        return logging.Formatter(fmt).format(record)


def _install_debug_file_handler(target_logger: logging.Logger) -> None:
    for handler in target_logger.handlers:
        if (
            isinstance(handler, logging.handlers.RotatingFileHandler)
            and handler.baseFilename == os.path.abspath(RKBOOT_DEBUG_LOG_FILE)
        ):
            return
    os.makedirs(os.path.dirname(RKBOOT_DEBUG_LOG_FILE), exist_ok=True)
    debug_handler = logging.handlers.RotatingFileHandler(
        RKBOOT_DEBUG_LOG_FILE, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
    )
    debug_handler.setFormatter(ColoredFormatter(colored=False))
    debug_handler.setLevel(logging.DEBUG)
    target_logger.addHandler(debug_handler)

    banner = f"* RKBOOT DEBUG LOGGING STARTED {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} *"
    width = len(banner) - 2
    target_logger.debug("*" * len(banner))
    target_logger.debug(banner)
    for line in (
        f"* rkboot version: {__version__}",
        f"* Python version: {sys.version.split()[0]}",
        f"* OS version: {platform.platform()}",
        f"* Last command: {sys.argv}",
    ):
        target_logger.debug(line.ljust(width) + " *")
    target_logger.debug("*" * len(banner))


def install(
    level: Optional[int] = None,
    stream: TextIO = sys.stderr,
    colored: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install RKBoot log handlers.

    :param level: Console logging level, defaults to logging.WARNING
    :param stream: Stream for console output, defaults to sys.stderr
    :param colored: Force (or disable) colored output, autodetected if None
    :param logger: Logger to install the handlers to, defaults to "rkboot" logger
    :param create_debug_logger: Create the rotating debug log file
    """
    target_logger = logger or logging.getLogger("rkboot")
    target_logger.setLevel(logging.DEBUG)

    # see https://no-color.org/
    color = "NO_COLOR" not in os.environ and hasattr(stream, "isatty") and stream.isatty()
    if colored is not None:
        color = colored

    handler = logging.StreamHandler(stream)
    handler.setLevel(level or logging.WARNING)
    handler.setFormatter(ColoredFormatter(color))
    target_logger.addHandler(handler)

    try:
        config_file = load_logging_config()
        if config_file:
            target_logger.debug(f"Logging config loaded from {config_file}")
    except Exception as e:  # pylint: disable=broad-except
        target_logger.warning(f"Failed to load logging configuration: {str(e)}")

    if create_debug_logger and not RKBOOT_DEBUG_LOGGING_DISABLED:
        try:
            _install_debug_file_handler(target_logger)
        except OSError as e:
            target_logger.warning(f"Failed to initialize debug logging: {str(e)}")

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot miscellaneous utilities.

Loading of code images and logging configuration, the claim time-out and small
helpers used by the loader and ``rkhost``.
"""

import json
import logging
import os
import time
from typing import Callable, Iterable, Iterator, Optional, TypeVar, Union

import yaml

from rkboot.exceptions import RKBootError, RKBootValueError
from rkboot.utils.exceptions import RKBootTimeoutError

# for generics
T = TypeVar("T")  # pylint: disable=invalid-name

logger = logging.getLogger(__name__)


def find_first(iterable: Iterable[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """Return the first item matching the predicate, None if there is none."""
    return next((item for item in iterable if predicate(item)), None)


def find_file(
    file_path: str,
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    """Locate a file.

    Absolute paths are taken as they are. Relative paths are tried in each of the
    search paths first and in the current working directory last.

    :param file_path: Absolute or relative path to the file.
    :param use_cwd: Also look into the current working directory.
    :param search_paths: Directories to look into.
    :param raise_exc: Raise when the file is not found, otherwise return "".
    :raises RKBootError: The file was not found.
    :return: Absolute path to the file.
    """
    candidates = []
    if os.path.isabs(file_path):
        candidates.append(file_path)
    else:
        candidates.extend(
            os.path.join(os.path.expanduser(directory), file_path)
            for directory in search_paths or []
            if directory
        )
        if use_cwd:
            candidates.append(os.path.join(os.getcwd(), file_path))

    found = find_first(candidates, os.path.isfile)
    if found:
        return os.path.abspath(found)

    message = f"File '{file_path}' not found, tried: {', '.join(candidates)}"
    if raise_exc:
        raise RKBootError(message)
    logger.debug(message)
    return ""


def load_file(
    path: str, mode: str = "r", search_paths: Optional[list[str]] = None
) -> Union[str, bytes]:
    """Read whole file, as text (mode "r") or bytes (mode "rb").

    :param path: Path to the file, see :func:`find_file`.
    :param mode: "r" or "rb".
    :param search_paths: Directories to look into.
    :raises RKBootError: The file doesn't exist or can't be read.
    :return: File content.
    """
    path = find_file(path, search_paths=search_paths)
    logger.debug(f"Loading {path}")
    try:
        with open(path, mode, encoding=None if "b" in mode else "utf-8") as f:
            return f.read()
    except OSError as exc:
        raise RKBootError(f"Can't read file '{path}': {exc.strerror}") from exc


def load_binary(path: str, search_paths: Optional[list[str]] = None) -> bytes:
    """Read binary file, e.g. the code to be uploaded."""
    data = load_file(path, mode="rb", search_paths=search_paths)
    assert isinstance(data, bytes)
    return data


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load a JSON or YAML file holding a dictionary.

    :param path: Path to the configuration file.
    :param search_paths: Directories to look into.
    :raises RKBootError: The file can't be read or doesn't contain a dictionary.
    :return: Configuration data.
    """
    text = load_file(path, mode="r", search_paths=search_paths)
    assert isinstance(text, str)
    try:
        config = json.loads(text)
    except json.JSONDecodeError:
        try:
            config = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise RKBootError(f"Can't parse configuration file {path}: {exc}") from exc

    if not isinstance(config, dict) or not config:
        raise RKBootError(f"Configuration file {path} doesn't contain a dictionary")
    return config


def split_data(data: Union[bytes, bytearray], size: int) -> Iterator[bytes]:
    """Yield consecutive chunks of at most `size` bytes."""
    for offset in range(0, len(data), size):
        yield bytes(data[offset : offset + size])


class Timeout:
    """Deadline of an operation, counted on the monotonic clock.

    A zero timeout never expires.
    """

    UNITS = {"s": 1.0, "ms": 1e-3, "us": 1e-6}

    def __init__(self, timeout: int, units: str = "s") -> None:
        """Start the timeout.

        :param timeout: Timeout value.
        :param units: One of "s", "ms" or "us".
        :raises RKBootValueError: Unsupported units.
        """
        if units not in self.UNITS:
            raise RKBootValueError(f"Unsupported timeout units '{units}'")
        self.enabled = timeout != 0
        self.deadline = time.monotonic() + timeout * self.UNITS[units]

    def overflow(self, raise_exc: bool = False) -> bool:
        """Check whether the deadline has passed.

        :param raise_exc: Raise instead of returning True.
        :raises RKBootTimeoutError: Deadline passed and raise_exc is set.
        :return: True if the deadline has passed.
        """
        expired = self.enabled and time.monotonic() > self.deadline
        if expired and raise_exc:
            raise RKBootTimeoutError("Timeout of operation.")
        return expired


def size_fmt(num: Union[float, int], use_kibibyte: bool = True) -> str:
    """Format byte count, e.g. "512 B" or "1.5 kiB".

    :param num: Number of bytes.
    :param use_kibibyte: Use 1024 based units (kiB, MiB), otherwise 1000 based (kB, MB).
    :return: Human readable size.
    """
    base, suffix = (1024.0, "iB") if use_kibibyte else (1000.0, "B")
    for unit in ["B"] + [prefix + suffix for prefix in "kMGTP"]:
        if num < base or unit.startswith("P"):
            break
        num /= base
    return f"{int(num)} {unit}" if unit == "B" else f"{num:3.1f} {unit}"

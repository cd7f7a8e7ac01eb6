#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of miscellaneous utilities."""

import json
import os
import time
from typing import Any

import pytest

from rkboot.exceptions import RKBootError, RKBootValueError
from rkboot.utils.exceptions import RKBootTimeoutError
from rkboot.utils.misc import (
    Timeout,
    find_file,
    find_first,
    load_binary,
    load_configuration,
    load_file,
    size_fmt,
    split_data,
)


def test_find_first() -> None:
    """Test the find_first utility function.

    The first element matching the predicate is returned, None if there is none.
    """
    assert find_first([1, 2], lambda x: True) == 1
    assert find_first(["1", "2"], lambda x: x == "2") == "2"
    assert find_first((5, 4, 3, 2, 1, 0), lambda x: True) == 5
    assert find_first((5, 4, 3, 2, 1, 0), lambda x: x == "a") is None
    assert find_first(iter([0x81, 0x01]), lambda x: not x & 0x80) == 0x01


def test_load_binary(tmpdir: Any) -> None:
    path = os.path.join(tmpdir, "file.bin")
    with open(path, "wb") as f:
        f.write(bytes(range(10)))
    assert load_binary(path) == bytes(range(10))
    assert load_file(path, mode="rb") == bytes(range(10))
    assert load_file(path) == bytes(range(10)).decode()
    assert load_binary("file.bin", search_paths=[str(tmpdir)]) == bytes(range(10))


def test_find_file_invalid(tmpdir: Any) -> None:
    """Missing file is reported as RKBootError unless asked not to raise.

    :param tmpdir: Temporary directory.
    """
    with pytest.raises(RKBootError):
        find_file(os.path.join(tmpdir, "missing.bin"))
    with pytest.raises(RKBootError):
        find_file("missing.bin", use_cwd=False, search_paths=[str(tmpdir)])
    with pytest.raises(RKBootError):
        load_binary(os.path.join(tmpdir, "missing.bin"))
    assert find_file("missing.bin", search_paths=[str(tmpdir)], raise_exc=False) == ""


def test_load_configuration(tmpdir: Any) -> None:
    yaml_file = os.path.join(tmpdir, "logging.yaml")
    with open(yaml_file, "w", encoding="utf-8") as f:
        f.write("version: 1\nroot:\n  level: INFO\n")
    assert load_configuration(yaml_file) == {"version": 1, "root": {"level": "INFO"}}

    json_file = os.path.join(tmpdir, "config.json")
    with open(json_file, "w", encoding="utf-8") as f:
        json.dump({"version": 1}, f)
    assert load_configuration(json_file) == {"version": 1}


@pytest.mark.parametrize("content", ["", "- just\n- a list\n", "[unclosed"])
def test_load_configuration_invalid(tmpdir: Any, content: str) -> None:
    path = os.path.join(tmpdir, "config.yaml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    with pytest.raises(RKBootError):
        load_configuration(path)


def test_split_data() -> None:
    assert list(split_data(bytes(10), 4)) == [bytes(4), bytes(4), bytes(2)]
    assert not list(split_data(b"", 4))


def test_timeout_basic() -> None:
    """Test basic functionality of Timeout class.

    :raises RKBootTimeoutError: When timeout period has expired and overflow check is enforced.
    """
    timeout = Timeout(50, "ms")
    assert not timeout.overflow()
    time.sleep(0.1)
    assert timeout.overflow()
    with pytest.raises(RKBootTimeoutError):
        timeout.overflow(True)


def test_timeout_disabled() -> None:
    timeout = Timeout(0)
    time.sleep(0.01)
    assert not timeout.overflow()


def test_timeout_invalid_unit() -> None:
    with pytest.raises(RKBootValueError):
        Timeout(100, "day")


@pytest.mark.parametrize(
    "input_value, use_kibibyte, expected",
    [
        (0, False, "0 B"),
        (10, True, "10 B"),
        (1568, True, "1.5 kiB"),
        (1568, False, "1.6 kB"),
        (177768, True, "173.6 kiB"),
    ],
)
def test_size_format(input_value: int, use_kibibyte: bool, expected: str) -> None:
    assert size_fmt(input_value, use_kibibyte) == expected

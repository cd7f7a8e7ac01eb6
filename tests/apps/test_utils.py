#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of application helpers."""

from typing import Optional

import click
import pytest

from rkboot.apps.utils.utils import (
    INT,
    RKBootAppError,
    catch_rkboot_error,
    format_raw_data,
    progress_bar,
)
from rkboot.rkusb.exceptions import RkUsbModeError
from rkboot.utils.exceptions import RKBootTimeoutError


def test_format_data() -> None:
    data = bytes(range(20))
    expected_output = "00 01 02 03 04 05 06 07 08 09 0a 0b 0c 0d 0e 0f\n10 11 12 13"
    assert format_raw_data(data, use_hexdump=False) == expected_output
    assert format_raw_data(data, line_length=8).count("\n") == 2
    assert format_raw_data(data, use_hexdump=True).startswith("00000000: 00 01 02 03")


@catch_rkboot_error
def function_under_test(to_raise: Optional[BaseException] = None) -> int:
    """Return 0 or raise the given exception."""
    if to_raise is None:
        return 0
    raise to_raise


@pytest.mark.parametrize(
    "exception,code",
    [
        (RKBootAppError("app"), 1),
        (RKBootAppError("app", error_code=5), 5),
        (AssertionError(), 2),
        (RkUsbModeError("mode"), 2),
        (RKBootTimeoutError("timeout"), 2),
        (IndexError(), 3),
        (KeyboardInterrupt(), 3),
    ],
)
def test_catch_rkboot_error(exception: BaseException, code: int) -> None:
    with pytest.raises(SystemExit) as exc:
        function_under_test(exception)
    assert exc.value.code == code


def test_catch_rkboot_error_success() -> None:
    assert function_under_test(None) == 0


def test_catch_rkboot_error_message(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit):
        function_under_test(RkUsbModeError("requires UsbPlug mode"))
    message = "RkUsbModeError: RKUSB: Mode mismatch -> requires UsbPlug mode"
    assert message in capsys.readouterr().err


@pytest.mark.parametrize("value,expected", [("10", 10), ("0x10", 16), ("0b11", 3), (7, 7)])
def test_int_param(value: str, expected: int) -> None:
    assert INT().convert(value) == expected


def test_int_param_invalid() -> None:
    with pytest.raises(click.BadParameter):
        INT().convert("ten")


def test_progress_bar_suppressed() -> None:
    with progress_bar(suppress=True) as callback:
        callback(1, 2)

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKHost CLI application tests."""

import json
import os
from typing import Any, Iterator
from unittest.mock import MagicMock, patch

import pytest

import rkboot
from rkboot.apps import rkhost
from rkboot.apps.utils.utils import RKBootAppError
from rkboot.exceptions import RKBootError
from rkboot.rkusb.exceptions import RkUsbModeError
from rkboot.rkusb.interfaces.usb import RkUsbInterface
from rkboot.utils.interfaces.protocol.protocol_base import RKBootNoDeviceFoundError
from tests.cli_runner import CliRunner
from tests.rkusb.virtual_device import VirtualDevice, status

FIRST_TAG = 0x13372342


@pytest.fixture(autouse=True)
def quiet_logging(caplog: Any) -> None:
    # https://github.com/pytest-dev/pytest/issues/3344
    caplog.set_level(100_000)


@pytest.fixture
def scan() -> Iterator[MagicMock]:
    with patch.object(RkUsbInterface, "scan") as scan_mock:
        yield scan_mock


def connect(scan: MagicMock, device: VirtualDevice) -> VirtualDevice:
    scan.return_value = [RkUsbInterface(device)]  # type: ignore[arg-type]
    return device


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(rkhost.main, ["--version"])
    assert rkboot.__version__ in result.output


def test_help(cli_runner: CliRunner, scan: MagicMock) -> None:
    result = cli_runner.invoke(rkhost.main, ["--help"])
    assert "Utility for communication with the boot ROM" in result.output
    assert "test-unit-ready" in result.output
    scan.assert_not_called()


def test_no_arguments_prints_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(
        rkhost.main, [], expected_code=cli_runner.get_help_error_code(use_help_flag=False)
    )
    assert "Usage" in result.output


def test_info(cli_runner: CliRunner, scan: MagicMock) -> None:
    device = connect(scan, VirtualDevice([b"6633" + b"\xff" * 12, status(FIRST_TAG)]))
    result = cli_runner.invoke(rkhost.main, ["info"])
    assert "3366" in result.output
    assert not device.is_opened


def test_info_json(cli_runner: CliRunner, scan: MagicMock) -> None:
    connect(scan, VirtualDevice([b"6633" + b"\xff" * 12, status(FIRST_TAG)]))
    result = cli_runner.invoke(rkhost.main, ["--json", "info"])
    assert json.loads(result.stdout) == {"command": "info", "response": "3366"}


def test_info_wrong_mode(cli_runner: CliRunner, scan: MagicMock) -> None:
    device = connect(scan, VirtualDevice(out_endpoint=0x02))
    result = cli_runner.invoke(rkhost.main, ["info"], expected_code=-1)
    assert isinstance(result.exception, RkUsbModeError)
    assert device.transfers == 0


def test_no_device(cli_runner: CliRunner, scan: MagicMock) -> None:
    scan.return_value = []
    result = cli_runner.invoke(rkhost.main, ["info"], expected_code=-1)
    assert isinstance(result.exception, RKBootNoDeviceFoundError)


def test_timeout_option(cli_runner: CliRunner, scan: MagicMock) -> None:
    connect(scan, VirtualDevice([status(FIRST_TAG)]))
    cli_runner.invoke(rkhost.main, ["-t", "0x64", "test-unit-ready"])
    scan.assert_called_once_with(timeout=100)


def test_test_unit_ready(cli_runner: CliRunner, scan: MagicMock) -> None:
    connect(scan, VirtualDevice([status(FIRST_TAG)], out_endpoint=0x02))
    result = cli_runner.invoke(rkhost.main, ["test-unit-ready"])
    assert "Ready" in result.output


def test_capability(cli_runner: CliRunner, scan: MagicMock) -> None:
    connect(scan, VirtualDevice([bytes(range(1, 9)), status(FIRST_TAG)]))
    result = cli_runner.invoke(rkhost.main, ["capability"])
    assert "01 02 03 04 05 06 07 08" in result.output


def test_capability_json(cli_runner: CliRunner, scan: MagicMock) -> None:
    connect(scan, VirtualDevice([bytes(range(1, 9)), status(FIRST_TAG)]))
    result = cli_runner.invoke(rkhost.main, ["-j", "capability"])
    assert json.loads(result.stdout)["response"] == "0102030405060708"


@pytest.mark.parametrize(
    "args,index",
    [([], 0x471), (["-r", "sram"], 0x471), (["-r", "DRAM"], 0x472)],
)
def test_run(cli_runner: CliRunner, scan: MagicMock, tmpdir: Any, args: list, index: int) -> None:
    device = connect(scan, VirtualDevice(out_endpoint=0x02))
    bin_file = os.path.join(tmpdir, "code.bin")
    with open(bin_file, "wb") as f:
        f.write(b"\xaa" * 10)
    cli_runner.invoke(rkhost.main, ["run", *args, bin_file])
    assert len(device.controls) == 1
    request, value, w_index, data, timeout = device.controls[0]
    assert (request, value, w_index, timeout) == (0x0C, 0, index, 25)
    assert data[:10] == b"\xaa" * 10
    assert len(data) == 12


def test_run_missing_file(cli_runner: CliRunner, scan: MagicMock, tmpdir: Any) -> None:
    device = connect(scan, VirtualDevice())
    result = cli_runner.invoke(
        rkhost.main, ["run", os.path.join(tmpdir, "missing.bin")], expected_code=-1
    )
    assert isinstance(result.exception, RKBootError)
    assert device.transfers == 0


def test_run_invalid_region(cli_runner: CliRunner, scan: MagicMock, tmpdir: Any) -> None:
    connect(scan, VirtualDevice())
    cli_runner.invoke(rkhost.main, ["run", "-r", "flash", "code.bin"], expected_code=2)


def test_run_empty_file(cli_runner: CliRunner, scan: MagicMock, tmpdir: Any) -> None:
    device = connect(scan, VirtualDevice())
    bin_file = os.path.join(tmpdir, "empty.bin")
    open(bin_file, "wb").close()
    result = cli_runner.invoke(rkhost.main, ["run", bin_file], expected_code=-1)
    assert isinstance(result.exception, RKBootAppError)
    assert result.exception.error_code == 1
    assert device.transfers == 0

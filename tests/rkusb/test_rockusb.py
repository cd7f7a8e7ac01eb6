#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of the Rockusb session over a virtual device."""

import pytest

from rkboot.crypto.crc import CrcAlg, from_crc_algorithm
from rkboot.exceptions import RKBootConnectionError
from rkboot.rkusb.commands import CmdPacket, DataDirection, MemoryRegion, OpCode, OperationMode
from rkboot.rkusb.exceptions import (
    RkUsbCommandError,
    RkUsbConnectionError,
    RkUsbModeError,
    RkUsbSignatureError,
    RkUsbTagError,
)
from rkboot.rkusb.interfaces.usb import RkUsbInterface
from rkboot.rkusb.rockusb import RockUsb
from rkboot.utils.exceptions import RKBootTimeoutError
from tests.rkusb.virtual_device import VirtualDevice, status

FIRST_TAG = 0x13372342
CHIP_INFO_DATA = b"6633" + b"\xff" * 12


def open_session(device: VirtualDevice) -> RockUsb:
    rockusb = RockUsb(RkUsbInterface(device))  # type: ignore[arg-type]
    rockusb.open()
    return rockusb


def test_chip_info() -> None:
    device = VirtualDevice([CHIP_INFO_DATA, status(FIRST_TAG)], out_endpoint=0x01)
    with RockUsb(RkUsbInterface(device)) as rockusb:  # type: ignore[arg-type]
        assert rockusb.mode == OperationMode.USB_PLUG
        chip_info = rockusb.chip_info()
    assert chip_info.chip_id == "3366"
    assert chip_info.raw_data == CHIP_INFO_DATA
    assert not device.is_opened

    assert len(device.written) == 1
    request = device.written[0]
    assert len(request) == 31
    packet = CmdPacket.parse(request)
    assert packet.tag == FIRST_TAG
    assert packet.data_length == 0x10
    assert packet.direction == DataDirection.IN
    assert packet.lun == 0
    assert request[14] == 6
    assert packet.command.opcode == OpCode.READ_CHIP_INFO
    assert packet.command.size == 0
    assert device.read_lengths == [16, 13]


def test_chip_info_short_read() -> None:
    device = VirtualDevice([b"6633", status(FIRST_TAG)])
    chip_info = open_session(device).chip_info()
    assert chip_info.raw_data == b"6633"
    assert chip_info.chip_id == "3366"


@pytest.mark.parametrize("out_endpoint", [0x02, 0x03])
def test_chip_info_wrong_mode(out_endpoint: int) -> None:
    device = VirtualDevice([CHIP_INFO_DATA, status(FIRST_TAG)], out_endpoint=out_endpoint)
    rockusb = open_session(device)
    with pytest.raises(RkUsbModeError):
        rockusb.chip_info()
    with pytest.raises(RkUsbModeError):
        rockusb.read_capability()
    assert device.transfers == 0


def test_tags_are_sequential() -> None:
    device = VirtualDevice([status(FIRST_TAG), status(FIRST_TAG + 1)])
    rockusb = open_session(device)
    rockusb.test_unit_ready()
    rockusb.test_unit_ready()
    tags = [CmdPacket.parse(request).tag for request in device.written]
    assert tags == [FIRST_TAG, FIRST_TAG + 1]


def test_tag_wraps_to_one() -> None:
    device = VirtualDevice([status(0xFFFFFFFF), status(1)])
    rockusb = open_session(device)
    rockusb._tag = 0xFFFFFFFF
    rockusb.test_unit_ready()
    rockusb.test_unit_ready()
    assert [CmdPacket.parse(request).tag for request in device.written] == [0xFFFFFFFF, 1]


def test_test_unit_ready_has_no_data_phase() -> None:
    device = VirtualDevice([status(FIRST_TAG)], out_endpoint=0x02)
    open_session(device).test_unit_ready()
    packet = CmdPacket.parse(device.written[0])
    assert packet.command.opcode == OpCode.TEST_UNIT_READY
    assert packet.data_length == 0
    assert device.read_lengths == [13]


def test_read_capability() -> None:
    capability = bytes.fromhex("0102030405060708")
    device = VirtualDevice([capability, status(FIRST_TAG)])
    assert open_session(device).read_capability() == capability
    packet = CmdPacket.parse(device.written[0])
    assert packet.command.opcode == OpCode.READ_CAPABILITY
    assert packet.data_length == 8
    assert packet.direction == DataDirection.IN


def test_tag_mismatch() -> None:
    device = VirtualDevice([CHIP_INFO_DATA, status(FIRST_TAG + 1)])
    with pytest.raises(RkUsbTagError) as exc:
        open_session(device).chip_info()
    assert exc.value.expected == FIRST_TAG
    assert exc.value.received == FIRST_TAG + 1


def test_signature_mismatch() -> None:
    device = VirtualDevice([CHIP_INFO_DATA, status(FIRST_TAG, signature=b"USBC")])
    with pytest.raises(RkUsbSignatureError):
        open_session(device).chip_info()


def test_device_status_error() -> None:
    device = VirtualDevice([status(FIRST_TAG, status_code=1)])
    with pytest.raises(RkUsbCommandError) as exc:
        open_session(device).test_unit_ready()
    assert exc.value.error_value == 1
    assert "TestUnitReady" in str(exc.value)


def test_read_timeout() -> None:
    device = VirtualDevice([RKBootTimeoutError("Bulk read timed out")])
    with pytest.raises(RKBootTimeoutError):
        open_session(device).chip_info()


def test_closed_session() -> None:
    rockusb = RockUsb(RkUsbInterface(VirtualDevice()))  # type: ignore[arg-type]
    with pytest.raises(RkUsbConnectionError):
        rockusb.test_unit_ready()
    with pytest.raises(RkUsbConnectionError):
        rockusb.run_code(b"\x00")


def test_run_tiny_sram() -> None:
    payload = b"\xaa" * 10
    device = VirtualDevice(out_endpoint=0x02)
    open_session(device).run_code(payload, MemoryRegion.SRAM)
    crc = from_crc_algorithm(CrcAlg.CRC16_IBM_3740).calculate(payload)
    assert device.controls == [(0x0C, 0, 0x471, payload + crc.to_bytes(2, "big"), 25)]
    assert not device.written


def test_run_dram_4096_boundary() -> None:
    device = VirtualDevice(out_endpoint=0x01)
    progress: list[tuple[int, int]] = []
    open_session(device).run_code(
        bytes(4094), MemoryRegion.DRAM, progress_callback=lambda a, b: progress.append((a, b))
    )
    assert [len(control[3]) for control in device.controls] == [4096, 1]
    assert device.controls[1][3] == b"\x00"
    assert all(control[2] == 0x472 for control in device.controls)
    assert progress == [(4096, 4096), (4096, 4096)]


def test_run_stops_on_timeout() -> None:
    device = VirtualDevice(control_errors={1: RKBootTimeoutError("Control transfer timed out")})
    with pytest.raises(RKBootTimeoutError):
        open_session(device).run_code(bytes(10000))
    assert len(device.controls) == 2


def test_run_stops_on_transfer_error() -> None:
    device = VirtualDevice(control_errors={0: RKBootConnectionError("pipe error")})
    with pytest.raises(RKBootConnectionError):
        open_session(device).run_code(bytes(10000))
    assert len(device.controls) == 1

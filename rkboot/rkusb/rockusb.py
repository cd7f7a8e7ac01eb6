#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb protocol session for Rockchip RK3366 boot ROM and USB-Plug loader."""

import logging
from typing import Any, Callable, Optional

from rkboot.rkusb.commands import (
    ChipInfo,
    CmdPacket,
    CmdRecord,
    DataDirection,
    MemoryRegion,
    OpCode,
    OperationMode,
)
from rkboot.rkusb.error_codes import StatusCode
from rkboot.rkusb.exceptions import (
    RkUsbCommandError,
    RkUsbConnectionError,
    RkUsbModeError,
    RkUsbSignatureError,
    RkUsbTagError,
)
from rkboot.rkusb.protocol.base import RkUsbProtocolBase
from rkboot.rkusb.upload import (
    UPLOAD_REQUEST,
    UPLOAD_TIMEOUT,
    build_frame,
    split_frame,
)

logger = logging.getLogger(__name__)

CAPABILITY_LENGTH = 8


########################################################################################################################
# Rockusb Session Class
########################################################################################################################
class RockUsb:
    """Rockusb session.

    Runs command dialogues (request wrapper, optional data phase, response
    wrapper) and uploads code over an opened interface. All calls are blocking
    and strictly serial.

    :cvar INITIAL_TAG: Tag of the first dialogue in the session.
    """

    INITIAL_TAG = 0x13372342

    def __init__(self, interface: RkUsbProtocolBase) -> None:
        """Initialize the Rockusb session.

        :param interface: Interface to a device.
        """
        self._interface = interface
        self._tag = self.INITIAL_TAG
        self._mode = OperationMode.UNKNOWN

    @property
    def is_opened(self) -> bool:
        """Check interface connection status."""
        return self._interface.is_opened

    @property
    def mode(self) -> OperationMode:
        """Operational mode detected when the session was opened."""
        return self._mode

    def __enter__(self) -> "RockUsb":
        self.open()
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.close()

    def open(self) -> None:
        """Connect to the device and detect its operational mode.

        :raises RKBootConnectionError: If the connection to the device fails.
        """
        logger.info(f"Connect: {str(self._interface)}")
        self._interface.open()
        self._mode = self._interface.mode
        logger.debug(f"Operational mode: {self._mode.label}")

    def close(self) -> None:
        """Disconnect from the device."""
        self._interface.close()

    def _next_tag(self) -> int:
        tag = self._tag
        # 32-bit, zero is skipped on wrap-around
        self._tag = ((self._tag + 1) & 0xFFFFFFFF) or 1
        return tag

    def _dialogue(
        self,
        opcode: OpCode,
        data_length: int = 0,
        direction: DataDirection = DataDirection.OUT,
        data: Optional[bytes] = None,
    ) -> bytes:
        """Run one command dialogue.

        :param opcode: Command operation code.
        :param data_length: Length of the data phase, zero means no data phase.
        :param direction: Direction of the data phase.
        :param data: Data sent in an OUT data phase.
        :return: Data received in an IN data phase, possibly shorter than requested.
        :raises RkUsbConnectionError: Device is disconnected.
        :raises RkUsbSignatureError: Response wrapper has invalid signature.
        :raises RkUsbTagError: Response tag doesn't match the request.
        :raises RkUsbCommandError: Device reported non-zero status.
        """
        if not self.is_opened:
            logger.info("RX-CMD: Device Disconnected")
            raise RkUsbConnectionError("Device Disconnected !")
        if data is not None:
            data_length = len(data)
        packet = CmdPacket(
            tag=self._next_tag(),
            command=CmdRecord(opcode),
            data_length=data_length,
            direction=direction,
        )
        self._interface.write_command(packet)

        received = b""
        if data_length:
            if direction == DataDirection.IN:
                received = self._interface.read(data_length)
                if len(received) < data_length:
                    logger.debug(f"Short read: {len(received)} of {data_length} bytes")
            else:
                self._interface.write_data(data or bytes(data_length))

        response = self._interface.read_response()
        if not response.is_valid:
            raise RkUsbSignatureError(f"{response.signature!r}")
        if response.tag != packet.tag:
            raise RkUsbTagError(expected=packet.tag, received=response.tag)
        if response.value != StatusCode.SUCCESS:
            logger.info(f"RX-CMD: {opcode.label} failed, status {response.value}")
            raise RkUsbCommandError(opcode.label, response.value)
        return received

    def _check_mode(self, command: str, mode: OperationMode) -> None:
        if self._mode != mode:
            raise RkUsbModeError(
                f"{command} requires {mode.label} mode, device is in {self._mode.label} mode"
            )

    def chip_info(self) -> ChipInfo:
        """Read chip identification record.

        Only available when the USB-Plug loader is running.

        :return: Chip info record.
        :raises RkUsbModeError: Device is not in USB-Plug mode.
        """
        self._check_mode(OpCode.READ_CHIP_INFO.label, OperationMode.USB_PLUG)
        logger.info("TX-CMD: ReadChipInfo")
        raw_data = self._dialogue(OpCode.READ_CHIP_INFO, ChipInfo.SIZE, DataDirection.IN)
        return ChipInfo(raw_data)

    def test_unit_ready(self) -> None:
        """Check that the device answers commands."""
        logger.info("TX-CMD: TestUnitReady")
        self._dialogue(OpCode.TEST_UNIT_READY)

    def read_capability(self) -> bytes:
        """Read loader capability flags.

        :return: Capability bytes as returned by the device.
        :raises RkUsbModeError: Device is not in USB-Plug mode.
        """
        self._check_mode(OpCode.READ_CAPABILITY.label, OperationMode.USB_PLUG)
        logger.info("TX-CMD: ReadCapability")
        return self._dialogue(OpCode.READ_CAPABILITY, CAPABILITY_LENGTH, DataDirection.IN)

    def run_code(
        self,
        data: bytes,
        region: MemoryRegion = MemoryRegion.SRAM,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        """Upload code into SRAM or DRAM and let the device execute it.

        Chunks are sent in order, the first failure aborts the upload.

        :param data: Code to be executed.
        :param region: Destination memory.
        :param progress_callback: Called with (sent bytes, total bytes) after each chunk.
        :raises RkUsbConnectionError: Device is disconnected.
        :raises RKBootConnectionError: Control transfer failed.
        :raises RKBootTimeoutError: Control transfer timed out.
        """
        if not self.is_opened:
            raise RkUsbConnectionError("Device Disconnected !")
        frame = build_frame(data)
        logger.info(f"TX-CMD: RunCode [region={region.label}, length={len(frame)}]")
        sent = 0
        for chunk in split_frame(frame):
            self._interface.control_write(
                UPLOAD_REQUEST, 0, region.tag, chunk, timeout=UPLOAD_TIMEOUT
            )
            sent = min(sent + len(chunk), len(frame))
            if progress_callback:
                progress_callback(sent, len(frame))

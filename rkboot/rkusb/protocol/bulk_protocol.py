#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb bulk protocol implementation.

Moves request wrappers, data and response wrappers over the bulk endpoints
of the device and code chunks over its control endpoint.
"""

import logging
from typing import Optional

from rkboot.exceptions import RKBootAttributeError
from rkboot.rkusb.commands import CmdResponse, OperationMode
from rkboot.rkusb.exceptions import RkUsbConnectionError
from rkboot.rkusb.protocol.base import RkUsbProtocolBase
from rkboot.utils.interfaces.commands import CmdPacketBase

logger = logging.getLogger(__name__)

# number of bytes dumped into the debug log per transfer
LOG_DUMP_LENGTH = 128


def _dump(data: bytes) -> str:
    dump = " ".join(f"{b:02X}" for b in data[:LOG_DUMP_LENGTH])
    return dump + (" ..." if len(data) > LOG_DUMP_LENGTH else "")


class RkUsbBulkProtocol(RkUsbProtocolBase):
    """Rockusb protocol over USB bulk and control endpoints."""

    def open(self) -> None:
        """Open the interface."""
        self.device.open()

    def close(self) -> None:
        """Close the interface."""
        self.device.close()

    @property
    def is_opened(self) -> bool:
        """Indicates whether the interface is open."""
        return self.device.is_opened

    @property
    def mode(self) -> OperationMode:
        """Operational mode derived from the bulk OUT endpoint address.

        :raises RkUsbConnectionError: The interface is not opened.
        """
        if not self.is_opened:
            raise RkUsbConnectionError("Device is not opened")
        return OperationMode.from_out_endpoint(self.device.out_endpoint)

    def write_command(self, packet: CmdPacketBase) -> None:
        """Send request wrapper to the device.

        :param packet: Command packet object to be sent.
        :raises RKBootAttributeError: Command packet contains no data to be sent.
        """
        data = packet.export()
        if not data:
            raise RKBootAttributeError("Incorrect packet type")
        logger.debug(f"TX-PACKET: {packet}")
        self.device.write(data)

    def write_data(self, data: bytes) -> None:
        """Send data phase to the device.

        :param data: Data to be sent.
        """
        logger.debug(f"TX-DATA[{len(data)}]: {_dump(data)}")
        self.device.write(data)

    def read(self, length: Optional[int] = None) -> bytes:
        """Read data phase from the device.

        The device may return less than requested, such data are returned as they are.

        :param length: Number of bytes to read.
        :raises RKBootAttributeError: Length was not specified.
        :return: Data received from the device.
        """
        if length is None:
            raise RKBootAttributeError("Length of the data to read must be specified")
        data = self.device.read(length)
        logger.debug(f"RX-DATA[{len(data)}]: {_dump(data)}")
        return data

    def read_response(self) -> CmdResponse:
        """Read and parse the response wrapper.

        :return: Parsed response wrapper.
        """
        raw_data = self.device.read(CmdResponse.SIZE)
        response = CmdResponse.parse(raw_data)
        logger.debug(f"RX-PACKET: {response}")
        return response

    def control_write(
        self, request: int, value: int, index: int, data: bytes, timeout: Optional[int] = None
    ) -> None:
        """Send vendor control OUT transfer.

        :param request: bRequest field.
        :param value: wValue field.
        :param index: wIndex field.
        :param data: Data stage.
        :param timeout: Timeout in milliseconds.
        """
        logger.debug(
            f"TX-CONTROL[{len(data)}]: request=0x{request:02X}, value={value}, index=0x{index:03X}"
        )
        self.device.control_write(request, value, index, data, timeout=timeout)

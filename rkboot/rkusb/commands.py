#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb commands, request/response wrappers and related enumerations.

The boot ROM speaks a protocol modelled after USB Mass Storage bulk-only
transport: a 31-byte "USBC" request wrapper carrying a 16-byte command record,
an optional data phase and a 13-byte "USBS" response wrapper.
"""

from struct import calcsize, pack, unpack_from

from typing_extensions import Self

from rkboot.rkusb.error_codes import StatusCode
from rkboot.rkusb.exceptions import RkUsbError
from rkboot.utils.interfaces.commands import CmdPacketBase, CmdResponseBase
from rkboot.utils.rk_enum import RKBootEnum

REQUEST_SIGNATURE = b"USBC"
RESPONSE_SIGNATURE = b"USBS"


########################################################################################################################
# Rockusb Command OpCodes
########################################################################################################################
class OpCode(RKBootEnum):
    """Rockusb command operation codes."""

    TEST_UNIT_READY = (0x00, "TestUnitReady", "Test whether the device is ready")
    READ_VERSION = (0x0C, "ReadVersion", "Read loader version")
    READ_CHIP_INFO = (0x1B, "ReadChipInfo", "Read chip identification record")
    READ_CAPABILITY = (0xAA, "ReadCapability", "Read loader capability flags")


class DataDirection(RKBootEnum):
    """Direction of the data phase as encoded in the request flag byte."""

    OUT = (0x00, "Out", "Host to device")
    IN = (0x80, "In", "Device to host")


class MemoryRegion(RKBootEnum):
    """Upload destination, the tag is the wIndex of the control transfer."""

    SRAM = (0x471, "sram", "On-chip SRAM")
    DRAM = (0x472, "dram", "External DRAM, requires DRAM init")


class OperationMode(RKBootEnum):
    """Operational mode of the device.

    The mode is guessed from the address of the bulk OUT endpoint.
    """

    USB_PLUG = (0x01, "UsbPlug", "Second stage loader is running")
    MASK_ROM = (0x02, "MaskROM", "Boot ROM recovery")
    UNKNOWN = (-1, "Unknown", "Unknown mode")

    @classmethod
    def from_out_endpoint(cls, address: int) -> "OperationMode":
        """Derive the operational mode from bulk OUT endpoint address.

        :param address: bEndpointAddress of the OUT endpoint.
        :return: Detected mode, UNKNOWN for unrecognized addresses.
        """
        if address in (cls.USB_PLUG.tag, cls.MASK_ROM.tag):
            return cls.from_tag(address)
        return cls.UNKNOWN


########################################################################################################################
# Rockusb Command record, request and response wrappers
########################################################################################################################
class CmdRecord:
    """Command record embedded in the request wrapper.

    :cvar FORMAT: opcode, subcode, address, reserved, size, reserved and 3 pad bytes.
    :cvar SIZE: Size of the exported record.
    """

    FORMAT = "<BBIBHI3x"
    SIZE = calcsize(FORMAT)

    def __init__(self, opcode: OpCode, subcode: int = 0, address: int = 0, size: int = 0):
        """Initialize the command record.

        :param opcode: Operation code.
        :param subcode: Operation sub-code.
        :param address: Address argument of the command.
        :param size: Size argument of the command.
        """
        self.opcode = opcode
        self.subcode = subcode
        self.address = address
        self.size = size

    def __str__(self) -> str:
        return (
            f"OpCode={self.opcode.label}, SubCode=0x{self.subcode:02X}, "
            f"Address=0x{self.address:08X}, Size={self.size}"
        )

    def export(self) -> bytes:
        """Export the command record into bytes."""
        return pack(self.FORMAT, self.opcode.tag, self.subcode, self.address, 0, self.size, 0)

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse command record from bytes.

        :param data: Raw record, at least SIZE bytes.
        :raises RkUsbError: Data are too short or the opcode is unknown.
        :return: Parsed command record.
        """
        if len(data) < cls.SIZE:
            raise RkUsbError(f"Invalid command record length: {len(data)}")
        opcode, subcode, address, _, size, _ = unpack_from(cls.FORMAT, data)
        if opcode not in OpCode.tags():
            raise RkUsbError(f"Unknown opcode: 0x{opcode:02X}")
        return cls(OpCode.from_tag(opcode), subcode, address, size)


class CmdPacket(CmdPacketBase):
    """Request wrapper ("USBC") with the command record.

    :cvar FORMAT: signature, tag, data length, flag, LUN, command length.
    :cvar SIZE: Size of the exported packet.
    :cvar COMMAND_LENGTH: Value of the command length field.
    """

    FORMAT = "<4sIIBBB"
    SIZE = calcsize(FORMAT) + CmdRecord.SIZE
    COMMAND_LENGTH = 6

    def __init__(
        self,
        tag: int,
        command: CmdRecord,
        data_length: int = 0,
        direction: DataDirection = DataDirection.OUT,
        lun: int = 0,
    ):
        """Initialize the request wrapper.

        :param tag: Tag echoed back by the device in the response wrapper.
        :param command: Command record.
        :param data_length: Number of bytes in the data phase.
        :param direction: Direction of the data phase.
        :param lun: Logical unit number.
        """
        self.tag = tag
        self.command = command
        self.data_length = data_length
        self.direction = direction
        self.lun = lun

    def __str__(self) -> str:
        return (
            f"Tag=0x{self.tag:08X}, Length={self.data_length}, Direction={self.direction.label}, "
            f"{self.command}"
        )

    def export(self, padding: bool = True) -> bytes:
        """Export the request wrapper into bytes.

        :param padding: Not used, the wrapper has fixed size.
        :return: 31 bytes of the request wrapper.
        """
        header = pack(
            self.FORMAT,
            REQUEST_SIGNATURE,
            self.tag,
            self.data_length,
            self.direction.tag,
            self.lun,
            self.COMMAND_LENGTH,
        )
        return header + self.command.export()

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse request wrapper from bytes.

        :param data: Raw request wrapper.
        :raises RkUsbError: Invalid length, signature or flag.
        :return: Parsed request wrapper.
        """
        if len(data) < cls.SIZE:
            raise RkUsbError(f"Invalid request length: {len(data)}")
        signature, tag, data_length, flag, lun, _ = unpack_from(cls.FORMAT, data)
        if signature != REQUEST_SIGNATURE:
            raise RkUsbError(f"Invalid request signature: {signature!r}")
        if flag not in DataDirection.tags():
            raise RkUsbError(f"Invalid request flag: 0x{flag:02X}")
        command = CmdRecord.parse(data[calcsize(cls.FORMAT) :])
        return cls(tag, command, data_length, DataDirection.from_tag(flag), lun)


class CmdResponse(CmdResponseBase):
    """Response wrapper ("USBS").

    The signature is kept as received, the caller decides whether it's valid.
    """

    FORMAT = "<4sIIB"
    SIZE = calcsize(FORMAT)

    def __init__(self, signature: bytes, tag: int, residue: int, status: int):
        """Initialize the response wrapper.

        :param signature: Four signature bytes.
        :param tag: Tag of the request this response belongs to.
        :param residue: Difference between expected and processed data length.
        :param status: Status byte, zero on success.
        """
        self.signature = signature
        self.tag = tag
        self.residue = residue
        self.status = status

    @property
    def value(self) -> int:
        """Status byte of the response."""
        return self.status

    @property
    def is_valid(self) -> bool:
        """The response carries the expected signature."""
        return self.signature == RESPONSE_SIGNATURE

    def __str__(self) -> str:
        return (
            f"Signature={self.signature!r}, Tag=0x{self.tag:08X}, Residue={self.residue}, "
            f"Status={StatusCode.get_label(self.status)}"
        )

    def export(self) -> bytes:
        """Export the response wrapper into bytes."""
        return pack(self.FORMAT, self.signature, self.tag, self.residue, self.status)

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse response wrapper from bytes.

        :param data: Raw response wrapper.
        :raises RkUsbError: Received less than SIZE bytes.
        :return: Parsed response wrapper.
        """
        if len(data) < cls.SIZE:
            raise RkUsbError(f"Invalid response length: {len(data)}, expected {cls.SIZE}")
        return cls(*unpack_from(cls.FORMAT, data))


########################################################################################################################
# Rockusb Command data
########################################################################################################################
class ChipInfo:
    """Chip identification record returned by the ReadChipInfo command.

    The chip ID is stored byte-reversed, "6633" on the wire reads as "3366".
    """

    SIZE = 16

    def __init__(self, raw_data: bytes):
        self.raw_data = raw_data

    @property
    def chip_id(self) -> str:
        """Chip identifier as text."""
        return bytes(reversed(self.raw_data[:4])).decode("ascii", errors="replace")

    def __str__(self) -> str:
        return f"Chip ID: {self.chip_id}"

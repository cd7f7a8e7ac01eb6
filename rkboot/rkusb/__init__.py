#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Module implementing communication with the Rockchip boot ROM (Rockusb protocol)."""

from rkboot.rkusb.commands import ChipInfo, MemoryRegion, OpCode, OperationMode
from rkboot.rkusb.error_codes import StatusCode
from rkboot.rkusb.exceptions import (
    RkUsbCommandError,
    RkUsbConnectionError,
    RkUsbError,
    RkUsbModeError,
    RkUsbSignatureError,
    RkUsbTagError,
)
from rkboot.rkusb.rockusb import RockUsb

__all__ = [
    # Main API
    "RockUsb",
    # Commands
    "ChipInfo",
    "MemoryRegion",
    "OpCode",
    "OperationMode",
    # Status codes
    "StatusCode",
    # Exceptions
    "RkUsbError",
    "RkUsbCommandError",
    "RkUsbConnectionError",
    "RkUsbModeError",
    "RkUsbSignatureError",
    "RkUsbTagError",
]

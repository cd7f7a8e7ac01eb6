#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""USB interface implementation for the Rockusb protocol."""

from typing import Optional

from typing_extensions import Self

from rkboot.rkusb.protocol.bulk_protocol import RkUsbBulkProtocol
from rkboot.utils.interfaces.device.usb_device import UsbDevice

USB_VID_ROCKCHIP = 0x2207
USB_PID_RK3366 = 0x350A


class RkUsbInterface(RkUsbBulkProtocol):
    """Rockusb USB interface.

    :cvar identifier: Interface type identifier for USB communication.
    """

    device: UsbDevice
    identifier = "usb"

    def __init__(self, device: UsbDevice) -> None:
        """Initialize the RkUsbInterface object.

        :param device: The USB device instance.
        """
        super().__init__(device=device)

    @classmethod
    def scan(
        cls,
        vid: int = USB_VID_ROCKCHIP,
        pid: int = USB_PID_RK3366,
        timeout: Optional[int] = None,
    ) -> list[Self]:
        """Scan connected USB devices.

        :param vid: USB vendor ID.
        :param pid: USB product ID.
        :param timeout: Bulk transfer timeout in milliseconds.
        :return: List of matching interfaces.
        """
        devices = UsbDevice.enumerate(vid=vid, pid=pid, timeout=timeout)
        return [cls(device) for device in devices]

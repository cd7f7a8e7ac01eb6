#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot USB device interface implementation.

Low-level USB device access based on the pyusb library: enumerating devices,
claiming the first interface, locating its bulk endpoints and running bulk and
vendor control transfers.
"""

import logging
import time
from typing import Optional

import usb.core
import usb.util
from typing_extensions import Self

from rkboot.exceptions import RKBootConnectionError, RKBootError
from rkboot.utils.exceptions import (
    RKBootInterfaceBusyError,
    RKBootTimeoutError,
    RKBootUnsupportedSpeedError,
)
from rkboot.utils.interfaces.device.base import DeviceBase
from rkboot.utils.misc import Timeout, find_first
from rkboot.utils.rk_enum import RKBootEnum

logger = logging.getLogger(__name__)


class UsbSpeed(RKBootEnum):
    """Negotiated link speed as reported by libusb."""

    UNKNOWN = (usb.util.SPEED_UNKNOWN, "Unknown", "Unknown speed")
    LOW = (usb.util.SPEED_LOW, "Low", "Low speed (1.5 Mbit/s)")
    FULL = (usb.util.SPEED_FULL, "Full", "Full speed (12 Mbit/s)")
    HIGH = (usb.util.SPEED_HIGH, "High", "High speed (480 Mbit/s)")
    SUPER = (usb.util.SPEED_SUPER, "Super", "Super speed (5 Gbit/s)")
    # LIBUSB_SPEED_SUPER_PLUS, pyusb has no constant for it
    SUPER_PLUS = (5, "SuperPlus", "Super speed plus (10 Gbit/s)")


MAX_PACKET_SIZES = {
    UsbSpeed.LOW: 64,
    UsbSpeed.FULL: 64,
    UsbSpeed.HIGH: 512,
    UsbSpeed.SUPER: 1024,
    UsbSpeed.SUPER_PLUS: 1024,
}


def get_max_packet_size(speed: Optional[int]) -> int:
    """Get maximum bulk packet size for given link speed.

    :param speed: Speed value reported by libusb (None when the backend can't tell).
    :raises RKBootUnsupportedSpeedError: Speed outside of the known set.
    :return: Maximum packet size in bytes.
    """
    if speed is None or not UsbSpeed.contains(speed):
        raise RKBootUnsupportedSpeedError(f"Unknown USB device speed {speed}")
    usb_speed = UsbSpeed.from_tag(speed)
    if usb_speed not in MAX_PACKET_SIZES:
        raise RKBootUnsupportedSpeedError(f"Unknown USB device speed {usb_speed.label}")
    return MAX_PACKET_SIZES[usb_speed]


class UsbDevice(DeviceBase):
    """USB device interface.

    Wraps a pyusb device. On :meth:`open` the first interface of the active
    configuration is claimed exclusively and its first OUT and first IN endpoints
    are used for bulk transfers. Vendor control transfers go to the default
    control endpoint.

    :cvar CLAIM_INTERFACE_TIMEOUT: How long to keep retrying to claim the interface [ms].
    :cvar CLAIM_INTERFACE_PERIOD: Delay between two claim attempts [s].
    """

    CLAIM_INTERFACE_TIMEOUT = 1000
    CLAIM_INTERFACE_PERIOD = 200e-6

    def __init__(self, usb_device: usb.core.Device, timeout: Optional[int] = None) -> None:
        """Initialize the USB interface object.

        :param usb_device: pyusb device found by enumeration.
        :param timeout: Bulk transfer timeout in milliseconds, defaults to 5000ms.
        """
        self._opened = False
        self._usb_device = usb_device
        self.vid: int = usb_device.idVendor
        self.pid: int = usb_device.idProduct
        self.bus: int = getattr(usb_device, "bus", 0) or 0
        self.address: int = getattr(usb_device, "address", 0) or 0
        self.vendor_name = ""
        self.product_name = ""
        self.interface_number: Optional[int] = None
        self.max_packet_size = 0
        self._ep_in: Optional[int] = None
        self._ep_out: Optional[int] = None
        self._timeout = timeout or 5000

    @property
    def timeout(self) -> int:
        """Get timeout value for bulk transfers in milliseconds."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        """Set timeout value for bulk transfers in milliseconds."""
        self._timeout = value

    @property
    def is_opened(self) -> bool:
        """Indicates whether device is open."""
        return self._opened

    @property
    def in_endpoint(self) -> int:
        """Address of the bulk IN endpoint.

        :raises RKBootConnectionError: Device is not opened.
        """
        if self._ep_in is None:
            raise RKBootConnectionError("Device is not opened")
        return self._ep_in

    @property
    def out_endpoint(self) -> int:
        """Address of the bulk OUT endpoint.

        :raises RKBootConnectionError: Device is not opened.
        """
        if self._ep_out is None:
            raise RKBootConnectionError("Device is not opened")
        return self._ep_out

    def _get_string(self, index: int) -> str:
        """Read USB string descriptor, empty string if it can't be read."""
        if not index:
            return ""
        try:
            return usb.util.get_string(self._usb_device, index) or ""
        except (usb.core.USBError, ValueError, NotImplementedError) as exc:
            logger.debug(f"Unable to read string descriptor {index}: {exc}")
            return ""

    def _get_configuration(self) -> usb.core.Configuration:
        """Get active configuration, activate the default one if there is none."""
        try:
            return self._usb_device.get_active_configuration()
        except usb.core.USBError:
            logger.debug("No active configuration, setting the default one")
        try:
            self._usb_device.set_configuration()
            return self._usb_device.get_active_configuration()
        except usb.core.USBError as exc:
            raise RKBootConnectionError(f"Unable to configure device '{str(self)}'") from exc

    def _claim_interface(self, interface_number: int) -> None:
        """Claim the interface, retrying until the claim timeout elapses.

        The kernel may still be releasing the interface right after enumeration.

        :param interface_number: bInterfaceNumber to claim.
        :raises RKBootInterfaceBusyError: The interface can't be claimed in time.
        """
        timeout = Timeout(self.CLAIM_INTERFACE_TIMEOUT, "ms")
        attempt = 1
        while True:
            try:
                usb.util.claim_interface(self._usb_device, interface_number)
                logger.debug(f"Interface {interface_number} claimed (attempt {attempt})")
                return
            except usb.core.USBError as exc:
                if timeout.overflow():
                    raise RKBootInterfaceBusyError(
                        f"failure claiming USB interface {interface_number} "
                        f"within {self.CLAIM_INTERFACE_TIMEOUT} ms"
                    ) from exc
            attempt += 1
            time.sleep(self.CLAIM_INTERFACE_PERIOD)

    def _release(self) -> None:
        """Release claimed interface and pyusb resources."""
        try:
            if self.interface_number is not None:
                usb.util.release_interface(self._usb_device, self.interface_number)
            usb.util.dispose_resources(self._usb_device)
        except usb.core.USBError as error:
            raise RKBootConnectionError(f"Unable to close device '{str(self)}'") from error
        finally:
            self.interface_number = None
            self._ep_in = None
            self._ep_out = None

    def open(self) -> None:
        """Open the USB device interface.

        Claims the first interface, checks the link speed and locates the bulk
        endpoints. The interface is released again if any of the steps fails.

        :raises RKBootError: If device is already opened.
        :raises RKBootInterfaceBusyError: Interface can't be claimed.
        :raises RKBootUnsupportedSpeedError: Link speed is not supported.
        :raises RKBootConnectionError: The device has no usable interface or endpoints.
        """
        logger.debug(f"Opening the Interface: {str(self)}")
        if self.is_opened:
            raise RKBootError("Can't open already opened device")

        configuration = self._get_configuration()
        # Just use the first interface
        interface = next(iter(configuration), None)
        if interface is None:
            raise RKBootConnectionError(f"Device '{str(self)}' has no interface")
        self._claim_interface(interface.bInterfaceNumber)
        self.interface_number = interface.bInterfaceNumber
        try:
            self.vendor_name = self._get_string(self._usb_device.iManufacturer)
            self.product_name = self._get_string(self._usb_device.iProduct)
            logger.info(
                f"Found {self.vendor_name or '[no manufacturer]'} "
                f"{self.product_name or '[no product id]'}"
            )

            speed = self._usb_device.speed
            self.max_packet_size = get_max_packet_size(speed)
            logger.debug(
                f"speed {UsbSpeed.get_label(speed)} - max packet size: {self.max_packet_size}"
            )

            ep_out = find_first(
                interface,
                lambda ep: usb.util.endpoint_direction(ep.bEndpointAddress)
                == usb.util.ENDPOINT_OUT,
            )
            ep_in = find_first(
                interface,
                lambda ep: usb.util.endpoint_direction(ep.bEndpointAddress)
                == usb.util.ENDPOINT_IN,
            )
            if ep_out is None or ep_in is None:
                raise RKBootConnectionError(
                    f"Interface {interface.bInterfaceNumber} lacks bulk "
                    f"{'OUT' if ep_out is None else 'IN'} endpoint"
                )
            for endpoint in interface:
                logger.debug(
                    f"Endpoint 0x{endpoint.bEndpointAddress:02X}, "
                    f"wMaxPacketSize={endpoint.wMaxPacketSize}"
                )
        except Exception:
            self._release()
            raise
        self._ep_out = ep_out.bEndpointAddress
        self._ep_in = ep_in.bEndpointAddress
        self._opened = True

    def close(self) -> None:
        """Close the USB device interface.

        :raises RKBootConnectionError: If the interface can't be released.
        """
        logger.debug(f"Closing the Interface: {str(self)}")
        if self.is_opened:
            self._opened = False
            self._release()

    def read(self, length: int, timeout: Optional[int] = None) -> bytes:
        """Read data from the bulk IN endpoint.

        A short read is returned as is.

        :param length: Number of bytes to read from the device.
        :param timeout: Timeout in milliseconds, uses default if None.
        :return: Raw data bytes read from the device.
        :raises RKBootConnectionError: Device is not opened or transfer failed.
        :raises RKBootTimeoutError: Read operation timed out.
        """
        timeout = timeout or self.timeout
        if not self.is_opened:
            raise RKBootConnectionError("Device is not opened for reading")
        try:
            data = self._usb_device.read(self.in_endpoint, length, timeout=timeout)
        except usb.core.USBTimeoutError as e:
            raise RKBootTimeoutError(f"Bulk read timed out after {timeout} ms") from e
        except usb.core.USBError as e:
            raise RKBootConnectionError(str(e)) from e
        return bytes(data)

    def write(self, data: bytes, timeout: Optional[int] = None) -> None:
        """Send data to the bulk OUT endpoint.

        :param data: Data bytes to send to the device.
        :param timeout: Timeout in milliseconds, uses default if None.
        :raises RKBootConnectionError: Device is not opened or data transmission failed.
        :raises RKBootTimeoutError: Write operation timed out.
        """
        timeout = timeout or self.timeout
        if not self.is_opened:
            raise RKBootConnectionError("Device is not opened for writing")
        try:
            bytes_written = self._usb_device.write(self.out_endpoint, data, timeout=timeout)
        except usb.core.USBTimeoutError as e:
            raise RKBootTimeoutError(f"Bulk write timed out after {timeout} ms") from e
        except usb.core.USBError as e:
            raise RKBootConnectionError(str(e)) from e
        if bytes_written != len(data):
            raise RKBootConnectionError(
                f"Invalid size of written bytes has been detected: {bytes_written} != {len(data)}"
            )

    def control_write(
        self, request: int, value: int, index: int, data: bytes, timeout: Optional[int] = None
    ) -> None:
        """Send vendor-type control OUT transfer addressed to the device.

        :param request: bRequest field.
        :param value: wValue field.
        :param index: wIndex field.
        :param data: Data stage.
        :param timeout: Timeout in milliseconds, uses default if None.
        :raises RKBootConnectionError: Device is not opened or the transfer failed.
        :raises RKBootTimeoutError: Transfer timed out.
        """
        timeout = timeout or self.timeout
        if not self.is_opened:
            raise RKBootConnectionError("Device is not opened for writing")
        request_type = usb.util.build_request_type(
            usb.util.CTRL_OUT, usb.util.CTRL_TYPE_VENDOR, usb.util.CTRL_RECIPIENT_DEVICE
        )
        try:
            bytes_written = self._usb_device.ctrl_transfer(
                request_type, request, value, index, data, timeout=timeout
            )
        except usb.core.USBTimeoutError as e:
            raise RKBootTimeoutError(f"Control transfer timed out after {timeout} ms") from e
        except usb.core.USBError as e:
            raise RKBootConnectionError(str(e)) from e
        if bytes_written != len(data):
            raise RKBootConnectionError(
                f"Invalid size of written bytes has been detected: {bytes_written} != {len(data)}"
            )

    def __str__(self) -> str:
        """Return string representation of the USB device interface."""
        return (
            f"{self.product_name or 'USB device'} (0x{self.vid:04X}, 0x{self.pid:04X}) "
            f"bus={self.bus} address={self.address}"
        )

    def __hash__(self) -> int:
        """Get hash value for the USB device based on its bus position."""
        return hash((self.bus, self.address))

    @classmethod
    def enumerate(cls, vid: int, pid: int, timeout: Optional[int] = None) -> list[Self]:
        """Enumerate all connected USB devices with given identifiers.

        :param vid: USB vendor ID.
        :param pid: USB product ID.
        :param timeout: Optional bulk transfer timeout in milliseconds.
        :raises RKBootConnectionError: No usable USB backend (libusb) is installed.
        :return: List of matching USB device instances.
        """
        try:
            found = usb.core.find(find_all=True, idVendor=vid, idProduct=pid)
            devices = [cls(usb_device=dev, timeout=timeout) for dev in found]
        except usb.core.NoBackendError as exc:
            raise RKBootConnectionError("No USB backend available, is libusb installed?") from exc
        logger.debug(f"Found {len(devices)} device(s) 0x{vid:04X}:0x{pid:04X}")
        return devices

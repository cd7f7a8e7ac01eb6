#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot protocol base interface for device communication.

Abstract base class and common exceptions for protocols running on top of a
:class:`DeviceBase` device.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Optional, Type, Union

from typing_extensions import Self

from rkboot.exceptions import RKBootAttributeError, RKBootError
from rkboot.utils.interfaces.commands import CmdPacketBase, CmdResponseBase
from rkboot.utils.interfaces.device.base import DeviceBase

logger = logging.getLogger(__name__)


class RKBootNoDeviceFoundError(RKBootError):
    """No device matching the scan parameters is connected."""

    def __init__(self, interface: str, scan_params: str) -> None:
        """Initialize the RKBootNoDeviceFoundError exception.

        :param interface: Interface identifier string.
        :param scan_params: Interface parameters used for scanning devices.
        """
        super().__init__()
        self.interface = interface
        self.scan_params = scan_params

    def __str__(self) -> str:
        """Return string representation of the exception."""
        return (
            f"No devices for given interface '{self.interface}' "
            f"and parameters '{self.scan_params}' was found. "
            "Is it connected and in the right mode?"
        )


class ProtocolBase(ABC):
    """Abstract base class for communication protocols.

    A protocol owns a device and knows how to move command packets, data and
    responses over it.
    """

    device: DeviceBase
    identifier: str

    def __init__(self, device: DeviceBase) -> None:
        """Initialize the protocol object.

        :param device: The device instance to be used for communication.
        """
        self.device = device

    def __str__(self) -> str:
        """Get string representation of the protocol interface."""
        return f"identifier='{self.identifier}', device={self.device}"

    def __enter__(self) -> Self:
        """Open the protocol connection and return self."""
        self.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[Exception]] = None,
        exception_value: Optional[Exception] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        """Close the protocol interface on any exit path."""
        self.close()

    @abstractmethod
    def open(self) -> None:
        """Open the interface."""

    @abstractmethod
    def close(self) -> None:
        """Close the interface."""

    @property
    @abstractmethod
    def is_opened(self) -> bool:
        """Indicates whether interface is open."""

    @classmethod
    def scan_first(cls, *args: Any, **kwargs: Any) -> Self:
        """Scan the connected devices and return interface to the first one found.

        :param args: Positional arguments passed to the scan method.
        :param kwargs: Keyword arguments passed to the scan method.
        :raises RKBootAttributeError: If interface 'scan' method is not implemented.
        :raises RKBootNoDeviceFoundError: If no device is found.
        :return: Interface instance of the first device found.
        """
        try:
            scan = getattr(cls, "scan")
        except AttributeError as e:
            raise RKBootAttributeError("The scan method for the interface isn't implemented.") from e
        interfaces = scan(*args, **kwargs)
        # build a string containing params for the scan method
        params_groups = []
        args_str = ", ".join(str(arg) for arg in args)
        if args_str:
            params_groups.append(args_str)
        kwargs_str = ", ".join(f"{key}={value}" for key, value in kwargs.items())
        if kwargs_str:
            params_groups.append(kwargs_str)
        params_str = ", ".join(params_groups)
        if len(interfaces) == 0:
            raise RKBootNoDeviceFoundError(cls.identifier, params_str)
        if len(interfaces) > 1:
            logger.warning(
                f"{len(interfaces)} devices found for interface '{cls.identifier}', "
                f"using the first one: {interfaces[0].device}"
            )
        return interfaces[0]

    @abstractmethod
    def write_command(self, packet: CmdPacketBase) -> None:
        """Write command to the device.

        :param packet: Command packet to be sent.
        """

    @abstractmethod
    def write_data(self, data: bytes) -> None:
        """Write data to the device.

        :param data: Data to be sent to the device.
        """

    @abstractmethod
    def read(self, length: Optional[int] = None) -> Union[CmdResponseBase, bytes]:
        """Read data from device.

        :param length: Number of bytes to read.
        :return: Command response object or raw bytes data from the device.
        """

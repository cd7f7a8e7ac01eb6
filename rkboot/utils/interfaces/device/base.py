#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot device interface base class.

Abstract base class for all device communication interfaces, defining the common
contract for device operations.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from typing_extensions import Self

logger = logging.getLogger(__name__)


class DeviceBase(ABC):
    """Abstract base class for device communication interfaces.

    Provides context manager support and abstract methods for opening, closing,
    bulk reading/writing and vendor control writes.
    """

    def __enter__(self) -> Self:
        """Open the device and return it for use within the 'with' block.

        :return: The device instance itself.
        """
        self.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[Exception]] = None,
        exception_value: Optional[Exception] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        """Close the device on any exit path of the 'with' block."""
        self.close()

    @property
    @abstractmethod
    def is_opened(self) -> bool:
        """Indicates whether interface is open.

        :return: True if interface is open, False otherwise.
        """

    @abstractmethod
    def open(self) -> None:
        """Open the interface.

        :raises RKBootError: If the interface cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the interface and release associated resources."""

    @abstractmethod
    def read(self, length: int, timeout: Optional[int] = None) -> bytes:
        """Read data from the device.

        :param length: Length of data to be read in bytes.
        :param timeout: Read timeout in milliseconds, None for default timeout.
        :return: Data read from the device.
        """

    @abstractmethod
    def write(self, data: bytes, timeout: Optional[int] = None) -> None:
        """Write data to the device.

        :param data: Data to be written to the device.
        :param timeout: Write timeout to be applied in milliseconds.
        """

    @abstractmethod
    def control_write(
        self, request: int, value: int, index: int, data: bytes, timeout: Optional[int] = None
    ) -> None:
        """Send vendor-type control OUT transfer addressed to the device.

        :param request: bRequest field.
        :param value: wValue field.
        :param index: wIndex field.
        :param data: Data stage.
        :param timeout: Transfer timeout in milliseconds.
        """

    @property
    @abstractmethod
    def out_endpoint(self) -> int:
        """Address of the bulk OUT endpoint of the opened interface."""

    @property
    @abstractmethod
    def timeout(self) -> int:
        """Get the timeout value for device communication.

        :return: Timeout value in milliseconds.
        """

    @timeout.setter
    @abstractmethod
    def timeout(self, value: int) -> None:
        """Set timeout value for device communication.

        :param value: Timeout value in milliseconds.
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return string containing information about the interface."""

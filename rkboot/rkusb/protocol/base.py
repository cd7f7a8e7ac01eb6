#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb protocol base implementation."""

from abc import abstractmethod
from typing import Optional

from rkboot.rkusb.commands import OperationMode
from rkboot.utils.interfaces.protocol.protocol_base import ProtocolBase


class RkUsbProtocolBase(ProtocolBase):
    """Rockusb protocol base class.

    Adds the pieces every Rockusb transport must provide on top of the generic
    protocol: the vendor control channel used for code upload and the
    operational mode of the connected device.
    """

    @property
    @abstractmethod
    def mode(self) -> OperationMode:
        """Operational mode of the connected device."""

    @abstractmethod
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

#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Generic command interface definitions.

Abstract base classes for command packets and responses exchanged with a device.
"""

from abc import ABC, abstractmethod


class CmdResponseBase(ABC):
    """Abstract base class for command response objects."""

    @abstractmethod
    def __str__(self) -> str:
        """Get string representation of the object."""

    @property
    @abstractmethod
    def value(self) -> int:
        """Return an integer representation of the response.

        :return: Integer value of the response.
        """


class CmdPacketBase(ABC):
    """Abstract base class for command protocol packets."""

    @abstractmethod
    def export(self, padding: bool = True) -> bytes:
        """Export CmdPacket into bytes.

        :param padding: If True, add padding to specific size.
        :return: Exported object into bytes.
        """

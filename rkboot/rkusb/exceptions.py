#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb protocol exception classes.

Errors raised while talking to the boot ROM (or the USB-Plug loader): broken
response framing, failed status and commands issued in the wrong mode.
"""

from rkboot.exceptions import RKBootConnectionError, RKBootError
from rkboot.rkusb.error_codes import StatusCode


########################################################################################################################
# Rockusb Exceptions
########################################################################################################################
class RkUsbError(RKBootError):
    """Base exception class for Rockusb protocol operations.

    :cvar fmt: Format string template for error messages.
    """

    fmt = "RKUSB: {description}"


class RkUsbCommandError(RkUsbError):
    """The device answered a command with non-zero status.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "RKUSB: {cmd_name} interrupted -> {description}"

    def __init__(self, cmd: str, value: int):
        """Initialize the command exception.

        :param cmd: Name of the command that failed.
        :param value: Status byte of the response.
        """
        super().__init__()
        self.cmd_name = cmd
        self.error_value = value
        self.description = (
            StatusCode.get_description(value)
            if value in StatusCode.tags()
            else f"Unknown Error 0x{value:02X}"
        )

    def __str__(self) -> str:
        """Return string representation of the exception."""
        return self.fmt.format(cmd_name=self.cmd_name, description=self.description)


class RkUsbConnectionError(RKBootConnectionError, RkUsbError):
    """Connection issue on the Rockusb session.

    :cvar fmt: Error message format template for connection issues.
    """

    fmt = "RKUSB: Connection issue -> {description}"


class RkUsbSignatureError(RkUsbError):
    """Response wrapper does not start with the "USBS" signature."""

    fmt = "RKUSB: Invalid response signature -> {description}"


class RkUsbTagError(RkUsbError):
    """Response tag differs from the tag of the request."""

    fmt = "RKUSB: Tag mismatch -> {description}"

    def __init__(self, expected: int, received: int):
        """Initialize the tag mismatch exception.

        :param expected: Tag sent in the request.
        :param received: Tag found in the response.
        """
        super().__init__(f"expected 0x{expected:08X}, received 0x{received:08X}")
        self.expected = expected
        self.received = received


class RkUsbModeError(RkUsbError):
    """Command can't be used in the current operational mode."""

    fmt = "RKUSB: Mode mismatch -> {description}"

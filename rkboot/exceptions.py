#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot exception classes and error handling utilities.

This module defines the hierarchy of custom exception classes used throughout
the RKBoot library for consistent error handling and reporting.
"""

from typing import Optional

#######################################################################
# # RKBoot Exceptions
#######################################################################


class RKBootError(Exception):
    """RKBoot Base Exception.

    Base exception class for all RKBoot-related errors. Every error raised by the
    library derives from this class so the applications can report it uniformly.

    :cvar fmt: Default error message format template.
    """

    fmt = "RKBoot: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base RKBoot Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        If no description is provided, defaults to "Unknown Error".

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class RKBootKeyError(RKBootError, KeyError):
    """RKBoot Key Error exception for missing or invalid keys."""


class RKBootValueError(RKBootError, ValueError):
    """RKBoot standard value error exception."""


class RKBootTypeError(RKBootError, TypeError):
    """RKBoot standard type error exception."""


class RKBootAttributeError(RKBootError, AttributeError):
    """RKBoot standard attribute error exception."""


class RKBootConnectionError(RKBootError, ConnectionError):
    """RKBoot Connection Error exception class.

    Raised when the USB stack reports a failed transfer or the device can't be
    opened, claimed or released.
    """

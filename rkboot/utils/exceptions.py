#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2021-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot utilities exception classes.

This module defines specialized exception classes raised by the device layer:
timeouts, an interface that can't be claimed and an unsupported link speed.
"""

from rkboot.exceptions import RKBootConnectionError, RKBootError


class RKBootTimeoutError(RKBootError, TimeoutError):
    """RKBoot timeout exception for operations that exceed time limits.

    Raised when a transfer does not complete within its budget. The session
    that raised it shall not be used any further.
    """


class RKBootInterfaceBusyError(RKBootConnectionError):
    """The USB interface could not be claimed within the claim timeout."""

    fmt = "RKBoot: Interface busy -> {description}"


class RKBootUnsupportedSpeedError(RKBootConnectionError):
    """The negotiated USB link speed is not one of Low/Full/High/Super/SuperPlus."""

    fmt = "RKBoot: Unsupported USB speed -> {description}"

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Status codes returned in the response wrapper."""

from rkboot.utils.rk_enum import RKBootSoftEnum


########################################################################################################################
# Rockusb Status Codes
########################################################################################################################
class StatusCode(RKBootSoftEnum):
    """Response wrapper status byte."""

    SUCCESS = (0, "Success", "Success")
    FAILED = (1, "Failed", "Command Failed")
    PHASE_ERROR = (2, "PhaseError", "Phase Error")

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2020,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rockusb protocol tests."""

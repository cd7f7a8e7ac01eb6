#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBootEnum utility tests."""

import pytest

from rkboot.exceptions import RKBootKeyError, RKBootTypeError
from rkboot.utils.rk_enum import RKBootEnum, RKBootSoftEnum


class EnumNumbers(RKBootEnum):
    """Test enumeration with numeric values."""

    ONE = (1, "TheOne")
    TWO = (2, "TheTwo", "Just two.")
    THREE = (3, "TheThree")


class SoftNumbers(RKBootSoftEnum):
    """Test soft enumeration."""

    ONE = (1, "TheOne", "Just one.")


def test_equals() -> None:
    assert EnumNumbers.ONE == 1
    assert EnumNumbers.ONE == "TheOne"
    assert EnumNumbers.ONE != 2
    assert 2 == EnumNumbers.TWO
    assert EnumNumbers.ONE != EnumNumbers.TWO


def test_from_tag() -> None:
    """Members are looked up by tag, unknown tags raise RKBootKeyError."""
    two = EnumNumbers.from_tag(2)
    assert two is EnumNumbers.TWO
    assert two.label == "TheTwo"
    assert two.description == "Just two."
    with pytest.raises(RKBootKeyError):
        EnumNumbers.from_tag(10)


def test_from_label() -> None:
    assert EnumNumbers.from_label("TheTwo") is EnumNumbers.TWO
    assert EnumNumbers.from_label("thetwo") is EnumNumbers.TWO
    with pytest.raises(RKBootKeyError):
        EnumNumbers.from_label("TEN")
    with pytest.raises(RKBootKeyError):
        EnumNumbers.from_label(2)  # type: ignore


def test_get_description() -> None:
    assert EnumNumbers.get_description(2) == "Just two."
    assert EnumNumbers.get_description(1) is None
    assert EnumNumbers.get_description(1, "Default") == "Default"
    with pytest.raises(RKBootKeyError):
        EnumNumbers.get_description(10)


def test_labels_and_tags() -> None:
    assert EnumNumbers.labels() == ["TheOne", "TheTwo", "TheThree"]
    assert EnumNumbers.tags() == [1, 2, 3]
    assert EnumNumbers.get_label(3) == "TheThree"


def test_contains() -> None:
    assert EnumNumbers.contains(1)
    assert EnumNumbers.contains("TheOne")
    assert EnumNumbers.contains("theone")
    assert not EnumNumbers.contains("TheTen")
    assert not EnumNumbers.contains(10)
    with pytest.raises(RKBootTypeError):
        EnumNumbers.contains(1.5)  # type: ignore


def test_soft_enum() -> None:
    assert SoftNumbers.get_label(1) == "TheOne"
    assert SoftNumbers.get_label(5) == "Unknown (5)"
    assert SoftNumbers.get_description(1) == "Just one."
    assert SoftNumbers.get_description(5) == "Unknown (5)"

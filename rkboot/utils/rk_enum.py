#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot enumerations with wire tags.

Members carry a numeric tag (the value seen on the wire), a label used on the
command line and in logs, and an optional description. A member compares equal
to its tag and to its label.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from typing_extensions import Self

from rkboot.exceptions import RKBootKeyError, RKBootTypeError


@dataclass(frozen=True)
class RKBootEnumMember:
    """Value of an :class:`RKBootEnum` member."""

    tag: int
    label: str
    description: Optional[str] = None


class RKBootEnum(RKBootEnumMember, Enum):
    """Enumeration of tagged and labelled members."""

    def __eq__(self, other: object) -> bool:
        return self.tag == other or self.label == other

    def __hash__(self) -> int:
        return hash((self.tag, self.label, self.description))

    @classmethod
    def labels(cls) -> list[str]:
        """Labels of all members in definition order."""
        return [member.label for member in cls]

    @classmethod
    def tags(cls) -> list[int]:
        """Tags of all members in definition order."""
        return [member.tag for member in cls]

    @classmethod
    def contains(cls, obj: Union[int, str]) -> bool:
        """Check whether a member with given tag (int) or label (str) exists.

        :param obj: Tag or label.
        :raises RKBootTypeError: Object is neither integer nor string.
        :return: True if there is such a member.
        """
        if isinstance(obj, int):
            return obj in cls.tags()
        if isinstance(obj, str):
            return obj.upper() in (label.upper() for label in cls.labels())
        raise RKBootTypeError("Object must be either string or integer")

    @classmethod
    def from_tag(cls, tag: int) -> Self:
        """Get member by its tag.

        :param tag: Tag of the member.
        :raises RKBootKeyError: There is no member with such tag.
        :return: Enum member.
        """
        for member in cls:
            if member.tag == tag:
                return member
        raise RKBootKeyError(f"There is no {cls.__name__} item with tag {tag} defined")

    @classmethod
    def from_label(cls, label: str) -> Self:
        """Get member by its label, ignoring case.

        :param label: Label of the member.
        :raises RKBootKeyError: There is no member with such label or label isn't a string.
        :return: Enum member.
        """
        if not isinstance(label, str):
            raise RKBootKeyError("Label must be string")
        for member in cls:
            if member.label.upper() == label.upper():
                return member
        raise RKBootKeyError(f"There is no {cls.__name__} item with label {label} defined")

    @classmethod
    def get_label(cls, tag: int) -> str:
        """Get label of the member with given tag."""
        return cls.from_tag(tag).label

    @classmethod
    def get_description(cls, tag: int, default: Optional[str] = None) -> Optional[str]:
        """Get description of the member with given tag.

        :param tag: Tag of the member.
        :param default: Returned when the member has no description.
        :return: Description or default.
        """
        return cls.from_tag(tag).description or default


class RKBootSoftEnum(RKBootEnum):
    """Enumeration answering "Unknown (tag)" for tags it doesn't define.

    Used for values reported by the device, which may be outside the known set.
    """

    @classmethod
    def get_label(cls, tag: int) -> str:
        """Get label of the member with given tag, or "Unknown (tag)"."""
        try:
            return super().get_label(tag)
        except RKBootKeyError:
            return f"Unknown ({tag})"

    @classmethod
    def get_description(cls, tag: int, default: Optional[str] = None) -> Optional[str]:
        """Get description of the member with given tag, or "Unknown (tag)"."""
        try:
            return super().get_description(tag, default)
        except RKBootKeyError:
            return f"Unknown ({tag})"

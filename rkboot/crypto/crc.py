#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""RKBoot Cyclic Redundancy Check (CRC) computation.

The Rockchip boot ROM verifies uploaded code with CRC-16/IBM-3740, also known
as CRC-16/CCITT-FALSE.
"""

from dataclasses import dataclass

import crcmod

from rkboot.exceptions import RKBootKeyError
from rkboot.utils.rk_enum import RKBootEnum


class CrcAlg(RKBootEnum):
    """Predefined CRC algorithms."""

    CRC16_IBM_3740 = (0, "crc16-ibm-3740", "Crc16 IBM-3740 (CCITT-FALSE) algorithm")


@dataclass
class CrcConfig:
    """CRC parameters in the form crcmod expects them.

    The polynomial includes its top bit, which also sets the CRC width.
    """

    polynomial: int
    initial_value: int
    final_xor: int
    reverse: bool
    width: int

    @property
    def size(self) -> int:
        """Size of the CRC value in bytes."""
        return self.width // 8


class Crc:
    """Cyclic Redundancy Check calculator."""

    def __init__(self, config: CrcConfig):
        """Initialize CRC calculator with specified configuration.

        :param config: CRC configuration.
        """
        self.config = config
        self._crc_func = crcmod.mkCrcFun(
            poly=config.polynomial,
            initCrc=config.initial_value,
            rev=config.reverse,
            xorOut=config.final_xor,
        )

    def calculate(self, data: bytes) -> int:
        """Calculate CRC from given data.

        :param data: Input data bytes for CRC calculation.
        :return: Calculated CRC checksum value.
        """
        return self._crc_func(bytes(data))

    def export(self, data: bytes, byteorder: str = "big") -> bytes:
        """Calculate CRC and return it serialized as bytes.

        :param data: Input data bytes for CRC calculation.
        :param byteorder: "big" or "little".
        :return: CRC value of `config.size` bytes.
        """
        return self.calculate(data).to_bytes(self.config.size, byteorder)  # type: ignore[arg-type]


CRC_ALGORITHMS = {
    CrcAlg.CRC16_IBM_3740: CrcConfig(
        polynomial=0x11021,
        initial_value=0xFFFF,
        final_xor=0x0000,
        reverse=False,
        width=16,
    ),
}


def from_crc_algorithm(crc_alg: CrcAlg) -> Crc:
    """Get CRC object from algorithm enum.

    :param crc_alg: CRC algorithm.
    :raises RKBootKeyError: No configuration for the algorithm.
    :return: CRC calculator object configured with the specified algorithm.
    """
    if crc_alg not in CRC_ALGORITHMS:
        raise RKBootKeyError(f"Unknown CRC algorithm: {crc_alg}")
    return Crc(CRC_ALGORITHMS[crc_alg])

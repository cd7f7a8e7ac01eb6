#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Code upload frame builder.

Code for SRAM or DRAM is sent as one frame: the payload, an optional pad byte
and a big-endian CRC-16/IBM-3740 of the padded payload. The frame is split into
chunks, each sent as a single vendor control transfer.
"""

from typing import Iterator

from rkboot.crypto.crc import CrcAlg, from_crc_algorithm
from rkboot.utils.misc import split_data

UPLOAD_REQUEST = 0x0C
UPLOAD_CHUNK_SIZE = 4096
# per control transfer, in milliseconds
UPLOAD_TIMEOUT = 25

# sent when the frame length is a multiple of the chunk size
FRAME_TERMINATOR = b"\x00"


def build_frame(payload: bytes) -> bytes:
    """Build upload frame from the payload.

    A zero byte is appended when the payload length is one byte short of a
    chunk boundary. The CRC covers the padded payload, so an empty payload
    gives just the CRC initial value 0xFFFF.

    :param payload: Code to be uploaded.
    :return: Frame ready to be split into chunks.
    """
    data = bytes(payload)
    if len(data) % UPLOAD_CHUNK_SIZE == UPLOAD_CHUNK_SIZE - 1:
        data += b"\x00"
    return data + from_crc_algorithm(CrcAlg.CRC16_IBM_3740).export(data, byteorder="big")


def split_frame(frame: bytes) -> Iterator[bytes]:
    """Split frame into chunks for control transfers.

    Full chunks come first, followed by the remainder. A frame whose length is a
    multiple of the chunk size ends with a single zero byte chunk instead.

    :param frame: Frame created by :func:`build_frame`.
    :return: Iterator over the chunks.
    """
    yield from split_data(frame, UPLOAD_CHUNK_SIZE)
    if len(frame) % UPLOAD_CHUNK_SIZE == 0:
        yield FRAME_TERMINATOR

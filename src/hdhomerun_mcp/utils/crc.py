"""CRC32 checksum used for frame integrity."""

from __future__ import annotations

import zlib


def crc32(data: bytes) -> int:
    """Compute the IEEE CRC32 of *data* as an unsigned 32-bit integer.

    Uses the same polynomial as Ethernet and :func:`zlib.crc32`.
    """
    return zlib.crc32(data) & 0xFFFFFFFF

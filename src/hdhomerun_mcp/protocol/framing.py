"""Packet frame encoder and decoder for HDHomeRun control messages.

Frame layout::

    +---------+----------------+----------------------------+----------+
    |  Type   | Section length |      Attribute blocks      |  CRC32   |
    | 2 bytes |    2 bytes     |    section length bytes    |  4 bytes |
    +---------+----------------+----------------------------+----------+

- Type: big-endian packet type
- Section length: big-endian total size of the attribute blocks
- Attribute block: 1-byte kind, variable-width length (see
  :mod:`.taglength`), then the payload bytes
- CRC32: IEEE CRC32 of everything before it, **little-endian**
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from ..utils.crc import crc32
from .errors import InvalidChecksumError, LengthEncodingError, TruncatedInputError
from .taglength import (
    TAG_LENGTH_WINDOW,
    read_tag_length,
    tag_length_size,
    write_tag_length,
)

HEADER_FORMAT = ">HH"  # type, section length
CHECKSUM_FORMAT = "<I"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
CHECKSUM_SIZE = struct.calcsize(CHECKSUM_FORMAT)
MIN_FRAME_SIZE = HEADER_SIZE + CHECKSUM_SIZE
MAX_SECTION_LENGTH = 0xFFFF
MAX_PACKET_TYPE = 0xFFFF
MAX_ATTRIBUTE_KIND = 0xFF


@dataclass
class AttributeBlock:
    """A single kind/length/payload attribute carried by a packet."""

    kind: int
    payload: bytes = b""

    def __post_init__(self) -> None:
        self.payload = bytes(self.payload)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "payload": self.payload.hex()}

    def __repr__(self) -> str:
        return (
            f"AttributeBlock(kind=0x{self.kind:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


@dataclass
class Packet:
    """A control message: a packet type and its ordered attribute blocks."""

    type: int = 0
    attributes: list[AttributeBlock] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        """Encode this packet into a wire frame."""
        return encode_packet(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Packet:
        """Decode a wire frame into a packet."""
        return decode_packet(data)

    def to_dict(self) -> dict:
        """Convert the packet to a JSON-serializable dictionary."""
        return {
            "type": self.type,
            "attributes": [attr.to_dict() for attr in self.attributes],
        }

    def __repr__(self) -> str:
        return f"Packet(type=0x{self.type:04X}, attributes={self.attributes!r})"


def _check_field(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} must be 0-{maximum}, got {value}")


def encode_packet(packet: Packet) -> bytes:
    """Encode *packet* into its wire frame, checksum included.

    The frame size is computed up front so the output is allocated once.

    Raises:
        LengthEncodingError: If a payload is too long for the tag length
            field, or the attribute section would not fit its 16-bit length.
        ValueError: If the packet type or an attribute kind does not fit
            its field.
    """
    _check_field("Packet type", packet.type, MAX_PACKET_TYPE)

    section_length = 0
    for attr in packet.attributes:
        _check_field("Attribute kind", attr.kind, MAX_ATTRIBUTE_KIND)
        size = len(attr.payload)
        section_length += 1 + tag_length_size(size) + size

    if section_length > MAX_SECTION_LENGTH:
        raise LengthEncodingError(
            f"Attribute section is {section_length} bytes, "
            f"maximum is {MAX_SECTION_LENGTH}"
        )

    buf = bytearray(HEADER_SIZE + section_length + CHECKSUM_SIZE)
    view = memoryview(buf)
    struct.pack_into(HEADER_FORMAT, buf, 0, packet.type, section_length)

    i = HEADER_SIZE
    for attr in packet.attributes:
        buf[i] = attr.kind
        i += 1
        # The window may overlap bytes the payload or checksum fill in later.
        i += write_tag_length(len(attr.payload), view[i : i + TAG_LENGTH_WINDOW])
        buf[i : i + len(attr.payload)] = attr.payload
        i += len(attr.payload)

    struct.pack_into(CHECKSUM_FORMAT, buf, i, crc32(view[:i]))
    return bytes(buf)


def decode_packet(data: bytes) -> Packet:
    """Decode a wire frame into a :class:`Packet`.

    The checksum is verified before any length field is trusted.

    Args:
        data: A complete frame as ``bytes``, ``bytearray`` or ``memoryview``.

    Raises:
        TruncatedInputError: If the frame is shorter than the minimum size,
            or a declared length does not match the bytes present.
        InvalidChecksumError: If the trailing CRC32 does not match.
    """
    if len(data) < MIN_FRAME_SIZE:
        raise TruncatedInputError(
            f"Frame must be at least {MIN_FRAME_SIZE} bytes, got {len(data)}"
        )

    end = len(data) - CHECKSUM_SIZE
    (expected,) = struct.unpack_from(CHECKSUM_FORMAT, data, end)
    actual = crc32(data[:end])
    if expected != actual:
        raise InvalidChecksumError(expected, actual)

    packet_type, section_length = struct.unpack_from(HEADER_FORMAT, data, 0)
    if section_length != len(data) - MIN_FRAME_SIZE:
        raise TruncatedInputError(
            f"Attribute section declares {section_length} bytes, "
            f"frame carries {len(data) - MIN_FRAME_SIZE}"
        )

    packet = Packet(type=packet_type)
    if section_length == 0:
        return packet

    i = HEADER_SIZE
    while i < end:
        kind = data[i]
        i += 1

        # At least the checksum follows, so the window is always complete.
        length, consumed = read_tag_length(data[i : i + TAG_LENGTH_WINDOW])
        i += consumed

        if end - i < length:
            raise TruncatedInputError(
                f"Attribute 0x{kind:02X} declares {length} bytes, "
                f"{max(end - i, 0)} remain"
            )

        packet.attributes.append(
            AttributeBlock(kind=kind, payload=bytes(data[i : i + length]))
        )
        i += length

    return packet

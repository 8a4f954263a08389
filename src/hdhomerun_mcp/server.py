"""MCP server entry point for the HDHomeRun packet codec.

Exposes the frame and tag length codecs as tools so captured frames can be
inspected and test frames built by hand. The server never talks to a tuner;
it only translates between hex strings and packets.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .protocol import (
    AttributeBlock,
    Packet,
    decode_packet,
    encode_packet,
    read_tag_length,
    write_tag_length,
)
from .protocol.framing import CHECKSUM_SIZE, HEADER_SIZE, MIN_FRAME_SIZE
from .protocol.taglength import MAX_TAG_LENGTH, TAG_LENGTH_WINDOW

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "hdhomerun",
    instructions="Encode and decode HDHomeRun control packet frames",
)


def _error(exc: Exception) -> dict[str, Any]:
    return {"error": str(exc), "error_type": type(exc).__name__}


def _attributes_from_json(attributes: list[dict[str, Any]]) -> list[AttributeBlock]:
    """Build attribute blocks from ``{"kind": int, "payload": hex}`` entries."""
    return [
        AttributeBlock(
            kind=int(entry["kind"]),
            payload=bytes.fromhex(entry.get("payload", "")),
        )
        for entry in attributes
    ]


# ─── FRAME TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def build_frame(
    type: int, attributes: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Encode a packet into a wire frame.

    Args:
        type: Packet type (0-65535).
        attributes: Attribute blocks in wire order, each
            ``{"kind": 0-255, "payload": "<hex>"}``.
    """
    try:
        packet = Packet(type=type, attributes=_attributes_from_json(attributes or []))
        frame = encode_packet(packet)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Rejected packet: %s", e)
        return _error(e)

    return {"frame": frame.hex(" "), "length": len(frame)}


@mcp.tool()
def parse_frame(frame: str) -> dict[str, Any]:
    """Decode a wire frame given as hex (whitespace allowed).

    The checksum is verified before any field is interpreted.
    """
    try:
        data = bytes.fromhex(frame)
        packet = decode_packet(data)
    except ValueError as e:
        logger.debug("Rejected frame: %s", e)
        return _error(e)

    result = packet.to_dict()
    result["checksum"] = data[-CHECKSUM_SIZE:].hex()
    result["length"] = len(data)
    return result


# ─── TAG LENGTH TOOLS ────────────────────────────────────────────────

@mcp.tool()
def encode_tag_length(length: int) -> dict[str, Any]:
    """Encode an attribute payload length as its 1- or 2-byte wire field.

    Args:
        length: Payload length (0-32767).
    """
    window = bytearray(TAG_LENGTH_WINDOW)
    try:
        consumed = write_tag_length(length, window)
    except ValueError as e:
        return _error(e)

    return {"bytes": window[:consumed].hex(" "), "consumed": consumed}


@mcp.tool()
def decode_tag_length(data: str) -> dict[str, Any]:
    """Decode an attribute length field.

    Args:
        data: Exactly two bytes as hex; the second is ignored for short lengths.
    """
    try:
        length, consumed = read_tag_length(bytes.fromhex(data))
    except ValueError as e:
        return _error(e)

    return {"length": length, "consumed": consumed}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("hdhomerun://protocol/layout")
def resource_frame_layout() -> str:
    """Frame layout and limits of the wire format."""
    return json.dumps({
        "fields": [
            {"name": "type", "offset": 0, "size": 2, "byte_order": "big"},
            {"name": "section_length", "offset": 2, "size": 2, "byte_order": "big"},
            {"name": "attributes", "offset": HEADER_SIZE, "size": "section_length"},
            {"name": "crc32", "offset": "4 + section_length", "size": CHECKSUM_SIZE,
             "byte_order": "little"},
        ],
        "attribute": ["kind (1 byte)", "length (1-2 bytes)", "payload"],
        "min_frame_size": MIN_FRAME_SIZE,
        "max_tag_length": MAX_TAG_LENGTH,
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

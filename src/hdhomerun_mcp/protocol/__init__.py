"""Protocol layer: packet framing, tag length fields, and codec errors."""

from .errors import (
    CodecError,
    InvalidChecksumError,
    InvalidLengthBufferError,
    LengthEncodingError,
    TruncatedInputError,
)
from .framing import AttributeBlock, Packet, decode_packet, encode_packet
from .taglength import (
    MAX_TAG_LENGTH,
    read_tag_length,
    tag_length_size,
    write_tag_length,
)

"""Exception types raised by the packet codec."""

from __future__ import annotations


class CodecError(ValueError):
    """Base class for packet codec errors."""


class TruncatedInputError(CodecError):
    """Raised when a buffer is too short or a length field disagrees with it."""


class InvalidChecksumError(CodecError):
    """Raised when the trailing CRC32 does not match the frame contents."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"invalid CRC32 checksum: frame carries 0x{expected:08X}, "
            f"computed 0x{actual:08X}"
        )
        self.expected = expected
        self.actual = actual


class LengthEncodingError(CodecError):
    """Raised when a tag length cannot be represented on the wire."""


class InvalidLengthBufferError(CodecError):
    """Raised when the tag length codec is given a window that is not 2 bytes."""

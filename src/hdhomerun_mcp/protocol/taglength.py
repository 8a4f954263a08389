"""Variable-width tag length field.

Lengths below 128 take a single byte with the high bit clear. Larger
lengths take two bytes: the low 7 bits with the high bit set as a
continuation marker, followed by the remaining high-order bits::

    0..127       0xxxxxxx
    128..32767   1xxxxxxx  yyyyyyyy      length = x | (y << 7)

Both directions work on a caller-supplied window of exactly two bytes,
whether or not the second byte ends up being used.
"""

from __future__ import annotations

from .errors import InvalidLengthBufferError, LengthEncodingError

TAG_LENGTH_WINDOW = 2
MAX_SHORT_TAG_LENGTH = 0x7F
MAX_TAG_LENGTH = 0x7FFF  # 7 low bits + 8 high bits


def _check_window(window) -> None:
    if len(window) != TAG_LENGTH_WINDOW:
        raise InvalidLengthBufferError(
            f"tag length window must be exactly {TAG_LENGTH_WINDOW} bytes, "
            f"got {len(window)}"
        )


def tag_length_size(n: int) -> int:
    """Return how many bytes the length field for *n* occupies (1 or 2)."""
    if n < 0:
        raise LengthEncodingError(f"tag length must be non-negative, got {n}")
    if n <= MAX_SHORT_TAG_LENGTH:
        return 1
    if n <= MAX_TAG_LENGTH:
        return 2
    raise LengthEncodingError(
        f"tag length {n} exceeds the supported maximum of {MAX_TAG_LENGTH}"
    )


def write_tag_length(n: int, window: bytearray | memoryview) -> int:
    """Write the length field for *n* into a writable 2-byte *window*.

    Returns:
        The number of bytes of *window* actually used.

    Raises:
        InvalidLengthBufferError: If *window* is not exactly 2 bytes.
        LengthEncodingError: If *n* is negative or above ``MAX_TAG_LENGTH``.
    """
    _check_window(window)

    size = tag_length_size(n)
    if size == 1:
        window[0] = n
    else:
        window[0] = 0x80 | (n & 0x7F)
        window[1] = n >> 7
    return size


def read_tag_length(window: bytes | bytearray | memoryview) -> tuple[int, int]:
    """Read a length field from a 2-byte *window*.

    Returns:
        ``(length, consumed)`` where ``consumed`` is 1 or 2.

    Raises:
        InvalidLengthBufferError: If *window* is not exactly 2 bytes.
    """
    _check_window(window)

    first = window[0]
    if not first & 0x80:
        return first, 1
    return (first & 0x7F) | (window[1] << 7), 2

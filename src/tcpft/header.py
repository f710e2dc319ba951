from __future__ import annotations

import re

from .constants import HEADER_DIGITS, HEADER_SIZE, MAX_FILE_SIZE
from .errors import HeaderOverflowError

_LEADING_NUMBER = re.compile(rb"\s*\+?(\d+)")


def encode_header(file_size: int) -> bytes:
    """Render ``file_size`` as the fixed-width header.

    The first ``HEADER_DIGITS`` bytes hold the zero-padded decimal size and
    the final byte is NUL, so the result is always ``HEADER_SIZE`` bytes long.
    Sizes that do not fit in the digit field are rejected instead of being
    truncated.
    """
    if file_size < 0:
        raise HeaderOverflowError(f"file size must be non-negative, got {file_size}")
    if file_size > MAX_FILE_SIZE:
        raise HeaderOverflowError(
            f"file size {file_size} needs more than {HEADER_DIGITS} digits"
        )
    header = f"{file_size:0{HEADER_DIGITS}d}".encode("ascii")
    return header.ljust(HEADER_SIZE, b"\x00")


def decode_header(raw: bytes) -> int:
    """Parse the leading decimal digits of a header.

    Trailing padding and anything after the digit run is ignored. Input with
    no leading digits decodes to 0, which callers read as "no file sent".
    """
    m = _LEADING_NUMBER.match(bytes(raw[:HEADER_SIZE]))
    if m is None:
        return 0
    return int(m.group(1))

from __future__ import annotations

"""
Length-prefixed strings, the only serialization primitive of the container.

Encoding
- int32 little-endian signed length n
- n == 0: empty string, no content bytes follow
- n > 0:  n bytes of single-byte text, the last of which is 0x00
          (one trailing 0x00 is stripped on decode when present)
- n < 0:  two-byte-per-unit text (not supported)

Decoders work on an in-memory buffer and a read position and return the new
position, so callers never need a file object.
"""

from typing import Tuple

from .constants import REPLACEMENT_CHAR, TERMINATOR, TEXT_ENCODING, TEXT_ERRORS, _INT32_STRUCT
from .errors import TruncatedData, UnsupportedEncoding


def encode_int32(n: int) -> bytes:
    return _INT32_STRUCT.pack(n)


def decode_int32(data: bytes, pos: int) -> Tuple[int, int]:
    end = pos + _INT32_STRUCT.size
    if end > len(data):
        raise TruncatedData("int32: truncated", offset=pos)
    (n,) = _INT32_STRUCT.unpack_from(data, pos)
    return n, end


def encode_lpstring(text: str) -> bytes:
    if not text:
        return encode_int32(0)
    raw = text.encode(TEXT_ENCODING, TEXT_ERRORS)
    return encode_int32(len(raw) + 1) + raw + TERMINATOR


def decode_lpstring(data: bytes, pos: int) -> Tuple[str, int]:
    start = pos
    n, pos = decode_int32(data, pos)
    if n == 0:
        return "", pos
    if n < 0:
        raise UnsupportedEncoding("Unicode (wide) strings are not supported", offset=start)
    end = pos + n
    if end > len(data):
        raise TruncatedData(
            f"string declares {n} byte(s) but only {len(data) - pos} remain", offset=start
        )
    raw = bytes(data[pos:end])
    # Writers always terminate; a full-length string without one is kept whole
    if raw[-1:] == TERMINATOR:
        raw = raw[:-1]
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS).replace("\ufffd", REPLACEMENT_CHAR), end

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from .constants import CONTAINER_MAGIC, _INT32_STRUCT
from .errors import InvalidHeader
from .lpstring import decode_lpstring, encode_int32, encode_lpstring
from .pathutil import base_name, virtual_name


@dataclass
class Entry:
    name: str
    body: str
    offset: int = -1  # start of the entry in the decoded buffer

    @property
    def filename(self) -> str:
        return base_name(self.name)

    def __iter__(self):
        # Lets an Entry stand in for a (name, body) pair
        yield self.name
        yield self.body


EntryLike = Union[Entry, Tuple[str, str]]


def encode(entries: Iterable[EntryLike]) -> bytes:
    """Pack entries into a container buffer.

    Names are rewritten to the fixed virtual directory before being stored;
    order is preserved exactly.
    """
    out = bytearray(encode_int32(CONTAINER_MAGIC))
    for name, body in entries:
        out += encode_lpstring(virtual_name(name))
        out += encode_lpstring(body)
    return bytes(out)


def read_header(data: bytes) -> int:
    """Validate the magic header and return the position of the first entry."""
    if len(data) < _INT32_STRUCT.size:
        raise InvalidHeader("File is too short to be a Coalesced file")
    (magic,) = _INT32_STRUCT.unpack_from(data, 0)
    if magic != CONTAINER_MAGIC:
        raise InvalidHeader(
            f"First 4 bytes were 0x{magic & 0xFFFFFFFF:08X}, not 0x{CONTAINER_MAGIC:02X}. "
            "This does not appear to be a Coalesced file."
        )
    return _INT32_STRUCT.size


def decode(data: bytes) -> List[Entry]:
    """Unpack a container buffer into its entries, in on-disk order.

    Raises:
        InvalidHeader: the buffer does not start with the magic header.
        TruncatedData: a length field or string runs past the end of input.
        UnsupportedEncoding: a string is stored as wide text.
    """
    if isinstance(data, memoryview):
        data = data.tobytes()
    pos = read_header(data)
    n = len(data)
    entries: List[Entry] = []
    while pos < n:
        offset = pos
        name, pos = decode_lpstring(data, pos)
        body, pos = decode_lpstring(data, pos)
        entries.append(Entry(name=name, body=body, offset=offset))
    return entries

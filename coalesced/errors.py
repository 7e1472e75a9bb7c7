from __future__ import annotations

from typing import Optional


class CoalescedError(Exception):
    """Base class for Coalesced container errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset

    def __str__(self) -> str:
        msg = super().__str__()
        if self.offset is None:
            return msg
        return f"{msg} (at offset 0x{self.offset:06X})"


# Decode failures
class InvalidHeader(CoalescedError):
    pass


class TruncatedData(CoalescedError):
    pass


class UnsupportedEncoding(CoalescedError):
    pass


# Filesystem/CLI boundary
class UnsafeEntryName(CoalescedError):
    pass


class UsageError(CoalescedError):
    pass

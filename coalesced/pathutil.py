from __future__ import annotations

from .constants import VIRTUAL_PREFIX
from .errors import UnsafeEntryName


def base_name(name: str) -> str:
    """Return the trailing component of a path using either separator.

    Stored names use Windows separators (``..\\BIOGame\\...\\a.ini``) and must
    resolve the same on every platform, so both ``\\`` and ``/`` split.
    """
    return name.replace("\\", "/").rsplit("/", 1)[-1]


def virtual_name(name: str) -> str:
    return VIRTUAL_PREFIX + base_name(name)


def safe_filename(name: str) -> str:
    """Base name of ``name`` that is safe to join onto an output directory.

    Raises:
        UnsafeEntryName: when the base name is empty, '.', '..' or holds a NUL.
    """
    fn = base_name(name)
    if fn in ("", ".", "..") or "\x00" in fn:
        raise UnsafeEntryName(f"Entry name {name!r} does not end in a file name")
    return fn

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, List, Optional

from .codec import Entry, decode
from .constants import SOURCE_WRITE_ENCODING
from .errors import UnsafeEntryName
from .pathutil import safe_filename


class ContainerReader:
    """Read-only view of a container file.

    The whole file is decoded when the reader is opened, so any structural
    error surfaces before a single entry is handed out or written.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.entries: List[Entry] = []
        self.size: int = 0
        self._opened = False

    def open(self) -> "ContainerReader":
        with open(self.path, "rb") as fh:
            data = fh.read()
        self.size = len(data)
        self.entries = decode(data)
        self._opened = True
        return self

    def close(self) -> None:
        self.entries = []
        self._opened = False

    def __enter__(self) -> "ContainerReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list(self) -> List[Entry]:
        if not self._opened:
            raise RuntimeError("Reader is not open")
        return list(self.entries)

    def extract(
        self,
        outdir: Optional[str | os.PathLike] = None,
        *,
        progress: Optional[Callable[[Entry], None]] = None,
    ) -> List[Path]:
        """Write each entry to ``outdir`` under its trailing file name.

        Args:
            outdir: Target directory. Defaults to the container's directory.
            progress: Called with each entry before it is written.

        Returns:
            Paths written, in entry order. Later entries overwrite earlier
            ones with the same file name.

        Raises:
            UnsafeEntryName: an entry name has no usable file name, or would
                overwrite the container itself. Checked for every entry before
                anything is written.
        """
        entries = self.list()
        target = Path(outdir) if outdir is not None else self.path.resolve().parent
        names = [safe_filename(e.name) for e in entries]
        if target.resolve() == self.path.resolve().parent:
            for e, fn in zip(entries, names):
                if fn == self.path.name:
                    raise UnsafeEntryName(f"Entry {e.name!r} would overwrite the container being extracted")
        target.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for e, fn in zip(entries, names):
            if progress is not None:
                progress(e)
            dst = target / fn
            with open(dst, "w", encoding=SOURCE_WRITE_ENCODING, newline="") as fh:
                fh.write(e.body)
            written.append(dst)
        return written

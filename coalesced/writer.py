from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .codec import encode
from .constants import CONTAINER_NAME, SOURCE_READ_ENCODING, SOURCE_SUFFIX


@dataclass
class CompileResult:
    output: Path
    sources: List[Path] = field(default_factory=list)
    size: int = 0


def collect_sources(directory: str | os.PathLike) -> List[Path]:
    """List the .ini files of ``directory`` that belong in a container.

    Only direct children are considered; an existing Coalesced.ini is never
    packed into itself. Results are sorted by name so output is reproducible.
    """
    base = Path(directory)
    if not base.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    sources = [
        p
        for p in base.iterdir()
        if p.is_file() and p.suffix.lower() == SOURCE_SUFFIX and p.name != CONTAINER_NAME
    ]
    sources.sort(key=lambda p: p.name)
    return sources


def read_source(path: Path) -> str:
    with open(path, "r", encoding=SOURCE_READ_ENCODING, errors="replace", newline="") as fh:
        return fh.read()


def compile_directory(
    directory: str | os.PathLike,
    *,
    output: Optional[str | os.PathLike] = None,
    sources: Optional[List[Path]] = None,
    progress: Optional[Callable[[Path], None]] = None,
) -> CompileResult:
    """Pack every source file of ``directory`` into a container file.

    Args:
        directory: Directory holding the .ini files.
        output: Container path to write. Defaults to ``directory/Coalesced.ini``.
        sources: Files to pack, in order. Defaults to ``collect_sources(directory)``.
        progress: Called with each source path before it is read.

    Returns:
        A CompileResult describing the written container.
    """
    if sources is None:
        sources = collect_sources(directory)
    entries = []
    for src in sources:
        if progress is not None:
            progress(src)
        entries.append((src.name, read_source(src)))
    data = encode(entries)
    out_path = Path(output) if output is not None else Path(directory) / CONTAINER_NAME
    with open(out_path, "wb") as fh:
        fh.write(data)
    return CompileResult(output=out_path, sources=sources, size=len(data))

from __future__ import annotations

import os
import sys
import argparse
from pathlib import Path
from typing import List, Optional

from coalesced.constants import CONTAINER_NAME
from coalesced.reader import ContainerReader
from coalesced.writer import collect_sources, compile_directory
from coalesced.errors import (
    CoalescedError,
    UnsupportedEncoding,
    UsageError,
)


EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits 2 on bad arguments; usage errors here exit 1
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def cmd_compile(directory: str, *, quiet: bool = False) -> bool:
    """Compile every .ini file of a directory into ``directory/Coalesced.ini``.

    Args:
        directory: Directory holding the source .ini files.
        quiet: Print only the final summary.
    """
    sources = collect_sources(directory)
    if not quiet:
        print(f"Number of files to compile into this coalesced: {len(sources)}")

    def _progress(src: Path) -> None:
        if not quiet:
            print(f"Coalescing {src.name}")

    result = compile_directory(directory, sources=sources, progress=_progress)
    print(f"Wrote {result.output} ({len(result.sources)} file(s), {result.size} bytes)")
    return True


def cmd_list(container: str) -> bool:
    """Print offset, body length and file name of every entry."""
    with ContainerReader(container) as r:
        for e in r.list():
            print(f"0x{e.offset:06X}\t{len(e.body)}\t{e.filename}")
    return True


def cmd_decompile(container: str, *, outdir: Optional[str] = None, quiet: bool = False) -> bool:
    """Dump every entry of a Coalesced.ini next to it (or into ``outdir``).

    Args:
        container: Path to a file named Coalesced.ini.
        outdir: Output directory. Defaults to the container's directory.
        quiet: Print only the final summary.
    """
    with ContainerReader(container) as r:
        def _progress(e) -> None:
            if not quiet:
                print(f"Writing out file {e.filename} from position 0x{e.offset:06X}")

        written = r.extract(outdir, progress=_progress)
    print(f"Extracted {len(written)} file(s)")
    return True


def _select_mode(path: str) -> str:
    if os.path.isdir(path):
        return "compile"
    if os.path.basename(path) == CONTAINER_NAME:
        return "decompile"
    if os.path.isfile(path):
        raise UsageError(f"Can only decompile files named {CONTAINER_NAME}.")
    raise UsageError(f"No such directory or {CONTAINER_NAME} file: {path}")


def main(argv: List[str] | None = None):
    ap = _ArgumentParser(
        prog="coalesced",
        description="Mass Effect 2 Coalesced.ini compiler/decompiler",
        epilog=(
            "A directory compiles all .ini files (except Coalesced.ini) into Coalesced.ini; "
            "a Coalesced.ini file is decompiled into the .ini files it contains."
        ),
    )
    ap.add_argument("path", help="Directory (for compiling) or Coalesced.ini file (for decompiling)")
    ap.add_argument("--outdir", help="Decompile into this directory instead of next to the container")
    ap.add_argument("--list", action="store_true", help="List container entries without writing files")
    ap.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    args = ap.parse_args(argv)
    try:
        mode = _select_mode(args.path)
        if mode == "compile":
            if args.list or args.outdir:
                raise UsageError("--list and --outdir only apply when decompiling")
            cmd_compile(args.path, quiet=args.quiet)
        elif args.list:
            cmd_list(args.path)
        else:
            cmd_decompile(args.path, outdir=args.outdir, quiet=args.quiet)
    except UsageError as e:
        ap.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except UnsupportedEncoding as e:
        print(f"Error: Unicode coded files are not supported by this application: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except (CoalescedError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()

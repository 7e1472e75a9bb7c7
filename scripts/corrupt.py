from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

from coalesced.codec import decode
from coalesced.lpstring import decode_int32, encode_int32
from coalesced.errors import CoalescedError


def _length_field_offset(data: bytes, entry: Optional[str], field: str) -> int:
    """Offset of the name or body length field of an entry.

    ``entry`` is matched against each entry's file name; None selects the
    first entry. The container must still decode cleanly.
    """
    entries = decode(data)
    if not entries:
        raise ValueError("Container has no entries")
    if entry is None:
        target = entries[0]
    else:
        target = next((e for e in entries if e.filename == entry), None)
        if target is None:
            raise ValueError(f"No entry named {entry!r}")
    if field == "name":
        return target.offset
    name_len, body_pos = decode_int32(data, target.offset)
    return body_pos + name_len


def _write_int32(path: str, offset: int, value: int) -> None:
    with open(path, "r+b") as f:
        f.seek(offset)
        f.write(encode_int32(value))
        f.flush()
        os.fsync(f.fileno())


def cmd_length(args: argparse.Namespace) -> None:
    with open(args.container, "rb") as f:
        data = f.read()
    off = _length_field_offset(data, args.entry, args.field)
    old, _ = decode_int32(data, off)
    _write_int32(args.container, off, args.value)
    print(f"Set {args.field} length at offset {off}: {old} -> {args.value}")


def cmd_widen(args: argparse.Namespace) -> None:
    # Negative lengths are how wide strings are marked
    with open(args.container, "rb") as f:
        data = f.read()
    off = _length_field_offset(data, args.entry, args.field)
    n, _ = decode_int32(data, off)
    if n <= 0:
        raise ValueError("Selected string is empty and cannot be widened")
    _write_int32(args.container, off, -n)
    print(f"Marked {args.field} at offset {off} as wide ({n} -> {-n})")


def cmd_truncate(args: argparse.Namespace) -> None:
    size = os.path.getsize(args.container)
    if args.drop <= 0 or args.drop > size:
        raise ValueError(f"--drop must be within 1..{size}")
    with open(args.container, "r+b") as f:
        f.truncate(size - args.drop)
    print(f"Dropped {args.drop} trailing byte(s)")


def _add_entry_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("container")
    p.add_argument("--entry", help="File name of the entry to change (default: first entry)")
    p.add_argument("--field", choices=["name", "body"], default="name", help="Which string of the entry (default name)")


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="coalesced.corrupt", description="Corrupt Coalesced.ini files for testing")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_len = sub.add_parser("length", help="Overwrite an entry's length field")
    _add_entry_args(p_len)
    p_len.add_argument("--value", type=int, required=True, help="New int32 length")
    p_len.set_defaults(func=cmd_length)

    p_wide = sub.add_parser("widen", help="Mark an entry's string as wide (negative length)")
    _add_entry_args(p_wide)
    p_wide.set_defaults(func=cmd_widen)

    p_trunc = sub.add_parser("truncate", help="Drop trailing bytes")
    p_trunc.add_argument("container")
    p_trunc.add_argument("--drop", type=int, default=1, help="Bytes to drop (default 1)")
    p_trunc.set_defaults(func=cmd_truncate)

    args = ap.parse_args(argv)
    try:
        args.func(args)
    except (CoalescedError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()

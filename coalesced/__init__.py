"""
Coalesced — compiler/decompiler for Mass Effect 2 Coalesced.ini containers.

Features:

- Pure container codec: a 0x1E magic header followed by (name, body) pairs of
  length-prefixed, null-terminated single-byte strings.
- Strict decoding of untrusted input: a bad header, truncated data or a wide
  (Unicode) string fails the whole decode with a distinct exception.
- Filesystem helpers to pack a directory of .ini files and to dump a
  container back next to itself.

The codec never touches the filesystem or the process; see coalesced.cli for
the command-line front end and its exit codes.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "cli",
    "codec",
    "lpstring",
    "errors",
    "pathutil",
    "reader",
    "writer",
]

# Importable programmatic API: coalesced.codec.encode/decode for buffers,
# coalesced.writer/coalesced.reader for directories and container files.

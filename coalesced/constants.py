import struct


# Container header. Every known Coalesced.ini starts with this int32; its
# meaning is undocumented, so it is only checked bit-exactly.
CONTAINER_MAGIC = 0x1E

# Name rewriting applied to every entry on encode
VIRTUAL_PREFIX = "..\\BIOGame\\Config\\PC\\Cooked\\"

# Filesystem conventions
CONTAINER_NAME = "Coalesced.ini"
SOURCE_SUFFIX = ".ini"

# Strings are stored one byte per character. Characters outside this range
# are replaced with "?" on encode, and bytes outside it decode to "?".
TEXT_ENCODING = "ascii"
TEXT_ERRORS = "replace"
TERMINATOR = b"\x00"
REPLACEMENT_CHAR = "?"

# Source files are read/written as UTF-8 (BOM tolerated on read)
SOURCE_READ_ENCODING = "utf-8-sig"
SOURCE_WRITE_ENCODING = "utf-8"

# int32 little-endian: used for the header and every length prefix
_INT32_STRUCT = struct.Struct("<i")

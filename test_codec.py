from __future__ import annotations

import importlib
import pkgutil
import struct
import unittest

import coalesced

from coalesced.codec import Entry, decode, encode, read_header
from coalesced.constants import CONTAINER_MAGIC, VIRTUAL_PREFIX
from coalesced.errors import (
    CoalescedError,
    InvalidHeader,
    TruncatedData,
    UnsupportedEncoding,
)
from coalesced.lpstring import decode_lpstring, encode_lpstring
from coalesced.pathutil import base_name, virtual_name


def _i32(n: int) -> bytes:
    return struct.pack("<i", n)


HEADER = bytes.fromhex("1E000000")


class LengthPrefixedStringTests(unittest.TestCase):
    def test_empty_string_has_zero_length_and_no_terminator(self):
        self.assertEqual(encode_lpstring(""), b"\x00\x00\x00\x00")
        self.assertEqual(decode_lpstring(b"\x00\x00\x00\x00", 0), ("", 4))

    def test_non_empty_string_layout(self):
        for text in ("x", "x=1", "[Section]\r\nKey=Value\r\n"):
            raw = encode_lpstring(text)
            (n,) = struct.unpack_from("<i", raw, 0)
            self.assertEqual(n, len(text) + 1)
            self.assertEqual(len(raw), 4 + len(text) + 1)
            self.assertEqual(raw[-1], 0)
            self.assertEqual(raw[4:-1], text.encode("ascii"))

    def test_decode_strips_exactly_one_terminator(self):
        data = _i32(3) + b"a\x00\x00"
        self.assertEqual(decode_lpstring(data, 0), ("a\x00", 7))

    def test_decode_from_offset(self):
        data = b"junk" + encode_lpstring("abc") + b"tail"
        text, pos = decode_lpstring(data, 4)
        self.assertEqual(text, "abc")
        self.assertEqual(data[pos:], b"tail")

    def test_negative_length_is_unsupported(self):
        with self.assertRaises(UnsupportedEncoding) as cm:
            decode_lpstring(b"\xff\xff\xff\xff" + b"\x00" * 8, 0)
        self.assertEqual(cm.exception.offset, 0)

    def test_declared_length_past_end(self):
        with self.assertRaises(TruncatedData):
            decode_lpstring(_i32(5) + b"ab", 0)

    def test_length_field_past_end(self):
        with self.assertRaises(TruncatedData):
            decode_lpstring(b"\x05\x00", 0)

    def test_unterminated_string_is_kept_whole(self):
        self.assertEqual(decode_lpstring(_i32(3) + b"abc", 0), ("abc", 7))
        data = HEADER + _i32(6) + b"a.ini\x00" + _i32(3) + b"x=1"
        entries = decode(data)
        self.assertEqual([(e.name, e.body) for e in entries], [("a.ini", "x=1")])

    def test_high_bytes_decode_to_question_mark(self):
        self.assertEqual(decode_lpstring(_i32(3) + b"\xe9x\x00", 0), ("?x", 7))
        self.assertEqual(decode_lpstring(_i32(4) + b"\x80\xff\x7f\x00", 0), ("??\x7f", 8))

    def test_non_ascii_is_replaced_one_byte_per_character(self):
        raw = encode_lpstring("café")
        self.assertEqual(raw, _i32(5) + b"caf?\x00")


class PathTests(unittest.TestCase):
    def test_base_name_handles_both_separators(self):
        self.assertEqual(base_name("..\\BIOGame\\Config\\PC\\Cooked\\BioGame.ini"), "BioGame.ini")
        self.assertEqual(base_name("some/dir/BioEngine.ini"), "BioEngine.ini")
        self.assertEqual(base_name("plain.ini"), "plain.ini")

    def test_virtual_name(self):
        self.assertEqual(virtual_name("a.ini"), "..\\BIOGame\\Config\\PC\\Cooked\\a.ini")
        self.assertEqual(virtual_name("x/y\\a.ini"), VIRTUAL_PREFIX + "a.ini")


class ContainerCodecTests(unittest.TestCase):
    def test_two_entry_scenario_bytes(self):
        data = encode([("a.ini", "x=1"), ("b.ini", "")])
        expected = (
            bytes.fromhex("1E000000")
            + bytes.fromhex("22000000")
            + b"..\\BIOGame\\Config\\PC\\Cooked\\a.ini\x00"
            + bytes.fromhex("04000000")
            + b"x=1\x00"
            + bytes.fromhex("22000000")
            + b"..\\BIOGame\\Config\\PC\\Cooked\\b.ini\x00"
            + bytes.fromhex("00000000")
        )
        self.assertEqual(data, expected)

        entries = decode(expected)
        self.assertEqual([(e.filename, e.body) for e in entries], [("a.ini", "x=1"), ("b.ini", "")])
        self.assertEqual(entries[0].name, VIRTUAL_PREFIX + "a.ini")
        self.assertEqual(entries[0].offset, 4)
        self.assertEqual(entries[1].offset, 4 + 4 + 34 + 4 + 4)

    def test_empty_container(self):
        self.assertEqual(encode([]), HEADER)
        self.assertEqual(decode(HEADER), [])

    def test_roundtrip_preserves_order_and_bodies(self):
        src = [
            ("BioEngine.ini", "[Core.System]\r\nPaths=..\\BIOGame\\CookedPC\r\n"),
            ("empty.ini", ""),
            ("nested/dir/BioGame.ini", "[SFXGame.SFXGame]\nbEnableCheats=true\n"),
            ("Z.ini", "z"),
            ("A.ini", "\t tabs and spaces \n"),
        ]
        entries = decode(encode(src))
        self.assertEqual([e.filename for e in entries], [base_name(n) for n, _ in src])
        self.assertEqual([e.body for e in entries], [b for _, b in src])
        for e in entries:
            self.assertTrue(e.name.startswith(VIRTUAL_PREFIX))

    def test_encode_accepts_entries(self):
        decoded = decode(encode([("a.ini", "x=1")]))
        self.assertEqual(encode(decoded), encode([("a.ini", "x=1")]))
        self.assertEqual(tuple(Entry("n.ini", "b")), ("n.ini", "b"))

    def test_decode_accepts_bytearray_and_memoryview(self):
        data = encode([("a.ini", "x=1")])
        for buf in (bytearray(data), memoryview(data)):
            self.assertEqual([e.body for e in decode(buf)], ["x=1"])

    def test_invalid_header(self):
        with self.assertRaises(InvalidHeader):
            decode(bytes.fromhex("01000000"))
        with self.assertRaises(InvalidHeader):
            decode(b"")
        with self.assertRaises(InvalidHeader):
            decode(b"\x1e\x00")
        with self.assertRaises(InvalidHeader):
            read_header(b"\x1e\x00\x00\x01")
        self.assertEqual(read_header(_i32(CONTAINER_MAGIC)), 4)

    def test_truncated_string(self):
        data = HEADER + bytes.fromhex("05000000") + b"ab"
        with self.assertRaises(TruncatedData) as cm:
            decode(data)
        self.assertEqual(cm.exception.offset, 4)

    def test_negative_length(self):
        with self.assertRaises(UnsupportedEncoding):
            decode(HEADER + b"\xff\xff\xff\xff")

    def test_negative_body_length(self):
        data = HEADER + encode_lpstring("a.ini") + _i32(-4) + b"x\x00y\x00"
        with self.assertRaises(UnsupportedEncoding) as cm:
            decode(data)
        self.assertEqual(cm.exception.offset, 4 + 4 + 6)

    def test_entry_missing_body_is_truncated(self):
        data = HEADER + encode_lpstring("a.ini")
        with self.assertRaises(TruncatedData):
            decode(data)

    def test_every_truncation_fails(self):
        data = encode([("a.ini", "x=1"), ("b.ini", "")])
        boundaries = {e.offset for e in decode(data)} | {len(data)}
        for cut in range(5, len(data)):
            if cut in boundaries:
                continue
            with self.assertRaises(TruncatedData, msg=f"cut={cut}"):
                decode(data[:cut])

    def test_trailing_garbage_is_not_ignored(self):
        data = encode([("a.ini", "x=1")]) + b"\x01"
        with self.assertRaises(TruncatedData):
            decode(data)

    def test_errors_share_a_base(self):
        for exc in (InvalidHeader, TruncatedData, UnsupportedEncoding):
            self.assertTrue(issubclass(exc, CoalescedError))
        self.assertIn("0x000004", str(TruncatedData("x", offset=4)))
        self.assertEqual(str(TruncatedData("x")), "x")


class PackageTests(unittest.TestCase):
    def test_all_lists_every_module(self):
        shipped = {m.name for m in pkgutil.iter_modules(coalesced.__path__)}
        self.assertEqual(set(coalesced.__all__), shipped)
        for name in coalesced.__all__:
            importlib.import_module(f"coalesced.{name}")


if __name__ == "__main__":
    unittest.main()

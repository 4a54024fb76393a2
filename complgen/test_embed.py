"""
Tests for the C++ table serializer.
"""

import unittest

from .common import SerializationError
from .completion import Shell
from .embed import decode_table, render_table


def _table(**overrides) -> dict:
    return { shell: overrides.get(str(shell), b"") for shell in Shell }


class TestRenderTable(unittest.TestCase):
    """Tests for render_table."""

    def test_header(self):
        lines = render_table(_table()).split("\n")
        self.assertEqual(lines[:6], [
            "#include <string>",
            "#include <vector>",
            "#include <cstdint>",
            "#include <map>",
            "",
            '#define SHELLS "bash","zsh","fish","powershell","elvish"',
        ])
        self.assertEqual(lines[6], "const std::map<std::string, std::vector<std::uint8_t>> shell_complete = {")

    def test_empty_buffers(self):
        """Empty scripts still get an entry each."""
        source = render_table(_table())
        self.assertTrue(source.endswith("};\n"))
        for shell in Shell:
            self.assertIn(f'{{ "{shell}", {{\n}}}},\n', source)

    def test_byte_lines(self):
        """Twelve uppercase hex literals per line, plus a short final line."""
        source = render_table(_table(bash=bytes(range(13)) + b"\xab"))
        self.assertIn(
            '{ "bash", {\n'
            "    0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09, 0x0A, 0x0B, \n"
            "    0x0C, 0xAB, \n"
            "}},\n", source)

    def test_exact_multiple_of_line_width(self):
        source = render_table(_table(zsh=b"\xff" * 24))
        body = source[source.index('{ "zsh", {\n'):]
        body = body[:body.index("}},")]
        self.assertEqual(body.count("\n"), 3)

    def test_entries_in_shell_order(self):
        source = render_table(_table())
        positions = [source.index(f'{{ "{shell}", {{') for shell in Shell]
        self.assertEqual(positions, sorted(positions))

    def test_deterministic(self):
        table = _table(bash=b"abc", fish=b"\x00\x10")
        self.assertEqual(render_table(table), render_table(dict(table)))

    def test_wrong_keys_rejected(self):
        table = _table()
        del table[Shell.ELVISH]
        with self.assertRaises(SerializationError):
            render_table(table)

    def test_wrong_order_rejected(self):
        table = dict(reversed(list(_table().items())))
        with self.assertRaises(SerializationError):
            render_table(table)

    def test_non_bytes_rejected(self):
        table = _table()
        table[Shell.ZSH] = "text"
        with self.assertRaises(SerializationError):
            render_table(table)


class TestDecodeTable(unittest.TestCase):
    """Tests for decode_table."""

    def test_round_trip_every_byte_value(self):
        payload = bytes(range(256))
        table = _table(bash=payload, zsh=payload[::-1], fish=b"x", powershell=b"", elvish=payload * 2)
        decoded = decode_table(render_table(table))
        self.assertEqual(list(decoded.keys()), [str(s) for s in Shell])
        for shell, buf in table.items():
            self.assertEqual(decoded[str(shell)], buf)

    def test_missing_shells_define(self):
        with self.assertRaises(SerializationError):
            decode_table("const int x = 0;\n")

    def test_mismatched_entries(self):
        source = render_table(_table()).replace('{ "elvish", {\n}},\n', "")
        with self.assertRaises(SerializationError):
            decode_table(source)


if __name__ == "__main__":
    unittest.main()

# -*- coding: utf-8 -*-
"""
Test suite for literal.py

Covers the quoting rules for catalog values and decoding of both literal forms.
"""
from __future__ import annotations

import unittest

from translation_sheet_sync.literal import (
    decode_double_quoted,
    decode_single_quoted,
    has_pictograph,
    to_literal,
)


class TestToLiteral(unittest.TestCase):
    def test_null(self):
        self.assertEqual(to_literal(None), "null")

    def test_empty_string(self):
        self.assertEqual(to_literal(""), "''")

    def test_plain_text_single_quoted(self):
        self.assertEqual(to_literal("Hello, world"), "'Hello, world'")

    def test_cyrillic_stays_single_quoted(self):
        self.assertEqual(to_literal("Привет"), "'Привет'")

    def test_html_stays_single_quoted(self):
        self.assertEqual(to_literal("<b>bold</b> / text"), "'<b>bold</b> / text'")

    def test_single_quote_encoded(self):
        self.assertEqual(to_literal("Don't"), '"Don\'t"')

    def test_double_quote_encoded(self):
        self.assertEqual(to_literal('Say "hi"'), '"Say \\"hi\\""')

    def test_newline_encoded(self):
        self.assertEqual(to_literal("line1\nline2"), '"line1\\nline2"')

    def test_carriage_return_encoded(self):
        self.assertEqual(to_literal("a\rb"), '"a\\rb"')

    def test_backslash_encoded(self):
        self.assertEqual(to_literal("C:\\temp"), '"C:\\\\temp"')

    def test_emoji_encoded_unescaped(self):
        self.assertEqual(to_literal("Great 😀"), '"Great 😀"')

    def test_slashes_and_unicode_not_escaped(self):
        self.assertEqual(to_literal("Ссылка: https://x.io/a'b"), '"Ссылка: https://x.io/a\'b"')

    def test_non_string_scalar(self):
        self.assertEqual(to_literal(42), "'42'")


class TestPictographs(unittest.TestCase):
    def test_ranges(self):
        for ch in ("😀", "🌍", "🚀", "☀", "✂"):
            self.assertTrue(has_pictograph(f"x{ch}x"), ch)

    def test_plain_text(self):
        self.assertFalse(has_pictograph("Plain text, €100, ok"))


class TestDecode(unittest.TestCase):
    def test_single_quoted_escapes(self):
        self.assertEqual(decode_single_quoted("It\\'s a \\\\ b"), "It's a \\ b")

    def test_single_quoted_keeps_other_backslashes(self):
        self.assertEqual(decode_single_quoted("a\\nb"), "a\\nb")

    def test_double_quoted_common_escapes(self):
        self.assertEqual(decode_double_quoted('a\\nb\\t\\"c\\"\\\\'), 'a\nb\t"c"\\')

    def test_double_quoted_json_unicode(self):
        self.assertEqual(decode_double_quoted("\\u00e9t\\u00e9"), "été")

    def test_double_quoted_surrogate_pair(self):
        self.assertEqual(decode_double_quoted("\\ud83d\\ude00"), "😀")

    def test_double_quoted_php_unicode_and_hex(self):
        self.assertEqual(decode_double_quoted("\\u{1F600}\\x41\\101"), "😀AA")

    def test_double_quoted_dollar_and_slash(self):
        self.assertEqual(decode_double_quoted("\\$5 \\/ day"), "$5 / day")

    def test_malformed_braced_escape(self):
        for body in ("\\u{zz}", "\\u{110000}", "\\u{}"):
            with self.assertRaises(ValueError):
                decode_double_quoted(body)

    def test_braced_escape_upper_bound(self):
        self.assertEqual(decode_double_quoted("\\u{10FFFF}"), "\U0010FFFF")

    def test_unknown_escape_kept(self):
        self.assertEqual(decode_double_quoted("\\q"), "\\q")


if __name__ == "__main__":
    unittest.main()

# -*- coding: utf-8 -*-
"""
Test suite for formatting.py
"""
from __future__ import annotations

import unittest

from translation_sheet_sync.utils.formatting import compact_json, mask_token


class TestMaskToken(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(mask_token(None), "<none>")

    def test_short_value_fully_masked(self):
        self.assertEqual(mask_token("abc"), "***")

    def test_keeps_prefix(self):
        self.assertEqual(mask_token("sync@project.iam", keep=4), "sync…" + "*" * 11)


class TestCompactJson(unittest.TestCase):
    def test_no_spaces_and_unicode_kept(self):
        self.assertEqual(compact_json({"a": [1, "é"]}), '{"a":[1,"é"]}')

    def test_truncated(self):
        out = compact_json("x" * 50, limit=10)
        self.assertEqual(out, '"xxxxxxxxx…(truncated)')

    def test_not_serializable(self):
        self.assertEqual(compact_json({1, 2}), "{1, 2}")


if __name__ == "__main__":
    unittest.main()

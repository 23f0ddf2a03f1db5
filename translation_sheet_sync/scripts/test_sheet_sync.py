#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for sheet_sync.py

Runs the CLI entry point against a config file and catalogs in a temporary directory.
"""
from __future__ import annotations

import contextlib
import io
import json
import pathlib
import tempfile
import unittest
from unittest.mock import patch

from translation_sheet_sync.exceptions import TranslationSheetError
from translation_sheet_sync.scripts.sheet_sync import build_arg_parser, load_config, main

CATALOG = "<?php\n\nreturn [\n    Foo::BAR => 'hello',\n    Foo::BAZ => 'world',\n];\n"


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = pathlib.Path(self.tmp.name).resolve()
        for lang in ("ru_RU", "en_US"):
            p = self.root / "messages" / lang / "app.php"
            p.parent.mkdir(parents=True)
            p.write_text(CATALOG, encoding="utf-8")
        self.config = self._write_config({
            "languages": ["ru_RU", "en_US"],
            "source_language": "ru_RU",
            "urls": ["https://docs.google.com/spreadsheets/d/sheet1/edit"],
            "sources": {"app": {"base_path": "@messages"}},
            "credentials": "keys/sa.json",
        })

    def tearDown(self):
        self.tmp.cleanup()

    def _write_config(self, data) -> pathlib.Path:
        p = self.root / "sync.json"
        p.write_text(json.dumps(data), encoding="utf-8")
        return p

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(["--config", str(self.config), *argv])
        return code, out.getvalue(), err.getvalue()


class TestLoadConfig(CliTestCase):
    def test_relative_paths_resolve_against_config_dir(self):
        config = load_config(self.config)
        self.assertEqual(config.base_dir, str(self.root))
        self.assertEqual(config.credentials_file, str(self.root / "keys" / "sa.json"))

    def test_prefixed_keys(self):
        self._write_config({
            "translation_sheet_languages": ["en_US"],
            "translation_sheet_source_language": "en_US",
            "translation_sheet_sources": {},
            "translation_sheet_base_dir": "src",
        })
        config = load_config(self.config)
        self.assertEqual(config.languages, ["en_US"])
        self.assertEqual(config.base_dir, str(self.root / "src"))

    def test_invalid_json(self):
        self.config.write_text("{not json", encoding="utf-8")
        with self.assertRaises(TranslationSheetError):
            load_config(self.config)


class TestCommands(CliTestCase):
    def test_titles(self):
        code, out, _ = self._run("titles")
        self.assertEqual(code, 0)
        path = self.root / "messages" / "ru_RU" / "app.php"
        title = "messages/<language>/app"
        self.assertEqual(out, f"{title}\t{path}\n")

    def test_push_dry_run(self):
        code, out, _ = self._run("push", "--dry-run")
        self.assertEqual(code, 0)
        self.assertIn("Sheets: 1, rows: 2, spreadsheets updated: 0", out)
        self.assertIn("<language>", out)

    @patch("translation_sheet_sync.scripts.sheet_sync.GoogleSheetsClient")
    def test_pull_uses_credentials_from_config(self, client_cls):
        client_cls.return_value.get_values.return_value = []
        code, out, _ = self._run("pull")
        self.assertEqual(code, 0)
        client_cls.assert_called_once_with(credentials_file=str(self.root / "keys" / "sa.json"))
        self.assertIn("Sheets read: 0, files written: 0", out)

    def test_bad_config_exits_non_zero(self):
        self._write_config({"languages": ["english"], "source_language": "english", "sources": {}})
        code, _, err = self._run("titles")
        self.assertEqual(code, 1)
        self.assertTrue(err.startswith("Error: "))

    def test_missing_catalog_exits_non_zero(self):
        self._write_config({"languages": ["ru_RU"], "source_language": "ru_RU", "sources": {"gone": {"base_path": "x"}}})
        code, _, err = self._run("titles")
        self.assertEqual(code, 1)
        self.assertIn("gone", err)


class TestArgParser(unittest.TestCase):
    def test_command_required(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_arg_parser().parse_args(["--config", "x.json"])

    def test_push_flags(self):
        args = build_arg_parser().parse_args(["--config", "x.json", "push", "--dry-run"])
        self.assertEqual(args.command, "push")
        self.assertTrue(args.dry_run)


if __name__ == "__main__":
    unittest.main()

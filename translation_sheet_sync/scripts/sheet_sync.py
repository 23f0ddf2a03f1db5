#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
sheet_sync.py: push/pull PHP translation catalogs to and from Google Sheets outside a bench.

The config file is JSON with the same keys as site_config.json (the
``translation_sheet_`` prefix is optional):

    {
      "languages": ["ru_RU", "en_US"],
      "source_language": "ru_RU",
      "urls": ["https://docs.google.com/spreadsheets/d/1AbC.../edit"],
      "sources": {
        "app*": {"base_path": "@common/messages"},
        "errors": {"base_path": "@api/messages", "file_map": ["errors.php"]}
      },
      "credentials": "/secrets/sheets-service-account.json"
    }

Relative ``base_path`` values resolve against ``base_dir`` (defaults to the
directory holding the config file).

Usage Examples
--------------

1. List catalogs and the sheet titles they map to:
   python3 sheet_sync.py --config sync.json titles

2. Build the sheets without touching the spreadsheet:
   python3 sheet_sync.py --config sync.json push --dry-run

3. Push local catalogs (clears and rewrites every involved tab):
   python3 sheet_sync.py --config sync.json push

4. Pull reviewer edits back into the catalogs:
   python3 sheet_sync.py --config sync.json pull --log-level INFO
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Any, Dict, List, Optional

from translation_sheet_sync.config import SyncConfig
from translation_sheet_sync.exceptions import TranslationSheetError
from translation_sheet_sync.sheets_client import GoogleSheetsClient
from translation_sheet_sync.sync import SheetSyncService

logger = logging.getLogger("translation_sheet_sync")


def _configure_logging(level: str) -> None:
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(h)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


def load_config(path: pathlib.Path) -> SyncConfig:
    """Read a JSON config file; relative paths in it are relative to the file."""
    try:
        data: Dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise TranslationSheetError(f"Failed to read config {path}: {e}") from e
    base = path.resolve().parent
    config = SyncConfig.from_dict(data, defaults={"base_dir": str(base)})
    if config.base_dir and not pathlib.Path(config.base_dir).is_absolute():
        config.base_dir = str(base / config.base_dir)
    if config.credentials_file and not pathlib.Path(config.credentials_file).is_absolute():
        config.credentials_file = str(base / config.credentials_file)
    return config


def _service(config: SyncConfig, with_client: bool) -> SheetSyncService:
    client = GoogleSheetsClient(credentials_file=config.credentials_file) if with_client else None
    return SheetSyncService(config, client)


def run(args: argparse.Namespace) -> int:
    config = load_config(pathlib.Path(args.config))

    if args.command == "titles":
        service = _service(config, with_client=False)
        paths = service.discover_paths()
        for path, title in zip(paths, service.sheet_titles(paths)):
            print(f"{title}\t{path}")
        return 0

    if args.command == "push":
        dry = getattr(args, "dry_run", False)
        summary = _service(config, with_client=not dry).push(dry_run=dry)
        print(f"Sheets: {len(summary['sheets'])}, rows: {summary['rows']}, spreadsheets updated: {summary['spreadsheets']}")
        if dry:
            for title in summary["sheets"]:
                print(f"  {title}")
        return 0

    if args.command == "pull":
        summary = _service(config, with_client=True).pull()
        written: List[str] = summary["files_written"]
        print(f"Sheets read: {summary['sheets_read']}, files written: {len(written)}")
        for path in written:
            print(f"  {path}")
        return 0

    raise ValueError(f"Unknown command {args.command!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sheet-sync", description="Sync PHP translation catalogs with Google Sheets")
    ap.add_argument("--config", required=True, help="JSON config file (same keys as site_config.json)")
    ap.add_argument("--log-level", default="WARNING", help="Log level for stderr output (DEBUG, INFO, ...)")
    sub = ap.add_subparsers(dest="command", required=True)

    push = sub.add_parser("push", help="Write local catalogs to the spreadsheets (clears every involved tab)")
    push.add_argument("--dry-run", action="store_true", help="Build the sheets and report only; no remote calls")

    sub.add_parser("pull", help="Merge non-empty sheet cells back into local catalogs")
    sub.add_parser("titles", help="List catalog files and their sheet titles")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.log_level)
    try:
        return run(args)
    except TranslationSheetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

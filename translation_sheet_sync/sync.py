# -*- coding: utf-8 -*-
"""Push local catalogs to Google Sheets and pull reviewer edits back.

Push
    One sheet per source-language catalog, one row per source-language key,
    one column per configured language. For every spreadsheet: add missing
    tabs, clear every involved tab, then write header + rows in one batch.

Pull
    For every spreadsheet and catalog, read the tab and merge its non-empty
    cells into each language's catalog. Local keys missing from the sheet are
    kept; empty cells never blank out a local value.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from translation_sheet_sync.catalog import CatalogConverter
from translation_sheet_sync.config import SyncConfig
from translation_sheet_sync.exceptions import ConfigError, SheetLayoutError
from translation_sheet_sync.paths import PathResolver, spreadsheet_id_from_url
from translation_sheet_sync.sheet import HEADER_KEY, Sheet, TranslationDTO

__all__ = ["SheetSyncService", "SheetsClient"]

HEADER_ROW_INDEX = 0
KEY_RE = re.compile(r"\\?[A-Za-z_][\w\\]*::[A-Za-z_]\w*")


class SheetsClient(Protocol):
    def get_sheet_titles(self, spreadsheet_id: str) -> List[str]: ...

    def add_sheets(self, spreadsheet_id: str, titles: Sequence[str]) -> Any: ...

    def batch_clear(self, spreadsheet_id: str, titles: Sequence[str]) -> Any: ...

    def batch_update_values(self, spreadsheet_id: str, data: Sequence[Tuple[str, List[List[str]]]]) -> Any: ...

    def get_values(self, spreadsheet_id: str, title: str) -> List[List[str]]: ...


class SheetSyncService:
    def __init__(
        self,
        config: SyncConfig,
        client: Optional[SheetsClient] = None,
        *,
        converter: Optional[CatalogConverter] = None,
        resolver: Optional[PathResolver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.converter = converter or CatalogConverter()
        self.resolver = resolver or PathResolver(config.languages, config.source_language, config.base_dir)
        self.log = logger or logging.getLogger(__name__)

    @property
    def languages(self) -> List[str]:
        return list(self.config.languages)

    def _client(self) -> SheetsClient:
        if self.client is None:
            raise ConfigError("A Sheets client is required for this operation")
        return self.client

    # ---------------------
    # Local side
    # ---------------------
    def discover_paths(self) -> List[str]:
        paths = self.resolver.discover_paths(self.config.sources)
        self.log.info("discover_paths: %d catalog files", len(paths))
        return paths

    def sheet_titles(self, paths: Optional[Sequence[str]] = None) -> List[str]:
        paths = self.discover_paths() if paths is None else paths
        return [self.resolver.sheet_title(p) for p in paths]

    def build_sheet(self, path: str) -> Sheet:
        """Sheet for one catalog: source-language key order, every language filled in."""
        sheet = Sheet(self.resolver.sheet_title(path))
        source_keys = list(self.converter.read(self.resolver.source_path(path)))
        by_language = {
            lang: self.converter.read(self.resolver.sibling_path(path, lang)) for lang in self.languages
        }
        for key in source_keys:
            translations = {lang: by_language[lang].get(key) or "" for lang in self.languages}
            sheet.push(TranslationDTO(key, translations))
        self.log.debug("build_sheet: %r rows=%d", sheet.title, len(sheet))
        return sheet

    def build_sheets(self, paths: Sequence[str]) -> List[Sheet]:
        return [self.build_sheet(p) for p in paths]

    # ---------------------
    # Push
    # ---------------------
    def push(self, paths: Optional[Sequence[str]] = None, *, dry_run: bool = False) -> Dict[str, Any]:
        paths = self.discover_paths() if paths is None else list(paths)
        sheets = self.build_sheets(paths)
        summary: Dict[str, Any] = {
            "spreadsheets": 0,
            "sheets": [s.title for s in sheets],
            "rows": sum(len(s) for s in sheets),
            "dry_run": bool(dry_run),
        }
        if dry_run:
            self.log.info("push(dry_run): %d sheets, %d rows", len(sheets), summary["rows"])
            return summary
        if not sheets:
            self.log.info("push: nothing to push")
            return summary

        client = self._client()
        for url in self.config.spreadsheet_urls:
            spreadsheet_id = spreadsheet_id_from_url(url)
            self._push_to_spreadsheet(client, spreadsheet_id, sheets)
            summary["spreadsheets"] += 1
        return summary

    def _push_to_spreadsheet(self, client: SheetsClient, spreadsheet_id: str, sheets: Sequence[Sheet]) -> None:
        existing = set(client.get_sheet_titles(spreadsheet_id))
        missing = [s.title for s in sheets if s.title not in existing]
        if missing:
            self.log.info("push: spreadsheet=%s adding %d tabs", spreadsheet_id, len(missing))
            client.add_sheets(spreadsheet_id, missing)

        # clear must be issued before the update of the same tabs
        client.batch_clear(spreadsheet_id, [s.title for s in sheets])

        data = [(s.title, s.to_values(self.languages)) for s in sheets if not s.is_empty()]
        if data:
            client.batch_update_values(spreadsheet_id, data)
        self.log.info("push: spreadsheet=%s sheets=%d written=%d", spreadsheet_id, len(sheets), len(data))

    # ---------------------
    # Pull
    # ---------------------
    def pull(self, paths: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        paths = self.discover_paths() if paths is None else list(paths)
        client = self._client()
        summary: Dict[str, Any] = {"spreadsheets": 0, "sheets_read": 0, "files_written": []}

        for url in self.config.spreadsheet_urls:
            spreadsheet_id = spreadsheet_id_from_url(url)
            for path in paths:
                title = self.resolver.sheet_title(path)
                values = client.get_values(spreadsheet_id, title)
                remote = self.translations_from_values(values, title=title)
                if not remote:
                    self.log.debug("pull: %r is empty on %s", title, spreadsheet_id)
                    continue
                summary["sheets_read"] += 1
                summary["files_written"].extend(self.merge_into_files(path, remote))
            summary["spreadsheets"] += 1

        self.log.info(
            "pull: spreadsheets=%d sheets=%d files_written=%d",
            summary["spreadsheets"],
            summary["sheets_read"],
            len(summary["files_written"]),
        )
        return summary

    def translations_from_values(
        self, values: Sequence[Sequence[Any]], *, title: str = ""
    ) -> Dict[str, Dict[str, str]]:
        """``{language: {key: value}}`` from a tab's rows, non-empty cells only.

        Keys are stripped; a key that is not ``Class::CONST`` raises
        ``SheetLayoutError`` instead of reaching a catalog file.
        """
        if not values:
            return {}
        header = [str(cell) for cell in values[HEADER_ROW_INDEX]]
        if HEADER_KEY not in header:
            raise SheetLayoutError(f"Sheet {title!r} has no {HEADER_KEY!r} column in its header row")
        key_index = header.index(HEADER_KEY)

        rows: List[Tuple[str, Sequence[Any]]] = []
        for number, row in enumerate(values[HEADER_ROW_INDEX + 1:], start=HEADER_ROW_INDEX + 2):
            key = str(row[key_index]).strip() if len(row) > key_index else ""
            if not key:
                continue
            if not KEY_RE.fullmatch(key):
                raise SheetLayoutError(
                    f"Sheet {title!r} row {number} has key {key!r}; expected ClassName::CONST"
                )
            rows.append((key, row))

        result: Dict[str, Dict[str, str]] = {}
        for lang in self.languages:
            if lang not in header:
                self.log.warning("pull: sheet %r has no column for %s; skipping it", title, lang)
                continue
            index = header.index(lang)
            translations: Dict[str, str] = {}
            for key, row in rows:
                value = str(row[index]) if len(row) > index else ""
                if value != "":
                    translations[key] = value
            result[lang] = translations
        return result

    def merge_into_files(self, path: str, remote: Dict[str, Dict[str, str]]) -> List[str]:
        """Overlay remote values on each language's catalog; returns the files rewritten."""
        written: List[str] = []
        for lang in self.languages:
            if lang not in remote:
                continue
            target = self.resolver.sibling_path(path, lang)
            local = self.converter.read(target)
            merged = dict(local)
            merged.update(remote[lang])
            if list(merged.items()) == list(local.items()):
                self.log.debug("pull: %s unchanged", target)
                continue
            self.converter.write(target, merged)
            self.log.info("pull: wrote %s (%d keys)", target, len(merged))
            written.append(target)
        return written

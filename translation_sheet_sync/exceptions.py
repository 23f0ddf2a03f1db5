# -*- coding: utf-8 -*-
"""Error taxonomy shared by the sync engine, the Sheets client and the app layer."""
from __future__ import annotations

from typing import Optional

__all__ = [
    "TranslationSheetError",
    "ConfigError",
    "PathError",
    "CatalogParseError",
    "UrlError",
    "SheetLayoutError",
]


class TranslationSheetError(Exception):
    """Base exception for translation sheet sync."""


class ConfigError(TranslationSheetError):
    """Raised when configuration is missing or invalid."""


class PathError(TranslationSheetError):
    """Raised when catalog files cannot be located or a path has no language segment."""


class CatalogParseError(TranslationSheetError):
    """Raised when a catalog file is structurally invalid."""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.path = path
        self.line = line


class UrlError(TranslationSheetError):
    """Raised when a spreadsheet URL carries no spreadsheet id."""


class SheetLayoutError(TranslationSheetError):
    """Raised when a remote sheet has no recognisable header row."""

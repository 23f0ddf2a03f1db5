# -*- coding: utf-8 -*-
"""Sync configuration.

Keys (site_config.json inside a bench, or a JSON file for the CLI; the
``translation_sheet_`` prefix is optional in the CLI file):

- translation_sheet_languages (list, required): ordered language codes, e.g. ["ru_RU", "en_US"]
- translation_sheet_source_language (string, required): language whose keys define the rows
- translation_sheet_urls (list, optional): Google spreadsheet URLs to sync with
- translation_sheet_sources (dict, required): category -> {"base_path": ..., "file_map": [...]}
- translation_sheet_base_dir (string, optional): root for relative base paths
- translation_sheet_credentials (string, optional): service-account JSON key file
"""
from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Mapping, Optional

from translation_sheet_sync.exceptions import ConfigError
from translation_sheet_sync.paths import LANGUAGE_RE

__all__ = ["SyncConfig", "CONFIG_PREFIX"]

CONFIG_PREFIX = "translation_sheet_"

_FIELDS = {
    "languages": "languages",
    "source_language": "source_language",
    "urls": "spreadsheet_urls",
    "sources": "sources",
    "base_dir": "base_dir",
    "credentials": "credentials_file",
}


@dataclasses.dataclass
class SyncConfig:
    languages: List[str]
    source_language: str
    sources: Dict[str, Any]
    spreadsheet_urls: List[str] = dataclasses.field(default_factory=list)
    base_dir: Optional[str] = None
    credentials_file: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.languages:
            raise ConfigError("At least one language is required")
        for lang in self.languages:
            if not isinstance(lang, str) or not LANGUAGE_RE.fullmatch(lang):
                raise ConfigError(f"Language code {lang!r} does not look like 'en_US'")
        if len(set(self.languages)) != len(self.languages):
            raise ConfigError("Languages must be unique")
        if self.source_language not in self.languages:
            raise ConfigError(
                f"Source language {self.source_language!r} is not one of the languages {self.languages}"
            )
        if not isinstance(self.sources, Mapping):
            raise ConfigError("sources must be a mapping of category -> source group")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, defaults: Optional[Mapping[str, Any]] = None) -> "SyncConfig":
        """Build a config from prefixed or plain keys; ``defaults`` fill the gaps."""
        values: Dict[str, Any] = {}
        for key, attr in _FIELDS.items():
            if CONFIG_PREFIX + key in data:
                values[attr] = data[CONFIG_PREFIX + key]
            elif key in data:
                values[attr] = data[key]
            elif defaults and key in defaults:
                values[attr] = defaults[key]

        missing = [k for k in ("languages", "source_language", "sources") if _FIELDS[k] not in values]
        if missing:
            raise ConfigError(
                "Missing " + " / ".join(CONFIG_PREFIX + k for k in missing) + " in configuration"
            )

        urls = values.get("spreadsheet_urls") or []
        if isinstance(urls, str):
            urls = [urls]
        values["spreadsheet_urls"] = list(urls)
        values["languages"] = list(values["languages"] or [])
        return cls(**values)

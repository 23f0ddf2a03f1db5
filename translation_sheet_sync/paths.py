# -*- coding: utf-8 -*-
"""Catalog path handling.

Every catalog path carries exactly one language segment such as ``ru_RU``::

    apps/shop/messages/ru_RU/errors.php

Swapping that segment gives the same catalog in another language, replacing it
with ``<language>`` (and dropping the extension) gives the sheet title shared
by all languages. Under a ``base_dir`` only the part of the path below it is
considered, so titles do not depend on where the tree is checked out::

    base_dir=/srv/bench/apps  ->  shop/messages/<language>/errors
"""
from __future__ import annotations

import logging
import os
import pathlib
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from translation_sheet_sync.exceptions import PathError, UrlError

__all__ = [
    "PathResolver",
    "spreadsheet_id_from_url",
    "LANGUAGE_RE",
    "LANGUAGE_PLACEHOLDER",
    "CATALOG_EXTENSION",
]

LANGUAGE_RE = re.compile(r"[a-z]{2}_[A-Z]{2}")
SPREADSHEET_ID_RE = re.compile(r"spreadsheets/d/([a-zA-Z0-9\-_]+)")
LANGUAGE_PLACEHOLDER = "<language>"
CATALOG_EXTENSION = ".php"
ALIAS_MARKER = "@"

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def spreadsheet_id_from_url(url: str) -> str:
    """Extract the spreadsheet id from a ``.../spreadsheets/d/<id>/...`` URL."""
    m = SPREADSHEET_ID_RE.search(url or "")
    if not m:
        raise UrlError(f"Spreadsheet id not found in url {url!r}")
    return m.group(1)


class PathResolver:
    def __init__(self, languages: Sequence[str], source_language: str, base_dir: Optional[PathLike] = None) -> None:
        self.languages = list(languages)
        self.source_language = source_language
        self.base_dir = pathlib.Path(base_dir) if base_dir else None

    # ---------------------
    # Language segment
    # ---------------------
    def _split_base(self, path: PathLike) -> Tuple[Optional[pathlib.Path], str]:
        """``(base_dir, rest)`` when ``path`` lies under ``base_dir``, else ``(None, path)``."""
        text = str(path)
        if self.base_dir is not None:
            try:
                return self.base_dir, pathlib.PurePath(text).relative_to(self.base_dir).as_posix()
            except ValueError:
                pass
        return None, text

    def _single_match(self, path: str) -> re.Match:
        matches = list(LANGUAGE_RE.finditer(path))
        if len(matches) != 1:
            raise PathError(
                f"Path {path} must contain exactly one language segment like 'en_US', found {len(matches)}"
            )
        return matches[0]

    def language_of(self, path: PathLike) -> str:
        _, rest = self._split_base(path)
        return self._single_match(rest).group(0)

    def _replace_language(self, rest: str, replacement: str) -> str:
        m = self._single_match(rest)
        return rest[:m.start()] + replacement + rest[m.end():]

    def sibling_path(self, path: PathLike, language: str) -> str:
        """Path of the same catalog in ``language``."""
        if not LANGUAGE_RE.fullmatch(language):
            raise PathError(f"Language code {language!r} does not look like 'en_US'")
        base, rest = self._split_base(path)
        swapped = self._replace_language(rest, language)
        return str(base / swapped) if base is not None else swapped

    def source_path(self, path: PathLike) -> str:
        return self.sibling_path(path, self.source_language)

    def sheet_title(self, path: PathLike) -> str:
        """Language-independent title: language segment -> placeholder, extension stripped.

        Paths under ``base_dir`` are titled by their part below it, so every
        checkout of the same tree maps to the same tabs.
        """
        _, rest = self._split_base(path)
        title = self._replace_language(rest, LANGUAGE_PLACEHOLDER)
        if title.endswith(CATALOG_EXTENSION):
            title = title[: -len(CATALOG_EXTENSION)]
        return title

    # ---------------------
    # Discovery
    # ---------------------
    def _resolve_base(self, base_path: str) -> pathlib.Path:
        base = pathlib.Path(base_path.lstrip(ALIAS_MARKER))
        if not base.is_absolute() and self.base_dir is not None:
            base = self.base_dir / base
        return base

    @staticmethod
    def _file_map_names(file_map: Any) -> List[str]:
        if isinstance(file_map, Mapping):
            return [str(v) for v in file_map.values()]
        if isinstance(file_map, str):
            return [file_map]
        return [str(v) for v in file_map]

    def _paths_for_category(self, category: str, group: Mapping[str, Any]) -> List[str]:
        language_dir = self._resolve_base(str(group["base_path"])) / self.source_language
        category_dir = language_dir / category if category else language_dir
        category_file = pathlib.Path(f"{category_dir}{CATALOG_EXTENSION}")

        if category_dir.is_dir():
            names = sorted(
                p.name for p in category_dir.iterdir() if p.is_file() and not p.name.startswith(".")
            )
            return [str(category_dir / name) for name in names]
        if group.get("file_map"):
            return [str(language_dir / name) for name in self._file_map_names(group["file_map"])]
        if category_file.is_file():
            return [str(category_file)]
        raise PathError(f"Unable to locate message source for category {category}.")

    def discover_paths(self, sources: Mapping[str, Any]) -> List[str]:
        """Source-language catalog paths for every configured source group, de-duplicated."""
        paths: List[str] = []
        for raw_category, group in sources.items():
            if not isinstance(group, Mapping) or not group.get("base_path"):
                logger.debug("discover_paths: skipping %r (no base_path)", raw_category)
                continue
            category = str(raw_category).replace("*", "")
            found = self._paths_for_category(category, group)
            logger.debug("discover_paths: %r -> %d files", raw_category, len(found))
            paths.extend(found)
        return _unique(paths)


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out

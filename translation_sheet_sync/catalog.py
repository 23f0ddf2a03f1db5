# -*- coding: utf-8 -*-
"""Read and write translation catalog files."""
from __future__ import annotations

import logging
import os
import pathlib
import tempfile
from typing import Dict, Mapping, Optional, Union

from translation_sheet_sync.catalog_parser import parse_catalog
from translation_sheet_sync.exceptions import PathError
from translation_sheet_sync.literal import to_literal

__all__ = ["CatalogConverter", "render_catalog", "atomic_write"]

NEWLINE = "\n"
INDENT = "    "
MAP_OPEN = "return ["
MAP_CLOSE = "];"

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def render_catalog(header: str, translations: Mapping[str, Optional[str]]) -> str:
    """Build catalog source: header, then one ``key => literal,`` line per entry."""
    out = [header.strip(), NEWLINE, NEWLINE, MAP_OPEN, NEWLINE]
    for key, value in translations.items():
        out.append(f"{INDENT}{key} => {to_literal(value)},{NEWLINE}")
    out.append(MAP_CLOSE + NEWLINE)
    return "".join(out)


def atomic_write(path: pathlib.Path, data: str) -> None:
    """Atomically write ``data`` to ``path``, keeping the target's permission bits."""
    tmp_dir = path.parent
    tmp_dir.mkdir(parents=True, exist_ok=True)
    orig_mode = None
    try:
        orig_mode = path.stat().st_mode & 0o777
    except OSError:
        pass

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile("w", delete=False, dir=tmp_dir, encoding="utf-8", newline=NEWLINE) as tf:
            tmp_name = tf.name
            tf.write(data)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(tmp_name, str(path))
        tmp_name = None
        if orig_mode is not None:
            try:
                os.chmod(str(path), orig_mode)
            except OSError:
                logger.debug("Failed to chmod %s", path)
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


class CatalogConverter:
    """Converts catalog files to ordered key/value maps and back."""

    def read_source(self, path: PathLike) -> str:
        p = pathlib.Path(path)
        if not p.is_file():
            raise PathError(f"Translation not found by path {p}")
        return p.read_text(encoding="utf-8")

    def read(self, path: PathLike) -> Dict[str, Optional[str]]:
        """Return the catalog at ``path`` as an ordered ``key -> value`` map."""
        parsed = parse_catalog(self.read_source(path), str(path))
        logger.debug("read %s: %d keys", path, len(parsed.keys))
        return dict(zip(parsed.keys, parsed.values))

    def header(self, path: PathLike) -> str:
        """Everything in the catalog before its map literal, stripped."""
        return parse_catalog(self.read_source(path), str(path)).header

    def to_string(self, path: PathLike, translations: Mapping[str, Optional[str]]) -> str:
        return render_catalog(self.header(path), translations)

    def write(
        self,
        path: PathLike,
        translations: Mapping[str, Optional[str]],
        *,
        header_from: Optional[PathLike] = None,
    ) -> None:
        """Rewrite the catalog at ``path`` keeping its header.

        ``header_from`` names another catalog to take the header from, which is
        needed when ``path`` does not exist yet.
        """
        data = self.to_string(header_from or path, translations)
        atomic_write(pathlib.Path(path), data)
        logger.debug("wrote %s: %d keys", path, len(translations))

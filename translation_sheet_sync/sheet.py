# -*- coding: utf-8 -*-
from __future__ import annotations

import dataclasses
from typing import Dict, Iterator, List, Optional, Sequence

HEADER_KEY = "Key"


@dataclasses.dataclass
class TranslationDTO:
    """One sheet row: a catalog key and its value in every language."""

    key: str
    translations: Dict[str, str] = dataclasses.field(default_factory=dict)

    def translation_for(self, language: str) -> str:
        return self.translations.get(language) or ""

    def as_row(self, languages: Sequence[str]) -> List[str]:
        return [self.key] + [self.translation_for(lang) for lang in languages]


class Sheet:
    """Ordered rows mirrored to one remote tab.

    Iterating a sheet does not touch its cursor; ``current``/``advance``/``rewind``
    serve callers that walk it once by hand.
    """

    def __init__(self, title: str, rows: Optional[Sequence[TranslationDTO]] = None) -> None:
        self.title = title
        self._rows: List[TranslationDTO] = list(rows or [])
        self.position = 0

    def __repr__(self) -> str:
        return f"Sheet(title={self.title!r}, rows={len(self._rows)})"

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[TranslationDTO]:
        return iter(list(self._rows))

    @property
    def rows(self) -> List[TranslationDTO]:
        return list(self._rows)

    def push(self, row: TranslationDTO) -> None:
        self._rows.append(row)

    def current(self) -> Optional[TranslationDTO]:
        if 0 <= self.position < len(self._rows):
            return self._rows[self.position]
        return None

    def advance(self) -> None:
        self.position += 1

    def rewind(self) -> None:
        self.position = 0

    def count(self) -> int:
        return len(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def to_values(self, languages: Sequence[str]) -> List[List[str]]:
        """Header row (``Key`` + languages) followed by one row per key."""
        values: List[List[str]] = [[HEADER_KEY] + list(languages)]
        values.extend(row.as_row(languages) for row in self._rows)
        return values


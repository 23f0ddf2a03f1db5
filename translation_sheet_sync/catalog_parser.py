# -*- coding: utf-8 -*-
"""Catalog file scanner.

A catalog is a PHP file that returns a map literal keyed by class constants::

    <?php

    use App\\Messages\\Errors;

    return [
        Errors::NOT_FOUND => 'Not found',
        Errors::FORBIDDEN => "Don't",
    ];

The scanner only understands as much of the language as it needs to:
strings, comments, identifiers, ``::`` and ``=>``. Keys are recovered from the
token stream (``Class::CONST`` followed by whitespace and ``=>``), values from
the top-level entries of the returned map. Both lists must line up one to one.
"""
from __future__ import annotations

import dataclasses
import re
from typing import List, Optional

from translation_sheet_sync.exceptions import CatalogParseError
from translation_sheet_sync.literal import decode_double_quoted, decode_single_quoted

__all__ = [
    "Token",
    "ParsedCatalog",
    "tokenize",
    "extract_keys",
    "read_values",
    "parse_catalog",
    "KEY_SEPARATOR",
]

KEY_SEPARATOR = "::"

# Token kinds
INLINE = "inline"
OPEN_TAG = "open_tag"
WHITESPACE = "whitespace"
COMMENT = "comment"
SQ_STRING = "sq_string"
DQ_STRING = "dq_string"
IDENT = "ident"
VARIABLE = "variable"
NUMBER = "number"
DOUBLE_COLON = "double_colon"
DOUBLE_ARROW = "double_arrow"
PUNCT = "punct"

_SKIPPABLE = (WHITESPACE, COMMENT)

_OPEN_TAG_RE = re.compile(r"<\?(?:php\b|=)", re.I)
_WHITESPACE_RE = re.compile(r"[ \t\r\n]+")
_LINE_COMMENT_RE = re.compile(r"(?://|#)[^\r\n]*")
_SQ_STRING_RE = re.compile(r"'(?:[^'\\]|\\.)*'", re.S)
_DQ_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"', re.S)
_IDENT_RE = re.compile(r"\\?[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*(?:\\[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*)*")
_VARIABLE_RE = re.compile(r"\$[A-Za-z_\x80-\uffff][A-Za-z0-9_\x80-\uffff]*")
_NUMBER_RE = re.compile(r"0[xX][0-9A-Fa-f_]+|0[bB][01_]+|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?")

_OPENERS = {"[": "]", "(": ")", "{": "}"}
_CLOSERS = set(_OPENERS.values())


@dataclasses.dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    pos: int


@dataclasses.dataclass
class ParsedCatalog:
    keys: List[str]
    values: List[Optional[str]]
    header: str


def _where(path: Optional[str]) -> str:
    return f"File {path}" if path else "Catalog source"


def tokenize(source: str, path: Optional[str] = None) -> List[Token]:
    """Split ``source`` into tokens carrying 1-based line numbers."""
    tokens: List[Token] = []
    pos = 0
    line = 1
    n = len(source)

    def emit(kind: str, end: int) -> None:
        nonlocal pos, line
        text = source[pos:end]
        tokens.append(Token(kind, text, line, pos))
        line += text.count("\n")
        pos = end

    m = _OPEN_TAG_RE.search(source)
    if not m:
        if source:
            emit(INLINE, n)
        return tokens
    if m.start() > 0:
        emit(INLINE, m.start())
    emit(OPEN_TAG, m.end())

    while pos < n:
        ch = source[pos]
        nxt = source[pos + 1] if pos + 1 < n else ""

        if ch in " \t\r\n":
            emit(WHITESPACE, _WHITESPACE_RE.match(source, pos).end())
        elif (ch == "#" and nxt != "[") or (ch == "/" and nxt == "/"):
            emit(COMMENT, _LINE_COMMENT_RE.match(source, pos).end())
        elif ch == "/" and nxt == "*":
            end = source.find("*/", pos + 2)
            if end == -1:
                raise CatalogParseError(
                    f"{_where(path)} has an unterminated comment on line {line}.", path=path, line=line
                )
            emit(COMMENT, end + 2)
        elif ch == "'" or ch == '"':
            rx = _SQ_STRING_RE if ch == "'" else _DQ_STRING_RE
            sm = rx.match(source, pos)
            if not sm:
                raise CatalogParseError(
                    f"{_where(path)} has an unterminated string on line {line}.", path=path, line=line
                )
            emit(SQ_STRING if ch == "'" else DQ_STRING, sm.end())
        elif ch == ":" and nxt == ":":
            emit(DOUBLE_COLON, pos + 2)
        elif ch == "=" and nxt == ">":
            emit(DOUBLE_ARROW, pos + 2)
        elif ch == "$" and _VARIABLE_RE.match(source, pos):
            emit(VARIABLE, _VARIABLE_RE.match(source, pos).end())
        elif (ch.isdigit() or (ch == "." and nxt.isdigit())) and _NUMBER_RE.match(source, pos):
            emit(NUMBER, _NUMBER_RE.match(source, pos).end())
        elif _IDENT_RE.match(source, pos):
            emit(IDENT, _IDENT_RE.match(source, pos).end())
        else:
            emit(PUNCT, pos + 1)

    return tokens


def extract_keys(tokens: List[Token], path: Optional[str] = None) -> List[str]:
    """Recover ``Class::CONST`` keys in declaration order.

    Every ``::`` must sit between two names and be followed by whitespace and
    ``=>``; anything else means the file was not written in catalog style.
    """
    keys: List[str] = []
    seen = set()
    for i, tok in enumerate(tokens):
        if tok.kind != DOUBLE_COLON:
            continue

        group = tokens[i - 1] if i > 0 else None
        name = tokens[i + 1] if i + 1 < len(tokens) else None
        space = tokens[i + 2] if i + 2 < len(tokens) else None
        arrow = tokens[i + 3] if i + 3 < len(tokens) else None
        line = name.line if name is not None else tok.line

        well_formed = (
            group is not None and group.kind == IDENT
            and name is not None and name.kind == IDENT
            and space is not None and space.kind == WHITESPACE
            and arrow is not None and arrow.kind == DOUBLE_ARROW
        )
        if not well_formed:
            raise CatalogParseError(
                f"{_where(path)} has errors on line {line}. "
                'After key "ClassName::CONST" there must be one whitespace and "=>".',
                path=path,
                line=line,
            )

        key = f"{group.text}{KEY_SEPARATOR}{name.text}"
        if key in seen:
            raise CatalogParseError(
                f"{_where(path)} declares key {key} twice (line {line}).", path=path, line=line
            )
        seen.add(key)
        keys.append(key)
    return keys


def _significant(tokens: List[Token], start: int) -> int:
    i = start
    while i < len(tokens) and tokens[i].kind in _SKIPPABLE:
        i += 1
    return i


def _find_return(tokens: List[Token]) -> Optional[int]:
    for i, tok in enumerate(tokens):
        if tok.kind == IDENT and tok.text.lower() == "return":
            return i
    return None


def _decode_value(entry: List[Token], path: Optional[str]) -> Optional[str]:
    """Decode the scalar expression of one map entry."""
    line = entry[0].line
    if len(entry) == 1 and entry[0].kind == IDENT:
        word = entry[0].text.lower()
        if word == "null":
            return None
        if word == "true":
            return "1"
        if word == "false":
            return ""
    if entry[-1].kind == NUMBER and all(t.kind == PUNCT and t.text in "+-" for t in entry[:-1]):
        return "".join(t.text for t in entry).replace("_", "")

    # string literal, optionally concatenated with "."
    parts: List[str] = []
    expect_string = True
    for tok in entry:
        if expect_string and tok.kind == SQ_STRING:
            parts.append(decode_single_quoted(tok.text[1:-1]))
        elif expect_string and tok.kind == DQ_STRING:
            try:
                parts.append(decode_double_quoted(tok.text[1:-1]))
            except ValueError as e:
                raise CatalogParseError(
                    f"{_where(path)} has a bad escape on line {tok.line}: {e}.", path=path, line=tok.line
                ) from e
        elif not expect_string and tok.kind == PUNCT and tok.text == ".":
            pass
        else:
            raise CatalogParseError(
                f"{_where(path)} has an unsupported value on line {tok.line}: {tok.text!r}.",
                path=path,
                line=tok.line,
            )
        expect_string = not expect_string
    if expect_string:
        raise CatalogParseError(
            f"{_where(path)} has an incomplete value on line {line}.", path=path, line=line
        )
    return "".join(parts)


def _split_entries(tokens: List[Token], start: int, closer: str, path: Optional[str]) -> List[List[Token]]:
    entries: List[List[Token]] = []
    current: List[Token] = []
    stack: List[str] = []
    i = start
    while i < len(tokens):
        tok = tokens[i]
        i += 1
        if tok.kind in _SKIPPABLE:
            continue
        if tok.kind == PUNCT and tok.text in _OPENERS:
            stack.append(_OPENERS[tok.text])
        elif tok.kind == PUNCT and tok.text in _CLOSERS:
            if not stack:
                if tok.text != closer:
                    raise CatalogParseError(
                        f"{_where(path)} has an unexpected {tok.text!r} on line {tok.line}.",
                        path=path,
                        line=tok.line,
                    )
                if current:
                    entries.append(current)
                return entries
            if stack.pop() != tok.text:
                raise CatalogParseError(
                    f"{_where(path)} has an unexpected {tok.text!r} on line {tok.line}.",
                    path=path,
                    line=tok.line,
                )
        elif tok.kind == PUNCT and tok.text == "," and not stack:
            if not current:
                raise CatalogParseError(
                    f"{_where(path)} has an empty entry on line {tok.line}.", path=path, line=tok.line
                )
            entries.append(current)
            current = []
            continue
        current.append(tok)

    last_line = tokens[-1].line if tokens else 1
    raise CatalogParseError(
        f"{_where(path)} ends before the translation map is closed (line {last_line}).",
        path=path,
        line=last_line,
    )


def _entry_value_tokens(entry: List[Token]) -> List[Token]:
    depth = 0
    for i, tok in enumerate(entry):
        if tok.kind == PUNCT and tok.text in _OPENERS:
            depth += 1
        elif tok.kind == PUNCT and tok.text in _CLOSERS:
            depth -= 1
        elif tok.kind == DOUBLE_ARROW and depth == 0:
            return entry[i + 1:]
    return entry


def read_values(tokens: List[Token], path: Optional[str] = None) -> List[Optional[str]]:
    """Return the values of the returned map literal, in order.

    A file that does not return a map literal has no values.
    """
    ret = _find_return(tokens)
    if ret is None:
        return []

    i = _significant(tokens, ret + 1)
    if i >= len(tokens):
        return []
    tok = tokens[i]
    if tok.kind == PUNCT and tok.text == "[":
        entries = _split_entries(tokens, i + 1, "]", path)
    elif tok.kind == IDENT and tok.text.lower() == "array":
        j = _significant(tokens, i + 1)
        if j >= len(tokens) or tokens[j].text != "(":
            return []
        entries = _split_entries(tokens, j + 1, ")", path)
    else:
        return []

    values: List[Optional[str]] = []
    for entry in entries:
        value_tokens = _entry_value_tokens(entry)
        if not value_tokens:
            raise CatalogParseError(
                f"{_where(path)} has an entry without a value on line {entry[0].line}.",
                path=path,
                line=entry[0].line,
            )
        values.append(_decode_value(value_tokens, path))
    return values


def _header(source: str, tokens: List[Token]) -> str:
    ret = _find_return(tokens)
    end = tokens[ret].pos if ret is not None else len(source)
    return source[:end].strip()


def parse_catalog(source: str, path: Optional[str] = None) -> ParsedCatalog:
    """Scan a catalog and check that keys and values line up."""
    tokens = tokenize(source, path)
    keys = extract_keys(tokens, path)
    values = read_values(tokens, path)
    if len(keys) != len(values):
        raise CatalogParseError(
            f"{_where(path)} has errors or is empty: {len(keys)} keys but {len(values)} values.",
            path=path,
        )
    return ParsedCatalog(keys=keys, values=values, header=_header(source, tokens))

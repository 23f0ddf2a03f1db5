# -*- coding: utf-8 -*-
"""Catalog literal rendering and decoding.

Values are written as single-quoted literals whenever that is safe, which is
the style translators read most easily. Anything that would need escaping
inside single quotes (quotes, backslashes, line breaks) or that carries
pictographs is written as a JSON string instead: unicode is kept as-is and
slashes are not escaped, and the result is still a valid double-quoted
catalog literal.
"""
from __future__ import annotations

import json
import re
from typing import Any, Optional

__all__ = ["to_literal", "decode_single_quoted", "decode_double_quoted"]

NULL_LITERAL = "null"
EMPTY_LITERAL = "''"

_NEEDS_ENCODING_RE = re.compile(r"['\"\\\r\n]")
_PICTOGRAPH_RE = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map
    "\u2600-\u26FF"  # misc symbols
    "\u2700-\u27BF"  # dingbats
    "]"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "b": "\b",
    "\\": "\\",
    "$": "$",
    '"': '"',
    "/": "/",
}
_OCTAL_DIGITS = "01234567"
_HEX_DIGITS = "0123456789abcdefABCDEF"
MAX_CODE_POINT = 0x10FFFF


def has_pictograph(text: str) -> bool:
    return bool(_PICTOGRAPH_RE.search(text))


def _needs_encoding(text: str) -> bool:
    return bool(_NEEDS_ENCODING_RE.search(text)) or has_pictograph(text)


def to_literal(value: Any) -> str:
    """Render ``value`` as a catalog literal."""
    if value is None:
        return NULL_LITERAL
    text = value if isinstance(value, str) else str(value)
    if text == "":
        return EMPTY_LITERAL
    if _needs_encoding(text):
        return json.dumps(text, ensure_ascii=False)
    return f"'{text}'"


def decode_single_quoted(body: str) -> str:
    """Decode the inside of a single-quoted literal (only ``\\\\`` and ``\\'`` are escapes)."""
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\" and i + 1 < n and body[i + 1] in ("\\", "'"):
            out.append(body[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _read_json_unicode(body: str, i: int) -> Optional[int]:
    """Return the code unit of a ``\\uXXXX`` escape starting at ``body[i]`` (the ``u``)."""
    digits = body[i + 1:i + 5]
    if len(digits) == 4 and all(c in _HEX_DIGITS for c in digits):
        return int(digits, 16)
    return None


def decode_double_quoted(body: str) -> str:
    """Decode the inside of a double-quoted literal.

    Accepts the catalog language's double-quote escapes and JSON ``\\uXXXX``
    escapes (surrogate pairs included). Unknown escapes are kept verbatim;
    a malformed ``\\u{...}`` escape raises ``ValueError``.
    """
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch != "\\" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue

        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt in _OCTAL_DIGITS:
            j = i + 1
            while j < n and j < i + 4 and body[j] in _OCTAL_DIGITS:
                j += 1
            out.append(chr(int(body[i + 1:j], 8) & 0xFF))
            i = j
        elif nxt == "x" and i + 2 < n and body[i + 2] in _HEX_DIGITS:
            j = i + 2
            while j < n and j < i + 4 and body[j] in _HEX_DIGITS:
                j += 1
            out.append(chr(int(body[i + 2:j], 16)))
            i = j
        elif nxt == "u" and i + 2 < n and body[i + 2] == "{":
            end = body.find("}", i + 3)
            if end == -1:
                out.append(body[i:i + 2])
                i += 2
            else:
                digits = body[i + 3:end]
                if not digits or any(c not in _HEX_DIGITS for c in digits):
                    raise ValueError(f"invalid unicode escape \\u{{{digits}}}")
                code = int(digits, 16)
                if code > MAX_CODE_POINT:
                    raise ValueError(f"unicode escape \\u{{{digits}}} is beyond U+10FFFF")
                out.append(chr(code))
                i = end + 1
        elif nxt == "u" and _read_json_unicode(body, i + 1) is not None:
            unit = _read_json_unicode(body, i + 1) or 0
            i += 6
            # high surrogate followed by a low surrogate
            if 0xD800 <= unit <= 0xDBFF and body[i:i + 2] == "\\u":
                low = _read_json_unicode(body, i + 1)
                if low is not None and 0xDC00 <= low <= 0xDFFF:
                    unit = 0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            out.append(chr(unit))
        else:
            out.append(body[i:i + 2])
            i += 2
    return "".join(out)

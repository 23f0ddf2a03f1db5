"""Small helpers for log lines: secret masking and compact JSON."""
from __future__ import annotations

import json
from typing import Any, Optional


def mask_token(tok: Optional[str], *, keep: int = 6) -> str:
    """Mask a token/secret for logs, keeping first `keep` chars."""
    if not tok:
        return "<none>"
    t = str(tok)
    if len(t) <= keep:
        return "*" * len(t)
    return t[:keep] + "…" + ("*" * max(0, len(t) - keep - 1))


def compact_json(obj: Any, limit: int = 1200) -> str:
    """Compact JSON string for logging; truncate if too long."""
    try:
        s = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        s = str(obj)
    return s if len(s) <= limit else s[:limit] + "…(truncated)"

# FILE: translation_sheet_sync/utils/logging.py
"""
Logging helpers for Translation Sheet Sync (Frappe v15+)

- Uses frappe.utils.logger.get_logger to create a site-scoped rotating log.
- Honors log level from site_config.json via "translation_sheet_log_level" (e.g. "INFO", "DEBUG").
- Re-exports the compact JSON helper used in log lines.
"""

import logging

import frappe
from frappe.utils.logger import get_logger

from translation_sheet_sync.utils.formatting import compact_json

__all__ = ["get_sync_logger", "compact_json"]

LOGGER_NAME = "translation_sheet_sync"


def _level_from_string(level_str: str, default: int = logging.INFO) -> int:
    """Map string level to logging constant; defaults to INFO on unknown."""
    level = getattr(logging, str(level_str).upper(), None)
    return level if isinstance(level, int) else default


def _level_from_site_config(default: int = logging.INFO) -> int:
    """Read desired log level from site_config.json (key: translation_sheet_log_level)."""
    cfg = frappe.get_site_config() or {}
    val = cfg.get("translation_sheet_log_level")
    return _level_from_string(val, default) if val else default


def get_sync_logger(
    name: str = LOGGER_NAME,
    *,
    file_count: int = 5,
    default_level: int = logging.INFO,
) -> logging.Logger:
    """
    Create or return a site-scoped rotating logger.

    Frappe get_logger() writes to sites/<site>/logs/<name>.log and rotates with file_count.
    """
    logger = get_logger(name, file_count=file_count)
    logger.setLevel(_level_from_site_config(default=default_level))
    return logger

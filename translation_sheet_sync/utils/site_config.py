from pathlib import Path

import frappe

from translation_sheet_sync.config import SyncConfig
from translation_sheet_sync.exceptions import ConfigError
from translation_sheet_sync.sheets_client import GoogleSheetsClient
from translation_sheet_sync.sync import SheetSyncService

from .logging import get_sync_logger


def _apps_root() -> Path:
    """Return the bench 'apps' directory for the current process."""
    # frappe.get_app_path("frappe") → /.../apps/frappe/frappe
    return Path(frappe.get_app_path("frappe")).parent.parent


def _site_path(value: str) -> str:
    """Resolve a site-relative path (e.g. "private/keys/sheets.json") against the site dir."""
    p = Path(value)
    return str(p if p.is_absolute() else Path(frappe.get_site_path(value)))


def get_sync_config() -> SyncConfig:
    """Read translation_sheet_* keys from site_config.json."""
    cfg = frappe.get_site_config() or {}
    try:
        config = SyncConfig.from_dict(cfg, defaults={"base_dir": str(_apps_root())})
    except ConfigError:
        get_sync_logger().error("get_sync_config: invalid translation_sheet_* settings in site_config")
        raise
    if config.credentials_file:
        config.credentials_file = _site_path(config.credentials_file)
    return config


def get_sync_service(*, with_client: bool = True) -> SheetSyncService:
    """Factory wiring config, Sheets client and the site logger together."""
    config = get_sync_config()
    client = GoogleSheetsClient(credentials_file=config.credentials_file) if with_client else None
    return SheetSyncService(config, client, logger=get_sync_logger())

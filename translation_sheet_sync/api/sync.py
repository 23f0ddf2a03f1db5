from __future__ import annotations

from typing import Any, Dict

import frappe
from frappe.utils import cint

from translation_sheet_sync.exceptions import TranslationSheetError
from translation_sheet_sync.utils.logging import compact_json, get_sync_logger
from translation_sheet_sync.utils.site_config import get_sync_service


def _ensure_system_manager() -> None:
    """Allow only System Manager or Administrator to touch catalogs and sheets."""
    user = frappe.session.user if getattr(frappe, "session", None) else None
    if user in {"Administrator"}:
        return
    roles = set(frappe.get_roles(user)) if user else set()
    if "System Manager" not in roles:
        frappe.throw("Not permitted. System Manager required.", frappe.PermissionError)


def _fail(title: str, e: Exception) -> None:
    get_sync_logger().error("%s: %s", title, e)
    frappe.log_error(title=title, message=frappe.get_traceback())
    frappe.throw(f"Translation sheet sync failed: {e}")


@frappe.whitelist()
def push(dry_run: int = 0) -> Dict[str, Any]:
    """Write local catalogs to every configured spreadsheet.

    bench execute translation_sheet_sync.api.sync.push
    """
    _ensure_system_manager()
    dry = bool(cint(dry_run))
    try:
        service = get_sync_service(with_client=not dry)
        summary = service.push(dry_run=dry)
    except TranslationSheetError as e:
        _fail("translation_sheet_push_failed", e)
    get_sync_logger().info("push: %s", compact_json(summary))
    return summary


@frappe.whitelist()
def pull() -> Dict[str, Any]:
    """Merge reviewer edits from every configured spreadsheet into local catalogs.

    bench execute translation_sheet_sync.api.sync.pull
    """
    _ensure_system_manager()
    try:
        summary = get_sync_service().pull()
    except TranslationSheetError as e:
        _fail("translation_sheet_pull_failed", e)
    get_sync_logger().info("pull: %s", compact_json(summary))
    return summary


@frappe.whitelist()
def sheet_titles() -> Dict[str, Any]:
    """Catalog paths and the sheet titles they map to (no remote calls)."""
    _ensure_system_manager()
    try:
        service = get_sync_service(with_client=False)
        paths = service.discover_paths()
        titles = service.sheet_titles(paths)
    except TranslationSheetError as e:
        _fail("translation_sheet_titles_failed", e)
    return {"sheets": [{"path": p, "title": t} for p, t in zip(paths, titles)]}

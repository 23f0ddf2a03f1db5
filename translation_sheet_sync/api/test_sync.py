# -*- coding: utf-8 -*-
"""
Test suite for the sync API endpoints.

The sync service and the Frappe session are patched, so the endpoints run
without a site or a spreadsheet.
"""
from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import frappe

from translation_sheet_sync.api import sync as api
from translation_sheet_sync.exceptions import PathError


def _throw(msg, exc=frappe.ValidationError, *args, **kwargs):
    raise exc(msg)


class ApiTestCase(unittest.TestCase):
    user = "Administrator"
    roles = ["System Manager"]

    def setUp(self):
        self.service = MagicMock()
        patches = [
            patch.object(frappe, "session", SimpleNamespace(user=self.user), create=True),
            patch.object(frappe, "get_roles", return_value=list(self.roles)),
            patch.object(frappe, "throw", side_effect=_throw),
            patch.object(frappe, "log_error"),
            patch.object(frappe, "get_traceback", return_value="Traceback"),
            patch.object(api, "get_sync_logger", return_value=MagicMock()),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        factory = patch.object(api, "get_sync_service", return_value=self.service)
        self.get_sync_service = factory.start()
        self.addCleanup(factory.stop)


class TestPush(ApiTestCase):
    def test_push(self):
        self.service.push.return_value = {"spreadsheets": 1, "sheets": ["t"], "rows": 2, "dry_run": False}
        result = api.push()
        self.assertEqual(result["rows"], 2)
        self.get_sync_service.assert_called_once_with(with_client=True)
        self.service.push.assert_called_once_with(dry_run=False)

    def test_dry_run_from_request_string(self):
        self.service.push.return_value = {"spreadsheets": 0, "sheets": [], "rows": 0, "dry_run": True}
        api.push(dry_run="1")
        self.get_sync_service.assert_called_once_with(with_client=False)
        self.service.push.assert_called_once_with(dry_run=True)

    def test_failure_is_logged_and_thrown(self):
        self.service.push.side_effect = PathError("Unable to locate message source for category app.")
        with self.assertRaises(frappe.ValidationError) as ctx:
            api.push()
        self.assertIn("category app", str(ctx.exception))
        frappe.log_error.assert_called_once()
        self.assertEqual(frappe.log_error.call_args.kwargs["title"], "translation_sheet_push_failed")


class TestPull(ApiTestCase):
    def test_pull(self):
        self.service.pull.return_value = {"spreadsheets": 1, "sheets_read": 1, "files_written": ["a.php"]}
        self.assertEqual(api.pull()["files_written"], ["a.php"])
        self.get_sync_service.assert_called_once_with()


class TestSheetTitles(ApiTestCase):
    def test_pairs(self):
        self.service.discover_paths.return_value = ["m/ru_RU/a.php"]
        self.service.sheet_titles.return_value = ["m/<language>/a"]
        self.assertEqual(api.sheet_titles(), {"sheets": [{"path": "m/ru_RU/a.php", "title": "m/<language>/a"}]})
        self.get_sync_service.assert_called_once_with(with_client=False)


class TestSystemManager(ApiTestCase):
    user = "reviewer@example.com"

    def test_system_manager_allowed(self):
        self.service.pull.return_value = {"spreadsheets": 0, "sheets_read": 0, "files_written": []}
        api.pull()
        frappe.get_roles.assert_called_once_with("reviewer@example.com")


class TestNotPermitted(ApiTestCase):
    user = "guest@example.com"
    roles = ["Guest"]

    def test_push_denied(self):
        with self.assertRaises(frappe.PermissionError):
            api.push()
        self.get_sync_service.assert_not_called()

    def test_titles_denied(self):
        with self.assertRaises(frappe.PermissionError):
            api.sheet_titles()


if __name__ == "__main__":
    unittest.main()

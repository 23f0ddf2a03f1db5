# -*- coding: utf-8 -*-
"""Google Sheets v4 client used by the sync service.

Thin wrapper over the REST API with the five calls the sync needs:
- get_sheet_titles (tab titles of a spreadsheet)
- add_sheets (batch add tabs)
- batch_clear (clear whole tabs)
- batch_update_values (write whole tabs, RAW input)
- get_values (read a whole tab)

Design principles
- Credentials come from a service-account JSON key (google-auth), or any
  pre-authorised ``requests.Session`` passed in
- Network failures are retried with exponential backoff; HTTP errors are not
- Error bodies are surfaced on the raised exception, never swallowed

Usage
-----
from translation_sheet_sync.sheets_client import GoogleSheetsClient
client = GoogleSheetsClient(credentials_file="/path/to/service-account.json")
client.get_sheet_titles("1AbC...")
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from translation_sheet_sync.exceptions import ConfigError, TranslationSheetError
from translation_sheet_sync.utils.formatting import compact_json as _compact, mask_token as _mask

LOG = logging.getLogger(__name__)

__all__ = [
    "GoogleSheetsClient",
    "SheetsError",
    "SheetsRequestError",
    "SheetsContractError",
    "a1_range",
    "SCOPES",
]

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
VALUE_INPUT_RAW = "RAW"


# -------------------------
# Exceptions
# -------------------------
class SheetsError(TranslationSheetError):
    """Base exception for the Sheets client."""


class SheetsRequestError(SheetsError):
    """Raised on HTTP-level or transport-level failures."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


class SheetsContractError(SheetsError):
    """Raised when a successful response does not carry the expected JSON body."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


# -------------------------
# Helpers
# -------------------------
def a1_range(title: str) -> str:
    """A1 range covering a whole tab; titles are always quoted."""
    return "'" + title.replace("'", "''") + "'"


def _authorized_session(credentials_file: str) -> requests.Session:
    try:
        credentials = service_account.Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
    except (OSError, ValueError) as e:
        LOG.error("service account load failed: %s", e)
        raise ConfigError(f"Failed to load service account credentials from {credentials_file}: {e}") from e
    LOG.info("service account loaded: %s", _mask(credentials.service_account_email, keep=4))
    return AuthorizedSession(credentials)


# -------------------------
# Client
# -------------------------
@dataclass
class GoogleSheetsClient:
    credentials_file: Optional[str] = None
    session: Optional[requests.Session] = None
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    timeout_seconds: int = 30
    user_agent: str = "TranslationSheetSync/0.1"
    retry_count: int = 3
    retry_backoff_seconds: float = 2.0

    def __post_init__(self) -> None:
        if self.session is None:
            if not self.credentials_file:
                LOG.error("GoogleSheetsClient.init: no session and no credentials file")
                raise ConfigError("Missing translation_sheet_credentials (service account key file)")
            self.session = _authorized_session(self.credentials_file)
        self.base_url = self.base_url.rstrip("/")
        LOG.info("GoogleSheetsClient.init: base_url=%r timeout=%ss", self.base_url, self.timeout_seconds)

    # ---------------------
    # Public API
    # ---------------------
    def get_sheet_titles(self, spreadsheet_id: str) -> List[str]:
        body = self._request("GET", f"/{spreadsheet_id}", params={"fields": "sheets.properties.title"})
        titles = [s.get("properties", {}).get("title", "") for s in body.get("sheets", [])]
        LOG.info("get_sheet_titles: spreadsheet=%s tabs=%d", spreadsheet_id, len(titles))
        return titles

    def add_sheets(self, spreadsheet_id: str, titles: Sequence[str]) -> Dict[str, Any]:
        requests_ = [{"addSheet": {"properties": {"title": title}}} for title in titles]
        LOG.info("add_sheets: spreadsheet=%s titles=%s", spreadsheet_id, _compact(list(titles)))
        return self._request("POST", f"/{spreadsheet_id}:batchUpdate", json_body={"requests": requests_})

    def batch_clear(self, spreadsheet_id: str, titles: Sequence[str]) -> Dict[str, Any]:
        ranges = [a1_range(t) for t in titles]
        LOG.info("batch_clear: spreadsheet=%s ranges=%d", spreadsheet_id, len(ranges))
        return self._request("POST", f"/{spreadsheet_id}/values:batchClear", json_body={"ranges": ranges})

    def batch_update_values(
        self, spreadsheet_id: str, data: Sequence[Tuple[str, List[List[str]]]]
    ) -> Dict[str, Any]:
        body = {
            "valueInputOption": VALUE_INPUT_RAW,
            "data": [{"range": a1_range(title), "values": values} for title, values in data],
        }
        LOG.info("batch_update_values: spreadsheet=%s ranges=%d", spreadsheet_id, len(body["data"]))
        return self._request("POST", f"/{spreadsheet_id}/values:batchUpdate", json_body=body)

    def get_values(self, spreadsheet_id: str, title: str) -> List[List[str]]:
        path = f"/{spreadsheet_id}/values/{quote(a1_range(title), safe='')}"
        body = self._request("GET", path)
        values = body.get("values") or []
        LOG.info("get_values: spreadsheet=%s title=%r rows=%d", spreadsheet_id, title, len(values))
        return values

    # ---------------------
    # Internals
    # ---------------------
    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        LOG.debug("HTTP %s %s params=%s", method, url, _compact(params))

        attempt = 0
        last_exc: Optional[Exception] = None
        while attempt <= self.retry_count:
            try:
                resp = self.session.request(  # type: ignore[union-attr]
                    method,
                    url,
                    headers=self._headers(),
                    params=params,
                    json=json_body,
                    timeout=self.timeout_seconds,
                )
                LOG.info("HTTP %s %s %s", resp.status_code, method, url)
                return self._handle_response(resp)
            except (requests.Timeout, requests.ConnectionError) as e:
                last_exc = e
                LOG.warning("network error on %s %s attempt=%s/%s: %s", method, url, attempt, self.retry_count, e)
                if attempt == self.retry_count:
                    raise SheetsRequestError(f"Network error: {e}") from e
                time.sleep(self.retry_backoff_seconds * (2 ** attempt))
                attempt += 1

        raise SheetsRequestError(f"Unreachable after retries: {last_exc}")

    def _handle_response(self, resp: requests.Response) -> Dict[str, Any]:
        status = resp.status_code
        text = resp.text or ""

        if status >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = {"raw": text}
            message = self._extract_http_error_message(payload) or f"HTTP {status}"
            LOG.error("http_error: status=%s message=%s payload=%s", status, message, _compact(payload))
            raise SheetsRequestError(message, status=status, payload=payload)

        if not text.strip():
            return {}
        try:
            body = resp.json()
        except ValueError as e:
            LOG.error("invalid_json: %s; raw=%s", e, _compact(text))
            raise SheetsContractError(f"Invalid JSON response: {e}", status=status, payload={"raw": text}) from e
        if not isinstance(body, dict):
            raise SheetsContractError("Unexpected response body", status=status, payload={"raw": body})
        return body

    @staticmethod
    def _extract_http_error_message(payload: Any) -> Optional[str]:
        # Google error shape: {"error": {"code": 400, "message": "...", "status": "INVALID_ARGUMENT"}}
        if not isinstance(payload, dict):
            return None
        err = payload.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str):
            return err
        return None

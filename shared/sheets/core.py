"""Google Sheets client shared by the spreadsheet cache."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, List, Mapping, Optional

import gspread

from . import async_adapter

log = logging.getLogger("vvgo.sheets.core")

GSpreadClient = gspread.Client

_CLIENT_LOCK = threading.Lock()
_CLIENT: Optional[GSpreadClient] = None


def clear_cached_client() -> None:
    """Drop the cached gspread client (mainly for tests)."""

    global _CLIENT
    with _CLIENT_LOCK:
        _CLIENT = None


def _load_credentials(raw: str | None) -> Mapping[str, Any]:
    if not raw:
        raise RuntimeError("GSPREAD_CREDENTIALS environment variable is required")
    try:
        creds = json.loads(raw)
    except json.JSONDecodeError as exc:  # pragma: no cover - configuration error path
        raise RuntimeError("GSPREAD_CREDENTIALS must be valid JSON") from exc
    if not isinstance(creds, Mapping):  # pragma: no cover - configuration error path
        raise RuntimeError("GSPREAD_CREDENTIALS JSON must represent an object")
    return creds


def get_client(credentials_json: str | None) -> GSpreadClient:
    """Return a cached gspread client authenticated via service-account JSON."""

    global _CLIENT
    if _CLIENT is not None:
        return _CLIENT
    with _CLIENT_LOCK:
        if _CLIENT is None:
            credentials = _load_credentials(credentials_json)
            log.debug("Authorising gspread client with service-account credentials")
            _CLIENT = gspread.service_account_from_dict(credentials)
    return _CLIENT


def _values_from_response(payload: Any) -> List[List[Any]]:
    if not isinstance(payload, Mapping):
        return []
    values = payload.get("values") or []
    return [list(row) for row in values]


class SheetsSource:
    """Remote spreadsheet values fetch, ``(spreadsheet_id, range) -> rows``."""

    def __init__(self, credentials_json: str | None, *, timeout: float | None = None) -> None:
        self._credentials_json = credentials_json
        self._timeout = timeout

    def _client(self) -> GSpreadClient:
        return get_client(self._credentials_json)

    async def fetch_values(self, spreadsheet_id: str, read_range: str) -> List[List[Any]]:
        client = await async_adapter.arun(self._client)
        spreadsheet = await async_adapter.aopen_spreadsheet(
            client, spreadsheet_id, timeout=self._timeout
        )
        payload = await async_adapter.avalues_get(spreadsheet, read_range, timeout=self._timeout)
        return _values_from_response(payload)


__all__ = ["GSpreadClient", "SheetsSource", "clear_cached_client", "get_client"]

import asyncio

import pytest

from shared.sheets import core


class _Spreadsheet:
    def __init__(self, payload):
        self.payload = payload
        self.ranges: list[str] = []

    def values_get(self, a1_range):
        self.ranges.append(a1_range)
        return self.payload


class _Client:
    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet
        self.keys: list[str] = []

    def open_by_key(self, key):
        self.keys.append(key)
        return self.spreadsheet


def test_fetch_values_reads_range(monkeypatch):
    async def runner() -> None:
        spreadsheet = _Spreadsheet({"range": "Projects!A1:B2", "values": [["Name"], ["x"]]})
        client = _Client(spreadsheet)
        monkeypatch.setattr(core, "get_client", lambda _creds: client)

        rows = await core.SheetsSource("{}").fetch_values("sheet-id", "Projects")

        assert rows == [["Name"], ["x"]]
        assert client.keys == ["sheet-id"]
        assert spreadsheet.ranges == ["Projects"]

    asyncio.run(runner())


def test_fetch_values_without_values_key_is_empty(monkeypatch):
    async def runner() -> None:
        client = _Client(_Spreadsheet({"range": "Projects!A1:B2"}))
        monkeypatch.setattr(core, "get_client", lambda _creds: client)

        assert await core.SheetsSource("{}").fetch_values("sheet-id", "Projects") == []

    asyncio.run(runner())


def test_missing_credentials_raise():
    core.clear_cached_client()
    with pytest.raises(RuntimeError, match="GSPREAD_CREDENTIALS"):
        core.get_client(None)

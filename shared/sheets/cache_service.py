"""Read-through cache over spreadsheet values backed by Redis.

Keys are ``sheets:{spreadsheet_id}:{range}`` and values are the JSON-encoded row
payload, written with ``SETEX`` and a fixed TTL. The cache tier fails open: a
store error or an undecodable payload is logged and treated as a miss. The
spreadsheet source fails closed: its errors end the read. With a
``health_component`` set, every store round trip records whether Redis answered.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, List, Optional, Protocol, Sequence

from shared import health as healthmod
from shared.errors import CacheWriteFailure, NoDataError, UpstreamUnavailable

log = logging.getLogger("vvgo.sheets.cache")

Rows = List[List[Any]]

DEFAULT_TTL_SEC = 5
KEY_PREFIX = "sheets"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any: ...

    async def setex(self, key: str, ttl: int, value: str) -> Any: ...


class ValuesSource(Protocol):
    async def fetch_values(self, spreadsheet_id: str, read_range: str) -> Rows: ...


def _errtext(exc: BaseException) -> str:
    s = str(exc).strip()
    return s or getattr(exc, "__class__", type(exc)).__name__


def cache_key(spreadsheet_id: str, read_range: str) -> str:
    return f"{KEY_PREFIX}:{spreadsheet_id}:{read_range}"


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    store_errors: int = 0
    decode_errors: int = 0
    fetches: int = 0
    fetch_errors: int = 0
    write_failures: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class SpreadsheetCache:
    def __init__(
        self,
        store: KeyValueStore,
        source: ValuesSource,
        *,
        ttl_sec: int = DEFAULT_TTL_SEC,
        health_component: Optional[str] = None,
    ) -> None:
        self._store = store
        self._source = source
        self.ttl_sec = ttl_sec
        self._health_component = health_component
        self._stats = CacheStats()

    def _mark_store(self, ok: bool) -> None:
        if self._health_component:
            healthmod.set_component(self._health_component, ok)

    def stats(self) -> dict[str, int]:
        return self._stats.as_dict()

    async def read(self, spreadsheet_id: str, read_range: str) -> Rows:
        """Return rows for ``read_range``, from Redis when present."""

        values = await self._read_cached(spreadsheet_id, read_range)
        if values:
            self._stats.hits += 1
            return values
        self._stats.misses += 1

        self._stats.fetches += 1
        try:
            values = await self._source.fetch_values(spreadsheet_id, read_range)
        except Exception as exc:
            self._stats.fetch_errors += 1
            log.error(
                "failed to read spreadsheet values from sheets",
                extra={"spreadsheet_id": spreadsheet_id, "range": read_range, "error": _errtext(exc)},
            )
            raise UpstreamUnavailable(f"failed to retrieve data from sheet: {_errtext(exc)}") from exc

        if not values:
            raise NoDataError()
        await self.write(spreadsheet_id, read_range, values)
        return values

    async def write(self, spreadsheet_id: str, read_range: str, values: Sequence[Sequence[Any]]) -> bool:
        """Store ``values`` with the fixed TTL; failures are logged, never raised."""

        key = cache_key(spreadsheet_id, read_range)
        try:
            try:
                payload = json.dumps([list(row) for row in values])
            except (TypeError, ValueError) as exc:
                raise CacheWriteFailure(f"json encode failed: {_errtext(exc)}") from exc
            try:
                await self._store.setex(key, self.ttl_sec, payload)
            except Exception as exc:
                self._mark_store(False)
                raise CacheWriteFailure(_errtext(exc)) from exc
            self._mark_store(True)
        except CacheWriteFailure as exc:
            self._stats.write_failures += 1
            log.error(
                "failed to write spreadsheet values to redis",
                extra={"key": key, "error": _errtext(exc)},
            )
            return False
        return True

    async def _read_cached(self, spreadsheet_id: str, read_range: str) -> Optional[Rows]:
        key = cache_key(spreadsheet_id, read_range)
        try:
            raw = await self._store.get(key)
        except Exception as exc:
            self._mark_store(False)
            self._stats.store_errors += 1
            log.error(
                "failed to read spreadsheet values from redis",
                extra={"key": key, "error": _errtext(exc)},
            )
            return None
        self._mark_store(True)
        if not raw:
            log.info("cache miss", extra={"key": key})
            return None

        try:
            values = json.loads(raw)
        except (TypeError, ValueError) as exc:
            self._stats.decode_errors += 1
            log.error("json decode failed", extra={"key": key, "error": _errtext(exc)})
            return None
        if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
            self._stats.decode_errors += 1
            log.error("cached payload is not a list of rows", extra={"key": key})
            return None
        return values


__all__ = [
    "CacheStats",
    "DEFAULT_TTL_SEC",
    "KeyValueStore",
    "Rows",
    "SpreadsheetCache",
    "ValuesSource",
    "cache_key",
]

"""Async adapter for Google Sheets operations.

gspread is a blocking client. This module offloads its calls into a bounded
:class:`~concurrent.futures.ThreadPoolExecutor` so request handlers never block
the event loop while waiting on the Sheets API.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from threading import Lock
from typing import Any, Callable, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")

_logger = logging.getLogger(__name__)
_EXECUTOR: ThreadPoolExecutor | None = None
_EXECUTOR_LOCK = Lock()
_MAX_WORKERS = 4


def _get_executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    if _EXECUTOR is None:
        with _EXECUTOR_LOCK:
            if _EXECUTOR is None:
                _EXECUTOR = ThreadPoolExecutor(
                    max_workers=_MAX_WORKERS,
                    thread_name_prefix="sheets-io",
                )
                _logger.info(
                    "SheetsAsyncAdapter initialized (max_workers=%d)", _MAX_WORKERS
                )
    return _EXECUTOR


def shutdown_executor(wait: bool = True) -> None:
    """Shut down the shared executor if it has been initialised."""

    global _EXECUTOR
    if _EXECUTOR is not None:
        with _EXECUTOR_LOCK:
            if _EXECUTOR is not None:
                _EXECUTOR.shutdown(wait=wait)
                _EXECUTOR = None
                _logger.info("SheetsAsyncAdapter executor shut down")


async def arun(
    func: Callable[P, T],
    *args: P.args,
    timeout: float | None = None,
    **kwargs: P.kwargs,
) -> T:
    """Execute ``func`` in the adapter executor and await the result."""

    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(_get_executor(), partial(func, *args, **kwargs))
    if timeout is not None:
        return await asyncio.wait_for(future, timeout)
    return await future


async def aopen_spreadsheet(client: Any, key: str, *, timeout: float | None = None) -> Any:
    """Open a spreadsheet by ``key`` without blocking the event loop."""

    return await arun(client.open_by_key, key, timeout=timeout)


async def avalues_get(spreadsheet: Any, a1_range: str, *, timeout: float | None = None) -> Any:
    """Fetch the raw ``values.get`` payload for ``a1_range``."""

    return await arun(spreadsheet.values_get, a1_range, timeout=timeout)


__all__ = [
    "aopen_spreadsheet",
    "arun",
    "avalues_get",
    "shutdown_executor",
]

"""Application runtime scaffolding for the interactions web service."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as aioredis
from aiohttp import web

from shared import health as healthmod
from shared.config import Settings, get_config_snapshot, load_settings
from shared.logging import get_trace_id, set_trace_id, setup_logging
from shared.sheets.async_adapter import shutdown_executor
from shared.sheets.cache_service import KeyValueStore, SpreadsheetCache, ValuesSource
from shared.sheets.core import SheetsSource
from shared.sheets.projects import ProjectDirectory
from modules.interactions.commands import build_registry
from modules.interactions.discord_api import DiscordClient
from modules.interactions.dispatcher import InteractionDispatcher
from modules.interactions.routes import CommandRegistryClient, mount_interaction_routes

log = logging.getLogger("vvgo.runtime")

CACHE_KEY = web.AppKey("spreadsheet_cache", SpreadsheetCache)
SETTINGS_KEY = web.AppKey("settings", Settings)
REDIS_KEY = web.AppKey("redis", aioredis.Redis)


def _make_tracing_middleware(access_logger: logging.Logger):
    @web.middleware
    async def tracing_middleware(
        request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
    ) -> web.StreamResponse:
        trace = set_trace_id()
        started = time.perf_counter()
        status = 500
        try:
            response = await handler(request)
            status = response.status
            response.headers["X-Trace-Id"] = trace
            return response
        except web.HTTPException as exc:
            status = exc.status
            exc.headers["X-Trace-Id"] = trace
            raise
        finally:
            duration_ms = int((time.perf_counter() - started) * 1000)
            access_logger.info(
                "http_request",
                extra={
                    "trace": trace,
                    "path": request.path,
                    "method": request.method,
                    "status": status,
                    "ms": duration_ms,
                },
            )

    return tracing_middleware


async def _connect_redis(app: web.Application) -> None:
    client = app.get(REDIS_KEY)
    if client is None:
        return
    try:
        await client.ping()
    except Exception as exc:
        # The cache fails open, so an unreachable Redis only marks us degraded.
        log.warning("redis unavailable at startup", extra={"error": str(exc)})
        healthmod.set_component("redis", False)
        return
    healthmod.set_component("redis", True)


async def _close_redis(app: web.Application) -> None:
    client = app.get(REDIS_KEY)
    if client is not None:
        await client.aclose()


async def create_app(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
    source: ValuesSource | None = None,
    discord_client: CommandRegistryClient | None = None,
) -> web.Application:
    """Create the aiohttp application and wire its components together.

    ``store``, ``source`` and ``discord_client`` default to the real Redis,
    Google Sheets and Discord collaborators built from ``settings``.
    """

    settings = settings or load_settings()
    static_fields = {"env": settings.env_name, "bot": settings.bot_name}
    access_logger = setup_logging(static_fields=static_fields)

    app = web.Application(middlewares=[_make_tracing_middleware(access_logger)])
    app[SETTINGS_KEY] = settings

    if store is None:
        redis_client = aioredis.from_url(settings.redis_url)
        app[REDIS_KEY] = redis_client
        app.on_startup.append(_connect_redis)
        app.on_cleanup.append(_close_redis)
        store = redis_client
    else:
        healthmod.set_component("redis", True)

    if source is None:
        source = SheetsSource(settings.gspread_credentials)

    cache = SpreadsheetCache(
        store,
        source,
        ttl_sec=settings.cache_ttl_sec,
        health_component="redis",
    )
    app[CACHE_KEY] = cache
    directory = ProjectDirectory(
        cache,
        settings.website_data_spreadsheet_id,
        read_range=settings.projects_range,
    )
    registry = build_registry(directory, base_url=settings.public_base_url)
    dispatcher = InteractionDispatcher(settings.discord_public_key, registry)
    if discord_client is None:
        discord_client = DiscordClient(settings.discord_application_id, settings.discord_token)
    mount_interaction_routes(app, dispatcher, registry, discord_client)

    healthmod.set_component("runtime", True)
    log.info("config loaded", extra={"config": get_config_snapshot(settings)})

    def _base_payload() -> dict[str, Any]:
        return {
            "ok": True,
            "bot": settings.bot_name,
            "env": settings.env_name,
            "version": settings.version,
        }

    async def root(_: web.Request) -> web.Response:
        payload = _base_payload()
        payload["trace"] = get_trace_id()
        return web.json_response(payload)

    async def ready(_: web.Request) -> web.Response:
        components = healthmod.components_snapshot()
        return web.json_response({"ok": healthmod.overall_ready(), "components": components})

    async def health(_: web.Request) -> web.Response:
        components = healthmod.components_snapshot()
        payload = _base_payload()
        payload.update(
            {
                "ok": all(item.get("ok", False) for item in components.values()),
                "components": components,
                "ready": healthmod.overall_ready(),
                "cache": cache.stats(),
                "endpoint": "health",
            }
        )
        status = 200 if payload["ok"] else 503
        return web.json_response(payload, status=status)

    async def healthz(_: web.Request) -> web.Response:
        payload = _base_payload()
        payload["endpoint"] = "healthz"
        return web.json_response(payload)

    app.router.add_get("/", root)
    app.router.add_get("/ready", ready)
    app.router.add_get("/health", health)
    app.router.add_get("/healthz", healthz)

    return app


class Runtime:
    """Owns the aiohttp runner and site for the process lifetime."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or load_settings()
        self._web_app: Optional[web.Application] = None
        self._web_runner: Optional[web.AppRunner] = None
        self._web_site: Optional[web.TCPSite] = None

    async def start_webserver(self, *, port: Optional[int] = None) -> None:
        if self._web_site is not None:
            return
        port = port if port is not None else self.settings.port

        app = await create_app(self.settings)
        self._web_app = app
        self._web_runner = web.AppRunner(app)
        await self._web_runner.setup()
        self._web_site = web.TCPSite(self._web_runner, host="0.0.0.0", port=port)
        await self._web_site.start()
        log.info("web server listening", extra={"port": port})

    async def shutdown_webserver(self) -> None:
        site, runner = self._web_site, self._web_runner
        self._web_site = None
        self._web_runner = None
        self._web_app = None
        if site is not None:
            await site.stop()
        if runner is not None:
            await runner.cleanup()
        shutdown_executor(wait=False)

    async def serve_forever(self) -> None:
        await self.start_webserver()
        try:
            await asyncio.Event().wait()
        finally:
            await self.shutdown_webserver()

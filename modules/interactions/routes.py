"""aiohttp routes for interactions and slash command administration."""

from __future__ import annotations

import logging
from typing import Any, List, Protocol

from aiohttp import web

from modules.interactions.commands import CommandCreator, CommandRegistry
from modules.interactions.dispatcher import InteractionDispatcher

log = logging.getLogger("vvgo.web.interactions")

INTERACTIONS_PATH = "/interactions"
SLASH_COMMANDS_PATH = "/slash_commands"
CREATE_SLASH_COMMANDS_PATH = "/slash_commands/create"

MOUNTED_KEY = web.AppKey("interactions_mounted", bool)


class CommandRegistryClient(CommandCreator, Protocol):
    async def list_commands(self) -> List[Any]: ...


def mount_interaction_routes(
    app: web.Application,
    dispatcher: InteractionDispatcher,
    registry: CommandRegistry,
    client: CommandRegistryClient,
) -> None:
    """Register the interaction endpoint and the command admin endpoints."""

    if app.get(MOUNTED_KEY):
        return

    async def create_commands(_: web.Request) -> web.StreamResponse:
        results = await registry.create_all(client)
        failed = sorted(name for name, ok in results.items() if not ok)
        if failed:
            log.warning("slash commands not created", extra={"failed": ",".join(failed)})
        raise web.HTTPFound(SLASH_COMMANDS_PATH)

    async def view_commands(_: web.Request) -> web.StreamResponse:
        try:
            commands = await client.list_commands()
        except Exception as exc:
            log.exception("list application commands failed")
            raise web.HTTPInternalServerError(text="") from exc
        return web.json_response(commands)

    app.router.add_post(INTERACTIONS_PATH, dispatcher.handle)
    app.router.add_get(SLASH_COMMANDS_PATH, view_commands)
    app.router.add_post(CREATE_SLASH_COMMANDS_PATH, create_commands)
    app.router.add_get(CREATE_SLASH_COMMANDS_PATH, create_commands)
    app[MOUNTED_KEY] = True
    log.debug("interaction routes registered")


__all__ = [
    "CREATE_SLASH_COMMANDS_PATH",
    "INTERACTIONS_PATH",
    "SLASH_COMMANDS_PATH",
    "mount_interaction_routes",
]

"""Verify, decode and route inbound Discord interactions.

Each request ends in one of three ways: unauthorized (bad signature), bad
request (missing headers, undecodable body, unsupported interaction type) or
handled. A missing or malformed public key is a server fault.
"""

from __future__ import annotations

import json
import logging
from typing import Mapping

from aiohttp import web

from shared.errors import (
    AuthenticationError,
    ConfigurationError,
    MalformedRequestError,
    UnsupportedInteraction,
)

from modules.interactions.commands import CommandRegistry
from modules.interactions.models import (
    TYPE_APPLICATION_COMMAND,
    TYPE_PING,
    Interaction,
    InteractionResponse,
)
from modules.interactions.signature import load_verify_key, verify_request

log = logging.getLogger("vvgo.interactions")

UNKNOWN_COMMAND_REPLY = "this interaction is too galaxy brain for me 😥"


def decode_interaction(body: bytes) -> Interaction:
    try:
        return Interaction.from_payload(json.loads(body))
    except ValueError as exc:
        raise MalformedRequestError(f"invalid request body: {exc}") from exc


class InteractionDispatcher:
    def __init__(self, public_key_hex: str, registry: CommandRegistry) -> None:
        self._public_key_hex = public_key_hex
        self.registry = registry

    def authenticate(self, headers: Mapping[str, str], body: bytes) -> Interaction:
        """Check the request signature and decode the body."""

        verify_key = load_verify_key(self._public_key_hex)
        verify_request(verify_key, headers, body)
        return decode_interaction(body)

    async def dispatch(self, interaction: Interaction) -> InteractionResponse:
        if interaction.type == TYPE_PING:
            return InteractionResponse.pong()
        if interaction.type == TYPE_APPLICATION_COMMAND:
            command = self.registry.get(interaction.command_name)
            if command is None:
                log.info("unknown slash command", extra={"command": interaction.command_name})
                return InteractionResponse.message(UNKNOWN_COMMAND_REPLY)
            return await command.handler(interaction)
        raise UnsupportedInteraction(f"unsupported interaction type: {interaction.type}")

    async def handle(self, request: web.Request) -> web.Response:
        """aiohttp handler for ``POST /interactions``."""

        body = await request.read()
        try:
            interaction = self.authenticate(request.headers, body)
        except ConfigurationError:
            log.error("invalid discord public key")
            raise web.HTTPInternalServerError(text="")
        except MalformedRequestError as exc:
            log.info("bad interaction request", extra={"reason": str(exc)})
            raise web.HTTPBadRequest(text=str(exc))
        except AuthenticationError:
            raise web.HTTPUnauthorized(text="authorization failed")

        try:
            response = await self.dispatch(interaction)
        except UnsupportedInteraction as exc:
            log.info("unsupported interaction", extra={"reason": str(exc)})
            raise web.HTTPBadRequest(text="unsupported interaction type")
        return web.json_response(response.to_payload())


__all__ = ["InteractionDispatcher", "UNKNOWN_COMMAND_REPLY", "decode_interaction"]

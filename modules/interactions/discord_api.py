"""Minimal Discord REST client for application command registration."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from aiohttp import ClientSession, ClientTimeout

from modules.interactions.models import CommandParams

log = logging.getLogger("vvgo.discord.api")

API_BASE = "https://discord.com/api/v10"
_TIMEOUT = 10
_USER_AGENT = "DiscordBot (https://vvgo.org, 1.0)"


class DiscordAPIError(RuntimeError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"discord api returned {status}: {body[:200]}")
        self.status = status
        self.body = body


class DiscordClient:
    """Create and list the application's global slash commands."""

    def __init__(
        self,
        application_id: str,
        token: str,
        *,
        api_base: str = API_BASE,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.application_id = application_id
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._session = session

    def _commands_url(self) -> str:
        return f"{self._api_base}/applications/{self.application_id}/commands"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bot {self._token}",
            "User-Agent": _USER_AGENT,
        }

    async def _request(self, method: str, url: str, *, json: Any = None) -> Any:
        if self._session is not None:
            return await self._send(self._session, method, url, json=json)
        async with ClientSession(timeout=ClientTimeout(total=_TIMEOUT)) as session:
            return await self._send(session, method, url, json=json)

    async def _send(self, session: ClientSession, method: str, url: str, *, json: Any = None) -> Any:
        async with session.request(method, url, json=json, headers=self._headers()) as resp:
            if resp.status >= 300:
                raise DiscordAPIError(resp.status, await resp.text())
            return await resp.json()

    async def create_command(self, params: CommandParams) -> Any:
        log.debug("creating application command", extra={"command": params.name})
        return await self._request("POST", self._commands_url(), json=params.to_payload())

    async def list_commands(self) -> List[Any]:
        commands = await self._request("GET", self._commands_url())
        return list(commands or [])


__all__ = ["API_BASE", "DiscordAPIError", "DiscordClient"]

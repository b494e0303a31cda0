"""Discord interaction payloads as plain dataclasses.

Numeric type codes come from discord.py's enums so the values track Discord's
documented constants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import discord

__all__ = [
    "CommandChoice",
    "CommandOption",
    "CommandParams",
    "Interaction",
    "InteractionData",
    "InteractionOption",
    "InteractionResponse",
    "OPTION_TYPE_STRING",
    "RESPONSE_CHANNEL_MESSAGE",
    "RESPONSE_PONG",
    "TYPE_APPLICATION_COMMAND",
    "TYPE_PING",
]

TYPE_PING = discord.InteractionType.ping.value
TYPE_APPLICATION_COMMAND = discord.InteractionType.application_command.value

RESPONSE_PONG = discord.InteractionResponseType.pong.value
RESPONSE_CHANNEL_MESSAGE = discord.InteractionResponseType.channel_message.value

OPTION_TYPE_STRING = discord.AppCommandOptionType.string.value


def _as_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ValueError(f"expected an integer type code, got {value!r}")


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be a JSON object")
    return value


@dataclass(frozen=True)
class InteractionOption:
    name: str
    value: Any = None
    type: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "InteractionOption":
        data = _as_mapping(payload, "option")
        return cls(
            name=str(data.get("name") or ""),
            value=data.get("value"),
            type=_as_int(data.get("type", 0)),
        )


@dataclass(frozen=True)
class InteractionData:
    name: str = ""
    id: str = ""
    options: List[InteractionOption] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "InteractionData":
        data = _as_mapping(payload, "data")
        raw_options = data.get("options") or []
        if not isinstance(raw_options, list):
            raise ValueError("data.options must be a JSON array")
        return cls(
            name=str(data.get("name") or ""),
            id=str(data.get("id") or ""),
            options=[InteractionOption.from_payload(item) for item in raw_options],
        )

    def option_value(self, name: str) -> Optional[str]:
        """Return the last option called ``name`` as text."""

        found: Optional[str] = None
        for option in self.options:
            if option.name == name and option.value is not None:
                found = str(option.value)
        return found


@dataclass(frozen=True)
class Interaction:
    type: int
    data: Optional[InteractionData] = None
    id: str = ""
    token: str = ""
    guild_id: str = ""
    channel_id: str = ""
    member: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Interaction":
        body = _as_mapping(payload, "interaction")
        raw_data = body.get("data")
        member = body.get("member")
        return cls(
            type=_as_int(body.get("type", 0)),
            data=InteractionData.from_payload(raw_data) if raw_data is not None else None,
            id=str(body.get("id") or ""),
            token=str(body.get("token") or ""),
            guild_id=str(body.get("guild_id") or ""),
            channel_id=str(body.get("channel_id") or ""),
            member=dict(member) if isinstance(member, Mapping) else None,
        )

    @property
    def command_name(self) -> str:
        return self.data.name if self.data is not None else ""

    def option_value(self, name: str) -> Optional[str]:
        return self.data.option_value(name) if self.data is not None else None


@dataclass(frozen=True)
class InteractionResponse:
    type: int
    content: Optional[str] = None

    @classmethod
    def pong(cls) -> "InteractionResponse":
        return cls(type=RESPONSE_PONG)

    @classmethod
    def message(cls, content: str) -> "InteractionResponse":
        return cls(type=RESPONSE_CHANNEL_MESSAGE, content=content)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.content is not None:
            payload["data"] = {"content": self.content}
        return payload


@dataclass(frozen=True)
class CommandChoice:
    name: str
    value: str

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class CommandOption:
    name: str
    description: str
    type: int = OPTION_TYPE_STRING
    required: bool = False
    choices: List[CommandChoice] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.choices:
            payload["choices"] = [choice.to_payload() for choice in self.choices]
        return payload


@dataclass(frozen=True)
class CommandParams:
    """Body of a create-application-command request."""

    name: str
    description: str
    options: List[CommandOption] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.options:
            payload["options"] = [option.to_payload() for option in self.options]
        return payload

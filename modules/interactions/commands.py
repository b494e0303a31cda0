"""Slash commands: definitions, registry and handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterator, List, Optional, Protocol, Sequence

from shared.identity import Identity
from shared.sheets.projects import Project, Projects

from modules.interactions.models import (
    CommandChoice,
    CommandOption,
    CommandParams,
    Interaction,
    InteractionResponse,
)

log = logging.getLogger("vvgo.interactions.commands")

Handler = Callable[[Interaction], Awaitable[InteractionResponse]]
OptionsBuilder = Callable[[], Awaitable[List[CommandOption]]]

FALLBACK_REPLY = "oof please try again 😅"
PROJECT_OPTION = "project"
# Discord rejects commands with more choices than this.
MAX_CHOICES = 25


class ProjectLister(Protocol):
    async def list_projects(self, identity: Identity) -> Projects: ...


class CommandCreator(Protocol):
    async def create_command(self, params: CommandParams) -> object: ...


@dataclass(frozen=True)
class SlashCommand:
    name: str
    description: str
    handler: Handler
    options: Optional[OptionsBuilder] = None

    async def params(self) -> CommandParams:
        options = await self.options() if self.options is not None else []
        return CommandParams(name=self.name, description=self.description, options=options)

    async def create(self, client: CommandCreator) -> None:
        await client.create_command(await self.params())


class CommandRegistry:
    """Commands in declaration order, looked up by name for dispatch."""

    def __init__(self, commands: Sequence[SlashCommand] = ()) -> None:
        self._ordered: List[SlashCommand] = []
        self._by_name: Dict[str, SlashCommand] = {}
        for command in commands:
            self.register(command)

    def register(self, command: SlashCommand) -> None:
        if command.name in self._by_name:
            raise ValueError(f"duplicate slash command: {command.name}")
        self._ordered.append(command)
        self._by_name[command.name] = command

    def get(self, name: str) -> Optional[SlashCommand]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return [command.name for command in self._ordered]

    def __iter__(self) -> Iterator[SlashCommand]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    async def create_all(self, client: CommandCreator) -> Dict[str, bool]:
        """Push every definition; a failure is logged and the rest still run."""

        results: Dict[str, bool] = {}
        for command in self._ordered:
            try:
                await command.create(client)
            except Exception:
                log.exception("slash command create failed", extra={"command": command.name})
                results[command.name] = False
                continue
            log.info("%s command created", command.name)
            results[command.name] = True
        return results


def project_option(projects: Projects) -> CommandOption:
    choices = [CommandChoice(name=project.Title, value=project.Name) for project in projects]
    if len(choices) > MAX_CHOICES:
        log.warning(
            "project choices truncated",
            extra={"available": len(choices), "kept": MAX_CHOICES},
        )
        choices = choices[:MAX_CHOICES]
    return CommandOption(
        name=PROJECT_OPTION,
        description="Name of the project",
        required=True,
        choices=choices,
    )


async def beep(_: Interaction) -> InteractionResponse:
    return InteractionResponse.message("boop")


class ProjectCommands:
    """Handlers that answer with links for a project from the directory."""

    def __init__(self, directory: ProjectLister, *, base_url: str) -> None:
        self._directory = directory
        self._base_url = base_url.rstrip("/")

    async def options(self) -> List[CommandOption]:
        projects = await self._directory.list_projects(Identity.anonymous())
        return [project_option(projects.current())]

    async def _lookup(self, interaction: Interaction) -> Optional[Project]:
        name = interaction.option_value(PROJECT_OPTION) or ""
        try:
            projects = await self._directory.list_projects(Identity.anonymous())
        except Exception:
            log.exception("list projects failed", extra={"command": interaction.command_name})
            return None
        project = projects.get(name)
        if project is None:
            log.info("project not found", extra={"project": name})
        return project

    async def parts(self, interaction: Interaction) -> InteractionResponse:
        project = await self._lookup(interaction)
        if project is None:
            return InteractionResponse.message(FALLBACK_REPLY)
        return InteractionResponse.message(
            f"[Parts for {project.Title}]({self._base_url}{project.parts_page})"
        )

    async def submit(self, interaction: Interaction) -> InteractionResponse:
        project = await self._lookup(interaction)
        if project is None:
            return InteractionResponse.message(FALLBACK_REPLY)
        return InteractionResponse.message(
            f"[Submit here]({project.SubmissionLink}) for {project.Title}."
        )


def build_registry(directory: ProjectLister, *, base_url: str) -> CommandRegistry:
    """The service's slash commands, in registration order."""

    projects = ProjectCommands(directory, base_url=base_url)
    return CommandRegistry(
        [
            SlashCommand(
                name="beep",
                description="Send a beep.",
                handler=beep,
            ),
            SlashCommand(
                name="parts",
                description="Parts link for a project.",
                handler=projects.parts,
                options=projects.options,
            ),
            SlashCommand(
                name="submit",
                description="Submission link for a project.",
                handler=projects.submit,
                options=projects.options,
            ),
        ]
    )


__all__ = [
    "CommandRegistry",
    "FALLBACK_REPLY",
    "ProjectCommands",
    "SlashCommand",
    "beep",
    "build_registry",
    "project_option",
]

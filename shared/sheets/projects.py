"""Project records read from the website data spreadsheet."""

from __future__ import annotations

import logging
import urllib.parse
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from shared.identity import Identity
from shared.sheets.cache_service import SpreadsheetCache
from shared.sheets.row_mapper import column, map_rows

log = logging.getLogger("vvgo.sheets.projects")

DEFAULT_PROJECTS_RANGE = "Projects"


@dataclass(frozen=True, slots=True)
class Project:
    """One row of the ``Projects`` tab."""

    Name: str = ""
    Title: str = ""
    Released: bool = False
    Archived: bool = False
    Sources: str = ""
    Composers: str = ""
    Arrangers: str = ""
    Editors: str = ""
    Transcribers: str = ""
    Preparers: str = ""
    ClixBy: str = column("Clix By")
    Reviewers: str = ""
    Lyricists: str = ""
    AdditionalContent: str = column("Additional Content")
    ReferenceTrack: str = column("Reference Track")
    ChoirPronunciationGuide: str = column("Choir Pronunciation Guide")
    YoutubeLink: str = column("Youtube Link")
    YoutubeEmbed: str = column("Youtube Embed")
    SubmissionDeadline: str = column("Submission Deadline")
    SubmissionLink: str = column("Submission Link")
    Season: str = ""
    BannerLink: str = column("Banner Link")

    @property
    def parts_page(self) -> str:
        return "/parts?" + urllib.parse.urlencode({"project": self.Name})


class Projects(Sequence[Project]):
    """Ordered, immutable collection of projects."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Project] = ()) -> None:
        self._items = tuple(items)

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return Projects(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Project]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Projects):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Projects({list(self.names())!r})"

    def names(self) -> List[str]:
        return [project.Name for project in self._items]

    def with_name(self, name: str) -> Optional[Project]:
        for project in self._items:
            if project.Name == name:
                return project
        return None

    get = with_name

    def exists(self, name: str) -> bool:
        return self.with_name(name) is not None

    def sorted(self) -> "Projects":
        return Projects(sorted(self._items, key=lambda project: project.Name))

    def current(self) -> "Projects":
        return Projects(project for project in self._items if not project.Archived)

    def for_identity(self, identity: Identity) -> "Projects":
        if identity.is_elevated():
            return Projects(self._items)
        return Projects(project for project in self._items if project.Released)


def values_to_projects(values: Sequence[Sequence[object]]) -> Projects:
    return Projects(map_rows(values, Project))


class ProjectDirectory:
    """Lists projects from the cached website data spreadsheet."""

    def __init__(
        self,
        cache: SpreadsheetCache,
        spreadsheet_id: str,
        *,
        read_range: str = DEFAULT_PROJECTS_RANGE,
    ) -> None:
        self._cache = cache
        self.spreadsheet_id = spreadsheet_id
        self.read_range = read_range

    async def list_projects(self, identity: Identity) -> Projects:
        values = await self._cache.read(self.spreadsheet_id, self.read_range)
        projects = values_to_projects(values)
        visible = projects.for_identity(identity)
        log.debug(
            "projects listed",
            extra={"total": len(projects), "visible": len(visible)},
        )
        return visible


__all__ = [
    "DEFAULT_PROJECTS_RANGE",
    "Project",
    "ProjectDirectory",
    "Projects",
    "values_to_projects",
]

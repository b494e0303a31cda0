import asyncio
from collections import abc

import pytest

from shared.errors import UpstreamUnavailable
from shared.identity import Identity, Role
from shared.sheets.cache_service import SpreadsheetCache
from shared.sheets.projects import Project, ProjectDirectory, Projects, values_to_projects
from shared.testing import FakeRedis, FakeSheetsSource

VALUES = [
    ["Name", "Title", "Released", "Archived", "Clix By", "Submission Link"],
    ["03-zelda", "Zelda", "TRUE", "FALSE", "Brandon", "https://bit.ly/zelda"],
    ["01-mario", "Mario", "TRUE", "TRUE", "", ""],
    ["02-secret", "Secret", "FALSE", "FALSE", "", ""],
]


def _directory(values):
    cache = SpreadsheetCache(FakeRedis(), FakeSheetsSource(values))
    return ProjectDirectory(cache, "website-data")


def test_values_to_projects_maps_tagged_columns():
    projects = values_to_projects(VALUES)

    zelda = projects.get("03-zelda")
    assert zelda == Project(
        Name="03-zelda",
        Title="Zelda",
        Released=True,
        ClixBy="Brandon",
        SubmissionLink="https://bit.ly/zelda",
    )
    assert len(projects) == 3


def test_current_drops_archived():
    projects = values_to_projects(VALUES)

    assert projects.current().names() == ["03-zelda", "02-secret"]


def test_sorted_orders_by_name():
    projects = values_to_projects(VALUES)

    assert projects.sorted().names() == ["01-mario", "02-secret", "03-zelda"]


def test_lookup_is_exact_match():
    projects = values_to_projects(VALUES)

    assert projects.with_name("03-zelda") is not None
    assert projects.with_name("03-Zelda") is None
    assert projects.exists("01-mario")
    assert not projects.exists("")


def test_parts_page_quotes_name():
    assert Project(Name="10-hildas-healing").parts_page == "/parts?project=10-hildas-healing"
    assert Project(Name="a b&c").parts_page == "/parts?project=a+b%26c"


def test_projects_collection_behaves_like_a_sequence():
    projects = Projects([Project(Name="a"), Project(Name="b")])

    assert projects[0].Name == "a"
    assert isinstance(projects[1:], Projects)
    assert list(projects) == [Project(Name="a"), Project(Name="b")]
    assert projects == Projects([Project(Name="a"), Project(Name="b")])
    assert isinstance(projects, abc.Sequence)
    assert Project(Name="b") in projects
    assert projects.index(Project(Name="b")) == 1


def test_unreleased_hidden_from_anonymous():
    async def runner() -> None:
        projects = await _directory(VALUES).list_projects(Identity.anonymous())

        assert not projects.exists("02-secret")
        assert projects.names() == ["03-zelda", "01-mario"]

    asyncio.run(runner())


@pytest.mark.parametrize("role", [Role.PRODUCTION_TEAM, Role.EXECUTIVE_DIRECTOR])
def test_unreleased_visible_to_elevated_roles(role):
    async def runner() -> None:
        projects = await _directory(VALUES).list_projects(Identity.with_roles([role]))

        assert projects.exists("02-secret")

    asyncio.run(runner())


def test_member_role_is_not_elevated():
    identity = Identity.with_roles([Role.VERIFIED_MEMBER])

    assert identity.has_role("vvgo-member")
    assert not identity.is_elevated()
    assert not values_to_projects(VALUES).for_identity(identity).exists("02-secret")


def test_directory_reads_configured_range():
    async def runner() -> None:
        source = FakeSheetsSource(VALUES)
        cache = SpreadsheetCache(FakeRedis(), source)
        directory = ProjectDirectory(cache, "website-data", read_range="Projects!A1:Z")

        await directory.list_projects(Identity.anonymous())

        assert source.calls == [("website-data", "Projects!A1:Z")]

    asyncio.run(runner())


def test_directory_propagates_source_errors():
    async def runner() -> None:
        source = FakeSheetsSource(VALUES)
        source.error = RuntimeError("boom")
        directory = ProjectDirectory(SpreadsheetCache(FakeRedis(), source), "website-data")

        with pytest.raises(UpstreamUnavailable):
            await directory.list_projects(Identity.anonymous())

    asyncio.run(runner())

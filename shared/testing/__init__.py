"""In-memory fakes for the service's external collaborators."""

from __future__ import annotations

from shared.testing.fakes import FakeDiscordClient, FakeRedis, FakeSheetsSource

__all__ = ["FakeDiscordClient", "FakeRedis", "FakeSheetsSource"]

"""Pytest configuration for shared test fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path(source_file: Path) -> None:
    """Add the repository root to ``sys.path`` when running from subpackages."""

    for candidate in [source_file.parent, *source_file.parents]:
        shared_dir = candidate / "shared"
        if shared_dir.is_dir():
            project_root = str(candidate)
            if project_root not in sys.path:
                sys.path.insert(0, project_root)
            break


_ensure_project_root_on_path(Path(__file__).resolve())

from nacl.signing import SigningKey

from shared import health as healthmod
from shared.testing import FakeDiscordClient, FakeRedis, FakeSheetsSource
from shared.testing.environment import apply_required_test_environment

apply_required_test_environment()

HILDA_ROWS = [
    ["Name", "Title", "Released", "Archived", "Submission Link"],
    ["10-hildas-healing", "Hilda's Healing", True, False, "https://bit.ly/vvgo10submit"],
]


@pytest.fixture(autouse=True)
def _reset_health():
    healthmod.reset()
    yield
    healthmod.reset()


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey.generate()


@pytest.fixture
def public_key_hex(signing_key: SigningKey) -> str:
    return signing_key.verify_key.encode().hex()


@pytest.fixture
def sign(signing_key: SigningKey):
    """Return headers carrying a valid signature for ``body``."""

    def _sign(body: bytes, timestamp: str = "1700000000") -> dict[str, str]:
        signed = signing_key.sign(timestamp.encode("utf-8") + body)
        return {
            "X-Signature-Ed25519": signed.signature.hex(),
            "X-Signature-Timestamp": timestamp,
        }

    return _sign


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def fake_source() -> FakeSheetsSource:
    return FakeSheetsSource([list(row) for row in HILDA_ROWS])


@pytest.fixture
def fake_discord() -> FakeDiscordClient:
    return FakeDiscordClient()

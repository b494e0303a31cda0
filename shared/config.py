"""Runtime configuration helpers for the interactions service.

Values come from the environment. :func:`load_settings` captures them once in a
frozen :class:`Settings` that the application factory hands to each component.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from shared.ports import get_port
from shared.redaction import redact_config_value

__all__ = [
    "DEFAULT_CACHE_TTL_SEC",
    "DEFAULT_PUBLIC_BASE_URL",
    "DEFAULT_REDIS_URL",
    "Settings",
    "get_bot_name",
    "get_cache_ttl_sec",
    "get_config_snapshot",
    "get_discord_application_id",
    "get_discord_public_key",
    "get_discord_token",
    "get_env_name",
    "get_gspread_credentials",
    "get_projects_range",
    "get_public_base_url",
    "get_redis_url",
    "get_website_data_spreadsheet_id",
    "load_settings",
]

log = logging.getLogger("vvgo.config")

DEFAULT_CACHE_TTL_SEC = 5
DEFAULT_PUBLIC_BASE_URL = "https://vvgo.org"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_PROJECTS_RANGE = "Projects"


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


def _int_env(
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an optional integer environment variable defensively."""

    text = _env_str(key)
    if not text:
        return default

    try:
        value = int(text)
    except ValueError:
        log.warning("config: %s='%s' invalid; using default %s", key, text, default)
        return default

    if min_value is not None and value < min_value:
        log.warning("config: %s=%s < min %s; clamping", key, value, min_value)
        value = min_value

    if max_value is not None and value > max_value:
        log.warning("config: %s=%s > max %s; clamping", key, value, max_value)
        value = max_value

    return value


def get_env_name() -> str:
    return _env_str("ENV_NAME", "dev") or "dev"


def get_bot_name() -> str:
    return _env_str("BOT_NAME", "vvgo-interactions") or "vvgo-interactions"


def get_discord_public_key() -> str:
    """Hex-encoded Ed25519 application public key; empty when unset."""

    return _env_str("DISCORD_PUBLIC_KEY")


def get_discord_application_id() -> str:
    return _env_str("DISCORD_APPLICATION_ID")


def get_discord_token() -> str:
    return _env_str("DISCORD_TOKEN")


def get_website_data_spreadsheet_id() -> str:
    return _env_str("WEBSITE_DATA_SPREADSHEET_ID")


def get_projects_range() -> str:
    return _env_str("SHEETS_PROJECTS_RANGE", DEFAULT_PROJECTS_RANGE) or DEFAULT_PROJECTS_RANGE


def get_cache_ttl_sec() -> int:
    return _int_env("SHEETS_CACHE_TTL_SEC", DEFAULT_CACHE_TTL_SEC, min_value=1)


def get_redis_url() -> str:
    return _env_str("REDIS_URL", DEFAULT_REDIS_URL) or DEFAULT_REDIS_URL


def get_gspread_credentials() -> Optional[str]:
    return os.getenv("GSPREAD_CREDENTIALS") or None


def get_public_base_url() -> str:
    url = _env_str("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL) or DEFAULT_PUBLIC_BASE_URL
    return url.rstrip("/")


@dataclass(frozen=True)
class Settings:
    env_name: str = "dev"
    bot_name: str = "vvgo-interactions"
    version: str = "dev"
    port: int = 10000
    discord_public_key: str = ""
    discord_application_id: str = ""
    discord_token: str = ""
    website_data_spreadsheet_id: str = ""
    projects_range: str = DEFAULT_PROJECTS_RANGE
    cache_ttl_sec: int = DEFAULT_CACHE_TTL_SEC
    redis_url: str = DEFAULT_REDIS_URL
    gspread_credentials: Optional[str] = None
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL


def load_settings() -> Settings:
    """Read every setting from the environment."""

    settings = Settings(
        env_name=get_env_name(),
        bot_name=get_bot_name(),
        version=_env_str("BOT_VERSION", "dev") or "dev",
        port=get_port(),
        discord_public_key=get_discord_public_key(),
        discord_application_id=get_discord_application_id(),
        discord_token=get_discord_token(),
        website_data_spreadsheet_id=get_website_data_spreadsheet_id(),
        projects_range=get_projects_range(),
        cache_ttl_sec=get_cache_ttl_sec(),
        redis_url=get_redis_url(),
        gspread_credentials=get_gspread_credentials(),
        public_base_url=get_public_base_url(),
    )
    if not settings.discord_public_key:
        log.warning("DISCORD_PUBLIC_KEY not set; interaction requests will fail")
    return settings


def get_config_snapshot(settings: Settings) -> Dict[str, str]:
    """Return a display-safe view of ``settings``."""

    return {key: redact_config_value(key, value) for key, value in asdict(settings).items()}

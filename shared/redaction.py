"""Secret masking for configuration snapshots and log payloads."""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any, Callable, Mapping

__all__ = [
    "mask_secret",
    "mask_service_account",
    "redact_config_value",
    "sanitize_text",
]

_MISSING_VALUE = "—"

_DISCORD_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]{24}\.[A-Za-z0-9_-]{6}\.[A-Za-z0-9_-]{27,}")
_PRIVATE_KEY_BLOCK_RE = re.compile(r"-----BEGIN [^-]+-----.*?-----END [^-]+-----", re.DOTALL)
_GOOGLE_API_KEY_RE = re.compile(r"AIza[0-9A-Za-z\-_]{35}")
_OAUTH_TOKEN_RE = re.compile(r"ya29\.[0-9A-Za-z\-_]{20,}")
_REDIS_PASSWORD_RE = re.compile(r"(?P<prefix>rediss?://[^:/@\s]*:)(?P<secret>[^@\s]+)(?P<suffix>@)")
_SECRET_FIELD_RE = re.compile(
    r"(?P<prefix>(token|secret|credential|password)\s*[=:]\s*)(?P<secret>[^\s,;]+)",
    re.IGNORECASE,
)
_SERVICE_ACCOUNT_INLINE_RE = re.compile(
    r"\{[^{}]*\"type\"\s*:\s*\"service_account\".*?\}",
    re.DOTALL,
)

_SECRET_KEY_MARKERS = ("TOKEN", "CREDENTIAL", "SERVICE_ACCOUNT", "SECRET", "PASSWORD")


def _stable_suffix(text: str) -> str:
    digest = hashlib.sha1(text.encode("utf-8", "ignore")).hexdigest()
    return digest[:4]


def mask_secret(text: str) -> str:
    return f"***{_stable_suffix(text)}"


def mask_service_account(text: str) -> str:
    return f"***sa-json:len={len(text)}-{_stable_suffix(text)}"


def _looks_like_service_account(text: str) -> bool:
    if "service_account" not in text or "private_key" not in text:
        return False
    try:
        data = json.loads(text)
    except ValueError:
        return False
    return isinstance(data, Mapping) and str(data.get("type")) == "service_account"


def _whole(match: re.Match[str]) -> str:
    return mask_secret(match.group(0))


def _secret_group(match: re.Match[str]) -> str:
    suffix = match.groupdict().get("suffix") or ""
    return f"{match.group('prefix')}{mask_secret(match.group('secret'))}{suffix}"


_RULES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], str]], ...] = (
    (_SERVICE_ACCOUNT_INLINE_RE, lambda match: mask_service_account(match.group(0))),
    (_PRIVATE_KEY_BLOCK_RE, _whole),
    (_DISCORD_TOKEN_RE, _whole),
    (_GOOGLE_API_KEY_RE, _whole),
    (_OAUTH_TOKEN_RE, _whole),
    (_REDIS_PASSWORD_RE, _secret_group),
    (_SECRET_FIELD_RE, _secret_group),
)


def sanitize_text(value: Any) -> Any:
    if value is None:
        return value
    text = str(value)
    if not text:
        return text

    stripped = text.strip()
    if _looks_like_service_account(stripped):
        return mask_service_account(stripped)

    for pattern, replacer in _RULES:
        text = pattern.sub(replacer, text)
    return text


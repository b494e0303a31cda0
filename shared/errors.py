"""Error taxonomy shared by the interaction and sheets layers."""

from __future__ import annotations

__all__ = [
    "AuthenticationError",
    "CacheWriteFailure",
    "ConfigurationError",
    "MalformedRequestError",
    "NoDataError",
    "UnsupportedInteraction",
    "UpstreamUnavailable",
]


class ConfigurationError(RuntimeError):
    """Raised when the service is misconfigured (e.g. a missing signing key)."""


class AuthenticationError(RuntimeError):
    """Raised when an inbound request signature does not verify."""


class MalformedRequestError(ValueError):
    """Raised for missing or unparseable headers and bodies."""


class UnsupportedInteraction(ValueError):
    """Raised when an interaction type has no dispatch path."""


class UpstreamUnavailable(RuntimeError):
    """Raised when the spreadsheet source of truth cannot be read."""


class NoDataError(UpstreamUnavailable):
    """Raised when the spreadsheet source returns no rows."""

    def __init__(self, message: str = "no data") -> None:
        super().__init__(message)


class CacheWriteFailure(RuntimeError):
    """Best-effort cache write failed; logged by the cache and never propagated."""

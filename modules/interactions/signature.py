"""Ed25519 request signature checks for inbound interactions."""

from __future__ import annotations

import binascii
from typing import Mapping

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from shared.errors import AuthenticationError, ConfigurationError, MalformedRequestError

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def load_verify_key(public_key_hex: str) -> VerifyKey:
    """Decode the application public key; a bad key is a server-side fault."""

    try:
        raw = bytes.fromhex(public_key_hex or "")
    except ValueError as exc:
        raise ConfigurationError("invalid discord public key") from exc
    if not raw:
        raise ConfigurationError("invalid discord public key")
    try:
        return VerifyKey(raw)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError("invalid discord public key") from exc


def _decode_signature(value: str | None) -> bytes:
    try:
        signature = binascii.unhexlify((value or "").strip())
    except (binascii.Error, ValueError) as exc:
        raise MalformedRequestError("invalid signature") from exc
    if not signature:
        raise MalformedRequestError("invalid signature")
    return signature


def verify_request(verify_key: VerifyKey, headers: Mapping[str, str], body: bytes) -> None:
    """Check the signature over ``timestamp || body``.

    Raises :class:`MalformedRequestError` when a header is missing or cannot be
    decoded and :class:`AuthenticationError` when the signature does not match.
    """

    signature = _decode_signature(headers.get(SIGNATURE_HEADER))

    timestamp = headers.get(TIMESTAMP_HEADER) or ""
    if not timestamp:
        raise MalformedRequestError("invalid signature timestamp")

    try:
        verify_key.verify(timestamp.encode("utf-8") + body, signature)
    except (BadSignatureError, ValueError) as exc:
        raise AuthenticationError("authorization failed") from exc

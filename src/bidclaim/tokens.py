"""Stateless activation tokens shared with the main application.

Format: ``<base64(json payload)>.<hex HMAC-SHA256 of the base64 part>``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from typing import Any


class InvalidToken(Exception):
    pass


def _sign(secret: str, payload_b64: str) -> str:
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).hexdigest()


def sign_activation_token(
    secret: str,
    *,
    uid: int,
    email: str,
    name: str | None,
    credits: int = 0,
    ttl_hours: int = 24,
    extra: dict[str, Any] | None = None,
) -> str:
    payload = {
        "uid": uid,
        "email": email,
        "name": name or "User",
        "credits": credits,
        "exp": int(time.time() * 1000) + ttl_hours * 3600 * 1000,
        **(extra or {}),
    }
    payload_b64 = base64.b64encode(json.dumps(payload).encode()).decode()
    return f"{payload_b64}.{_sign(secret, payload_b64)}"


def verify_activation_token(secret: str, token: str) -> dict[str, Any]:
    """Return the payload of a valid, unexpired token or raise InvalidToken."""
    try:
        payload_b64, signature = token.rsplit(".", 1)
    except ValueError:
        raise InvalidToken("malformed token") from None
    if not hmac.compare_digest(signature, _sign(secret, payload_b64)):
        raise InvalidToken("bad signature")
    try:
        payload = json.loads(base64.b64decode(payload_b64))
    except (ValueError, TypeError) as e:
        raise InvalidToken("undecodable payload") from e
    if payload.get("exp", 0) < time.time() * 1000:
        raise InvalidToken("token expired")
    return payload

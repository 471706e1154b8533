"""
JWT-style token creation and verification.

Tokens are URL-safe base64-encoded JSON payloads signed with HMAC-SHA256.
Secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``)
once, at import time.  Audience and issuer are not checked.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import b64decode, urlsafe_b64encode

from pydantic import ValidationError

from auth.models import TokenClaims
from config.settings import config
from utils.errors import InvalidToken

_TOKEN_SECRET = config.jwt_secret.encode()
_TOKEN_EXPIRY_SECONDS = config.jwt_expiry_seconds


def _sign(raw: bytes) -> str:
    return hmac.new(_TOKEN_SECRET, raw, hashlib.sha256).hexdigest()


def create_token(user_id: int, username: str) -> str:
    """Create a signed token carrying ``user_id``, ``username`` and expiry."""
    payload = {
        "user_id": user_id,
        "username": username,
        "exp": int(time.time()) + _TOKEN_EXPIRY_SECONDS,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(raw)


def verify_token(token: str) -> TokenClaims:
    """
    Verify token and return its claims.

    Raises ``InvalidToken`` on any failure; the cause is never exposed.
    """
    try:
        encoded, sig = token.split(".", 1)
        raw = b64decode(encoded, altchars=b"-_", validate=True)
        if urlsafe_b64encode(raw).decode() != encoded:
            raise InvalidToken()
        if not hmac.compare_digest(sig, _sign(raw)):
            raise InvalidToken()
        claims = TokenClaims.model_validate_json(raw)
    except (ValueError, TypeError, binascii.Error, ValidationError) as exc:
        raise InvalidToken() from exc

    if not time.time() < claims.exp:
        raise InvalidToken()
    return claims

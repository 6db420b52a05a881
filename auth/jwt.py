"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256::

    <base64url(json({"id": ..., "exp": ...}))>.<hex hmac-sha256>

Verification is stateless: there is no server-side session table, so a
token stays valid until ``exp`` passes.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

DEFAULT_EXPIRY_SECONDS = 3600


class InvalidTokenError(Exception):
    """Raised for malformed, tampered or expired tokens."""


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(self, secret: str, expiry_seconds: int = DEFAULT_EXPIRY_SECONDS) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str, now: Optional[float] = None) -> str:
        """Create a signed token containing ``id`` and expiry."""
        issued_at = time.time() if now is None else now
        payload = {
            "id": str(user_id),
            "exp": int(issued_at) + self.expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Verify *token* and return its claims.

        Signature and expiry are checked together; any failure raises
        ``InvalidTokenError`` and no claim is returned.
        """
        try:
            body, sig = token.split(".", 1)
            raw = urlsafe_b64decode(body.encode())
            if not hmac.compare_digest(sig, self._sign(raw)):
                raise InvalidTokenError("bad signature")
            payload = json.loads(raw)
            exp = payload["exp"]
            if not isinstance(exp, (int, float)) or isinstance(exp, bool):
                raise InvalidTokenError("bad expiry")
            if exp <= (time.time() if now is None else now):
                raise InvalidTokenError("token expired")
            if not payload.get("id"):
                raise InvalidTokenError("missing id claim")
            return payload
        except InvalidTokenError:
            raise
        except (AttributeError, ValueError, TypeError, KeyError, binascii.Error) as exc:
            raise InvalidTokenError(f"malformed token: {exc}") from exc

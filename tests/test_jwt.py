"""
Tests for token issuance and verification.
"""

import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.jwt import InvalidTokenError, TokenService


def _flip_last(text: str) -> str:
    return text[:-1] + ("0" if text[-1] != "0" else "1")


class TestTokenService:
    def setup_method(self):
        self.tokens = TokenService("unit-test-secret")

    def test_round_trip_returns_same_id(self):
        token = self.tokens.issue("user-123")
        claims = self.tokens.verify(token)
        assert claims["id"] == "user-123"

    def test_expiry_is_one_hour(self):
        now = 1_700_000_000
        token = self.tokens.issue("u", now=now)
        claims = self.tokens.verify(token, now=now + 1)
        assert claims["exp"] == now + 3600

    def test_flipped_signature_rejected(self):
        token = self.tokens.issue("user-123")
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(_flip_last(token))

    def test_expired_token_rejected(self):
        token = self.tokens.issue("user-123", now=time.time() - 7200)
        with pytest.raises(InvalidTokenError, match="expired"):
            self.tokens.verify(token)

    def test_token_rejected_exactly_at_expiry(self):
        token = self.tokens.issue("u", now=1000)
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(token, now=1000 + 3600)

    def test_other_secret_rejected(self):
        token = TokenService("another-secret").issue("user-123")
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(token)

    def test_tampered_payload_rejected(self):
        token = self.tokens.issue("user-123")
        body, sig = token.split(".", 1)
        payload = json.loads(urlsafe_b64decode(body))
        payload["id"] = "someone-else"
        forged = urlsafe_b64encode(json.dumps(payload).encode()).decode() + "." + sig
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(forged)

    @pytest.mark.parametrize(
        "token",
        ["", "no-dot-here", "!!!.abc", "e30=.", ".deadbeef", "a.b.c", "é.é"],
    )
    def test_malformed_rejected(self, token):
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(token)

    def test_signed_payload_without_exp_rejected(self):
        raw = json.dumps({"id": "u"}).encode()
        forged = urlsafe_b64encode(raw).decode() + "." + self.tokens._sign(raw)
        with pytest.raises(InvalidTokenError):
            self.tokens.verify(forged)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService("")

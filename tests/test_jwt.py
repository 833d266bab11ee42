"""
Tests for TokenService issue / verify.
"""

import time

import jwt
import pytest

from auth.errors import TokenExpired, TokenInvalid
from auth.jwt import TokenService

SECRET = "token-service-secret-0123456789abcdef"


def _tamper_signature(token: str) -> str:
    head, sig = token.rsplit(".", 1)
    first = "A" if sig[0] != "A" else "B"
    return f"{head}.{first}{sig[1:]}"


class TestTokenService:
    def test_issue_and_verify_round_trip(self):
        tokens = TokenService(SECRET)
        token = tokens.issue("user-123")
        assert tokens.verify(token) == "user-123"

    def test_default_expiry_is_seven_days(self):
        tokens = TokenService(SECRET)
        payload = jwt.decode(tokens.issue("u"), SECRET, algorithms=["HS256"])
        assert payload["exp"] - payload["iat"] == 7 * 86400

    def test_configured_expiry(self):
        tokens = TokenService(SECRET, expiry_seconds=60)
        payload = jwt.decode(tokens.issue("u"), SECRET, algorithms=["HS256"])
        assert payload["exp"] - payload["iat"] == 60

    def test_expired_token(self):
        tokens = TokenService(SECRET)
        token = tokens.issue("user-123", expires_in=-10)
        with pytest.raises(TokenExpired):
            tokens.verify(token)

    def test_altered_signature(self):
        tokens = TokenService(SECRET)
        token = _tamper_signature(tokens.issue("user-123"))
        with pytest.raises(TokenInvalid):
            tokens.verify(token)

    def test_other_secret(self):
        token = TokenService("another-secret-0123456789abcdefghij").issue("user-123")
        with pytest.raises(TokenInvalid):
            TokenService(SECRET).verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token(self, token):
        with pytest.raises(TokenInvalid):
            TokenService(SECRET).verify(token)

    def test_token_without_account_id(self):
        now = int(time.time())
        token = jwt.encode({"iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            TokenService(SECRET).verify(token)

    def test_expired_and_invalid_messages_differ(self):
        assert TokenExpired().message != TokenInvalid().message
        assert TokenExpired().status_code == TokenInvalid().status_code == 401

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService("")

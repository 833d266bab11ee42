"""
Tests for the route guard: token resolution and the bearer security scheme.
"""

from unittest.mock import MagicMock

import pytest

from auth.dependencies import authenticate_token
from auth.errors import NoToken, TokenExpired, TokenInvalid, UnexpectedError


class TestAuthenticateToken:
    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, tokens, token):
        with pytest.raises(NoToken) as info:
            authenticate_token(token, tokens)
        assert info.value.message == "No token provided. Please log in."

    def test_valid_token(self, tokens):
        assert authenticate_token(tokens.issue("user-1"), tokens) == "user-1"

    def test_expired_token(self, tokens):
        token = tokens.issue("user-1", expires_in=-5)
        with pytest.raises(TokenExpired):
            authenticate_token(token, tokens)

    def test_invalid_token(self, tokens):
        with pytest.raises(TokenInvalid):
            authenticate_token("not-a-jwt", tokens)

    def test_unexpected_failure(self):
        broken = MagicMock()
        broken.verify.side_effect = RuntimeError("boom")
        with pytest.raises(UnexpectedError) as info:
            authenticate_token("x", broken)
        assert info.value.message == "Authentication error"
        assert info.value.status_code == 500
        assert info.value.detail == "boom"


class TestBearerScheme:
    def test_openapi_declares_bearer_scheme(self, app):
        schema = app.openapi()
        schemes = schema["components"]["securitySchemes"]
        assert schemes["HTTPBearer"]["type"] == "http"
        assert schemes["HTTPBearer"]["scheme"].lower() == "bearer"

    def test_profile_routes_are_marked_protected(self, app):
        paths = app.openapi()["paths"]
        assert paths["/api/auth/me"]["get"]["security"] == [{"HTTPBearer": []}]
        assert paths["/api/auth/me"]["put"]["security"] == [{"HTTPBearer": []}]
        assert "security" not in paths["/api/auth/login"]["post"]
        assert "security" not in paths["/api/auth/register"]["post"]

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer", "abc"])
    def test_non_bearer_headers_count_as_no_token(self, client, header):
        response = client.get("/api/auth/me", headers={"Authorization": header})
        assert response.status_code == 401
        assert response.json() == {"message": "No token provided. Please log in."}

    def test_lowercase_scheme_is_accepted(self, client, tokens):
        user_id = client.post(
            "/api/auth/register",
            json={"name": "Ann", "email": "ann@x.com", "password": "secret1"},
        ).json()["user"]["id"]
        response = client.get("/api/auth/me", headers={"Authorization": f"bearer {tokens.issue(user_id)}"})
        assert response.status_code == 200

"""
JWT token creation and verification.

Tokens are HS256 JSON Web Tokens carrying the account ``id`` plus ``iat`` /
``exp`` claims.  The signing secret is handed to :class:`TokenService` when
the application is built (see ``main.create_app``); nothing here reads the
environment.
"""

from __future__ import annotations

import time
from typing import Optional

import jwt

from auth.errors import TokenExpired, TokenInvalid

DEFAULT_EXPIRY_SECONDS = 86400 * 7


class TokenService:
    """Issue and verify stateless bearer tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("A token signing secret must be provided")
        self._secret = secret
        self._algorithm = algorithm
        self.expiry_seconds = expiry_seconds

    def issue(self, user_id: str, *, expires_in: Optional[int] = None) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        now = int(time.time())
        lifetime = self.expiry_seconds if expires_in is None else expires_in
        payload = {
            "id": str(user_id),
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Verify token and return the embedded account id.

        Raises ``TokenExpired`` once ``exp`` has passed and ``TokenInvalid``
        for anything malformed, tampered with or signed by another key.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(detail=str(exc)) from exc

        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalid(detail="token has no account id")
        return user_id

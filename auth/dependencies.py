"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_auth_service`` and ``get_current_user_id``;
the latter is the route guard applied to every protected route.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import AuthError, NoToken, UnexpectedError
from auth.jwt import TokenService
from auth.service import AuthService
from database.session import get_db_session

logger = logging.getLogger(__name__)

# auto_error=False so a missing token is reported as NoToken, not FastAPI's 403
_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def authenticate_token(token: Optional[str], tokens: TokenService) -> str:
    """
    Resolve a bearer token to an account id.

    Raises ``NoToken``, ``TokenExpired`` or ``TokenInvalid``; anything else
    going wrong is reported as ``UnexpectedError``.
    """
    if not token:
        raise NoToken()
    try:
        return tokens.verify(token)
    except AuthError:
        raise
    except Exception as exc:
        logger.exception("Token verification failed unexpectedly")
        raise UnexpectedError("Authentication error", detail=str(exc)) from exc


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """
    Verify the Bearer token, returning the authenticated ``user_id``
    (UUID string).  The id is also left on ``request.state``.
    """
    tokens: TokenService = request.app.state.auth_service.tokens
    try:
        user_id = authenticate_token(credentials.credentials if credentials else None, tokens)
    except AuthError as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        raise
    request.state.user_id = user_id
    return user_id

"""
Auth API routes — register, login, current-user profile.

Route prefix: /api/auth
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Dict, Iterator, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from auth.avatars import AvatarUpload
from auth.dependencies import db_session, get_auth_service, get_current_user_id
from auth.errors import AuthError, UnexpectedError
from auth.service import AuthService
from database.users import public_profile

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────

# Presence is checked by AuthService so that missing fields get the same
# messages as empty ones.


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    id: str
    name: str
    email: str
    avatarUrl: str = ""


class AuthResponse(BaseModel):
    message: str
    token: str
    user: PublicUser


class UserResponse(BaseModel):
    message: str
    user: PublicUser


@contextlib.contextmanager
def _unexpected_as(message: str) -> Iterator[None]:
    """Re-raise anything that is not an ``AuthError`` as ``UnexpectedError``."""
    try:
        yield
    except AuthError:
        raise
    except Exception as exc:
        logger.exception("%s", message)
        raise UnexpectedError(message, detail=str(exc)) from exc


# ── Public endpoints ───────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user."""
    with _unexpected_as("Error during registration"):
        token, user = await service.register(session, req.name, req.email, req.password)

    return {
        "message": "User registered successfully",
        "token": token,
        "user": public_profile(user),
    }


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    with _unexpected_as("Error during login"):
        token, user = await service.login(session, req.email, req.password)

    return {
        "message": "Login successful",
        "token": token,
        "user": public_profile(user),
    }


# ── Protected endpoints ────────────────────────────────────────────────


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Return the authenticated user's profile."""
    with _unexpected_as("Error retrieving user data"):
        user = await service.get_profile(session, user_id)

    return {
        "message": "User data retrieved successfully",
        "user": public_profile(user),
    }


@router.put("/me", response_model=UserResponse)
async def update_me(
    user_id: str = Depends(get_current_user_id),
    name: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(db_session),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Update name and/or avatar (multipart form)."""
    with _unexpected_as("Error updating profile"):
        upload = None
        if avatar is not None and avatar.filename:
            upload = AvatarUpload(
                filename=avatar.filename,
                content_type=avatar.content_type,
                # one byte past the limit is enough to reject it
                data=await avatar.read(service.avatars.max_bytes + 1),
            )
        user = await service.update_profile(
            session,
            user_id,
            name=name or None,
            avatar=upload,
        )

    return {
        "message": "Profile updated successfully",
        "user": public_profile(user),
    }

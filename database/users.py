"""
User record store — create, look up and update ``User`` rows.

Email uniqueness is enforced by the unique index on ``users.email``; a
violation at flush time is reported as ``DuplicateEmail``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from auth.errors import DuplicateEmail
from database.models import User
from utils.validators import normalize_email, normalize_name, validate_account_fields

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def public_profile(user: User) -> Dict[str, Any]:
    """Client-safe view of a user (never includes the password hash)."""
    return {
        "id": str(user.user_id),
        "name": user.name,
        "email": user.email,
        "avatarUrl": user.avatar_url or "",
    }


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
) -> User:
    """Insert a new ``User``; raises ``ValidationError`` / ``DuplicateEmail``."""
    validate_account_fields(name=name, email=email)

    user = User(
        user_id=uuid.uuid4(),
        name=normalize_name(name),
        email=normalize_email(email),
        password_hash=password_hash,
        avatar_url="",
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        logger.info("Duplicate registration rejected for %s", user.email)
        raise DuplicateEmail() from exc
    return user


async def find_user_by_email(
    session: AsyncSession,
    email: str,
    *,
    include_password: bool = False,
) -> Optional[User]:
    """Case-insensitive lookup; ``include_password`` loads ``password_hash``."""
    stmt = select(User).where(User.email == normalize_email(email))
    if include_password:
        stmt = stmt.options(undefer(User.password_hash))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def find_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    uid = _to_uuid(user_id)
    if uid is None:
        return None
    result = await session.execute(select(User).where(User.user_id == uid))
    return result.scalar_one_or_none()


async def update_user(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    *,
    name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Optional[User]:
    """
    Apply only the supplied fields and re-validate them.

    Returns ``None`` when ``user_id`` does not resolve.
    """
    if name is not None:
        validate_account_fields(name=name, check_email=False)

    user = await find_user_by_id(session, user_id)
    if user is None:
        return None

    if name is not None:
        user.name = normalize_name(name)
    if avatar_url is not None:
        user.avatar_url = avatar_url
    await session.flush()
    return user

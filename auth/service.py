"""
Auth gateway — register, login and profile operations.

Framework-independent: takes an ``AsyncSession`` and returns ``User`` rows
or raises :mod:`auth.errors` exceptions.  ``auth/routes.py`` adapts it to
HTTP.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from auth.avatars import AvatarStorage, AvatarUpload
from auth.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from auth.jwt import TokenService
from auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from database.models import User
from database.users import create_user, find_user_by_email, find_user_by_id, update_user
from utils.validators import missing_field_errors, validate_account_fields

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        tokens: TokenService,
        avatars: AvatarStorage,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self.tokens = tokens
        self.avatars = avatars
        self.bcrypt_rounds = bcrypt_rounds
        # Verified against when the email is unknown so that both login
        # failure paths spend the same bcrypt time.
        self._dummy_hash = hash_password("flexora-dummy-password", bcrypt_rounds)

    async def register(
        self,
        session: AsyncSession,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> Tuple[str, User]:
        """Create an account and return ``(token, user)``."""
        missing = missing_field_errors(name=name, email=email, password=password)
        if missing:
            raise ValidationError(
                "Please provide all required fields (name, email, password)",
                errors=missing,
            )

        validate_account_fields(name=name, email=email, password=password, check_password=True)

        if await find_user_by_email(session, email) is not None:
            raise DuplicateEmail()

        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)
        user = await create_user(session, name, email, password_hash)
        await session.commit()

        token = self.tokens.issue(str(user.user_id))
        logger.info("Registered user %s (%s)", user.email, user.user_id)
        return token, user

    async def login(
        self,
        session: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> Tuple[str, User]:
        """Check credentials and return ``(token, user)``."""
        missing = missing_field_errors(email=email, password=password)
        if missing:
            raise ValidationError("Please provide email and password", errors=missing)

        user = await find_user_by_email(session, email, include_password=True)
        stored_hash = user.password_hash if user is not None else self._dummy_hash
        matches = await asyncio.to_thread(verify_password, password, stored_hash)

        if user is None or not matches:
            logger.info("Failed login for %s", email.strip().lower())
            raise InvalidCredentials()

        token = self.tokens.issue(str(user.user_id))
        logger.info("Login: %s (%s)", user.email, user.user_id)
        return token, user

    async def get_profile(self, session: AsyncSession, user_id: str) -> User:
        user = await find_user_by_id(session, user_id)
        if user is None:
            raise NotFound()
        return user

    async def update_profile(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        name: Optional[str] = None,
        avatar: Optional[AvatarUpload] = None,
    ) -> User:
        """Update ``name`` and/or store a new avatar for the account."""
        current = await find_user_by_id(session, user_id)
        if current is None:
            raise NotFound()
        previous_avatar = current.avatar_url

        if name is not None:
            validate_account_fields(name=name, check_email=False)

        avatar_url = None
        if avatar is not None:
            avatar_url = await self.avatars.save(user_id, avatar)

        try:
            user = await update_user(session, user_id, name=name, avatar_url=avatar_url)
            if user is None:
                raise NotFound()
            await session.commit()
        except Exception:
            if avatar_url is not None:
                await self.avatars.delete(avatar_url)
            raise

        if avatar_url is not None and previous_avatar:
            await self.avatars.delete(previous_avatar)

        logger.info("Updated profile for %s", user_id)
        return user

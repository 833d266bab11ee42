"""
Application settings loaded from environment variables.

``DATABASE_URL`` and ``JWT_SECRET`` have no defaults: constructing
``Settings`` without them raises, so the server refuses to start.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def parse_duration(value: Any) -> int:
    """Convert ``3600`` / ``"3600"`` / ``"7d"`` / ``"12h"`` into seconds."""
    if isinstance(value, bool):
        raise ValueError("duration must be a number of seconds or e.g. '7d'")
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"invalid duration {value!r}; use seconds or e.g. '7d', '12h'")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit.lower()]


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(..., min_length=1)

    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = Field(..., min_length=1)     # HMAC secret for auth tokens
    jwt_expire: int = 604800                        # 7 days; accepts "7d", "12h", …
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # ── Avatars ──────────────────────────────────────────────────────────
    upload_dir: str = "uploads"
    avatar_max_bytes: int = 5 * 1024 * 1024

    # ── Server ───────────────────────────────────────────────────────────
    environment: str = "development"
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("jwt_expire", mode="before")
    @classmethod
    def _parse_jwt_expire(cls, value: Any) -> int:
        return parse_duration(value)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()

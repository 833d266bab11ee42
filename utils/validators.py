"""
Field validators for user accounts.

Each ``*_errors`` helper returns every message that applies to its field;
``validate_account_fields`` concatenates them so callers can report all
violations at once.
"""

from __future__ import annotations

import re
from typing import List, Optional

from auth.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def normalize_name(name: str) -> str:
    return name.strip()


def normalize_email(email: str) -> str:
    return email.strip().lower()


MISSING_FIELD_MESSAGES = {
    "name": "Please provide a name",
    "email": "Please provide an email",
    "password": "Please provide a password",
}


def missing_field_errors(**fields: Optional[str]) -> List[str]:
    """Messages for every field that is absent or empty, in argument order."""
    return [MISSING_FIELD_MESSAGES[field] for field, value in fields.items() if not value]


def name_errors(name: Optional[str]) -> List[str]:
    if name is None or not normalize_name(name):
        return [MISSING_FIELD_MESSAGES["name"]]
    length = len(normalize_name(name))
    if length < NAME_MIN_LENGTH:
        return [f"Name must be at least {NAME_MIN_LENGTH} characters"]
    if length > NAME_MAX_LENGTH:
        return [f"Name cannot exceed {NAME_MAX_LENGTH} characters"]
    return []


def email_errors(email: Optional[str]) -> List[str]:
    if email is None or not normalize_email(email):
        return [MISSING_FIELD_MESSAGES["email"]]
    if not EMAIL_RE.match(normalize_email(email)):
        return ["Please provide a valid email address"]
    return []


def password_errors(password: Optional[str]) -> List[str]:
    if not password:
        return [MISSING_FIELD_MESSAGES["password"]]
    if len(password) < PASSWORD_MIN_LENGTH:
        return [f"Password must be at least {PASSWORD_MIN_LENGTH} characters"]
    if len(password.encode()) > PASSWORD_MAX_BYTES:
        return [f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes"]
    return []


def validate_account_fields(
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    check_name: bool = True,
    check_email: bool = True,
    check_password: bool = False,
) -> None:
    """Raise ``ValidationError`` listing every violated field."""
    errors: List[str] = []
    if check_name:
        errors.extend(name_errors(name))
    if check_email:
        errors.extend(email_errors(email))
    if check_password:
        errors.extend(password_errors(password))
    if errors:
        raise ValidationError(errors=errors)

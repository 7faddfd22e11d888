"""Input validation for user records."""

from __future__ import annotations

import re

from user_service.exceptions import ValidationError
from user_service.models import User

EMAIL_MIN_LENGTH = 3
EMAIL_MAX_LENGTH = 254

_EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def is_email_valid(email: str) -> bool:
    """Return True when ``email`` matches the address grammar and length bound."""
    if not EMAIL_MIN_LENGTH <= len(email) <= EMAIL_MAX_LENGTH:
        return False
    return _EMAIL_PATTERN.fullmatch(email) is not None


def validate_user(user: User) -> None:
    """Validate a user record before it is written.

    Rules are checked in order and the first failure wins.

    Args:
        user: The record to validate.

    Raises:
        ValidationError: With the reason of the first failed rule.
    """
    if not user.email:
        raise ValidationError("email is required", field="email")
    if not is_email_valid(user.email):
        raise ValidationError("invalid email format", field="email")
    if not user.first_name:
        raise ValidationError("first name is required", field="firstName")
    if not user.last_name:
        raise ValidationError("last name is required", field="lastName")

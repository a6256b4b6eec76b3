"""Input validation for registration and login.

Learn: These run before the service touches the database and collect
every problem at once, so the client gets one 400 with a list of
messages instead of fixing fields one round trip at a time.
All functions accept Any and treat non-strings as invalid.
"""

import re
from typing import Any, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 255  # users.email is VARCHAR(255)
USERNAME_MAX_LENGTH = 50


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email.strip()))


def is_valid_password(password: Any, min_length: int = 6, require_strong: bool = True) -> bool:
    """Length check, plus one letter and one digit in strict mode."""
    if not isinstance(password, str) or len(password) < min_length:
        return False
    if require_strong:
        has_letter = any(c.isalpha() for c in password)
        has_digit = any(c.isdigit() for c in password)
        return has_letter and has_digit
    return True


def validate_registration(
    email: Any,
    password: Any,
    username: Any = None,
    min_length: int = 6,
    require_strong: bool = True,
) -> list[str]:
    """Return a list of human-readable errors (empty when valid)."""
    errors = []

    if not email or not isinstance(email, str) or not email.strip():
        errors.append("Email is required.")
    elif not is_valid_email(email):
        errors.append("Email must be a valid email address.")
    elif len(normalize_email(email)) > EMAIL_MAX_LENGTH:
        errors.append(f"Email must be {EMAIL_MAX_LENGTH} characters or fewer.")

    if not password or not isinstance(password, str):
        errors.append("Password is required.")
    elif len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters long.")
    elif not is_valid_password(password, min_length, require_strong):
        errors.append("Password must contain at least one letter and one number.")

    if username is not None:
        if not isinstance(username, str) or not username.strip():
            errors.append("Username must be a non-empty string.")
        elif len(username.strip()) > USERNAME_MAX_LENGTH:
            errors.append(f"Username must be {USERNAME_MAX_LENGTH} characters or fewer.")

    return errors


def validate_login(email: Any, password: Any) -> list[str]:
    errors = []
    if not email or not isinstance(email, str):
        errors.append("Email is required.")
    if not password or not isinstance(password, str):
        errors.append("Password is required.")
    return errors


def clean_username(username: Optional[str]) -> Optional[str]:
    if username is None:
        return None
    return username.strip() or None

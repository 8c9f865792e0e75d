"""
Input rules for users and posts.

Each check returns every violated rule rather than stopping at the
first, so callers get one message per problem.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from postboard.core.errors import ValidationFailed
from postboard.core.models import PostInput, UserInput

MIN_PASSWORD_LENGTH = 5
MIN_TEXT_LENGTH = 5


def normalize_email(value: str) -> str | None:
    """
    The canonical, lower-cased form of a bare address, or None if invalid.

    Display-name forms ("Name <a@x.com>") are rejected; surrounding
    whitespace is dropped.
    """
    try:
        result = validate_email(
            value.strip(),
            check_deliverability=False,
            allow_display_name=False,
        )
    except EmailNotValidError:
        return None
    return result.normalized.lower()


def is_email(value: str) -> bool:
    return normalize_email(value) is not None


def _too_short(value: str | None, minimum: int) -> bool:
    return not value or len(value) < minimum


def user_input_errors(data: UserInput) -> list[str]:
    errors = []
    if not is_email(data.email):
        errors.append("Email is invalid.")
    if _too_short(data.password, MIN_PASSWORD_LENGTH):
        errors.append("Password is missing or too short.")
    return errors


def post_input_errors(data: PostInput) -> list[str]:
    errors = []
    if _too_short(data.title, MIN_TEXT_LENGTH):
        errors.append("Title is missing or too short.")
    if _too_short(data.content, MIN_TEXT_LENGTH):
        errors.append("Content is missing or too short.")
    return errors


def validate_user_input(data: UserInput) -> None:
    """Raise ValidationFailed (422) listing every violated rule."""
    errors = user_input_errors(data)
    if errors:
        raise ValidationFailed(errors)


def validate_post_input(data: PostInput) -> None:
    """Raise ValidationFailed (422) listing every violated rule."""
    errors = post_input_errors(data)
    if errors:
        raise ValidationFailed(errors)

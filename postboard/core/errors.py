"""
Operation errors.

Every failure a resolver raises is an OperationError. The API boundary
turns it into the public error shape:

    {"message": str, "status": int, "data": list | null}

An error without a status (e.g. Conflict) is reported as 500.
"""

from __future__ import annotations

from typing import Any


DEFAULT_STATUS = 500


class OperationError(Exception):
    """Base class for resolver failures."""

    status: int | None = None
    default_message: str = "An error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        data: list[dict[str, Any]] | None = None,
    ):
        self.message = message or self.default_message
        if status is not None:
            self.status = status
        self.data = data
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        """The carried status, or 500 when none was set."""
        return self.status or DEFAULT_STATUS

    def to_payload(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status_code,
            "data": self.data,
        }


# =============================================================================
# Taxonomy
# =============================================================================


class ValidationFailed(OperationError):
    """Input failed one or more rules. `data` lists one message per rule."""
    status = 422
    default_message = "Invalid input."

    def __init__(self, messages: list[str], message: str | None = None):
        super().__init__(message, data=[{"message": m} for m in messages])

    @property
    def messages(self) -> list[str]:
        return [item["message"] for item in self.data or []]


class Unauthenticated(OperationError):
    status = 401
    default_message = "Not authenticated."


class Forbidden(OperationError):
    status = 403
    default_message = "Not authorized."


class NotFound(OperationError):
    status = 404
    default_message = "Not found."


class Conflict(OperationError):
    """Duplicate state. Carries no status on purpose, so it maps to 500."""
    default_message = "Conflict."


# =============================================================================
# Concrete errors
# =============================================================================


class UserExists(Conflict):
    default_message = "User already exists."


class UserNotFound(Unauthenticated):
    default_message = "User not found."


class InvalidCredentials(Unauthenticated):
    default_message = "Password is incorrect."


class PostNotFound(NotFound):
    default_message = "No post found."


class ProfileNotFound(NotFound):
    default_message = "No user found."

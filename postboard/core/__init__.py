"""
Core models, errors and helpers.
"""

from postboard.core.errors import (
    OperationError,
    ValidationFailed,
    Unauthenticated,
    Forbidden,
    NotFound,
    Conflict,
    UserExists,
    UserNotFound,
    InvalidCredentials,
    PostNotFound,
    ProfileNotFound,
)
from postboard.core.models import (
    UserRecord,
    PostRecord,
    UserInput,
    PostInput,
    UserView,
    PostView,
    PostPage,
    LoginResult,
)
from postboard.core.utils import generate_id, utc_now

__all__ = [
    # Errors
    "OperationError",
    "ValidationFailed",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
    "Conflict",
    "UserExists",
    "UserNotFound",
    "InvalidCredentials",
    "PostNotFound",
    "ProfileNotFound",
    # Models
    "UserRecord",
    "PostRecord",
    "UserInput",
    "PostInput",
    "UserView",
    "PostView",
    "PostPage",
    "LoginResult",
    # Utils
    "generate_id",
    "utc_now",
]

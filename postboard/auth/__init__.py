"""
Authentication and authorization.

Flow for every request:
1. IdentityMiddleware reads the bearer token and attaches an AuthContext
2. The resolver calls require_authenticated / require_owner before acting
3. Failures surface as 401 / 403 operation errors
"""

from postboard.auth.context import AuthContext, extract_identity
from postboard.auth.middleware import IdentityMiddleware, get_auth_context
from postboard.auth.policies import require_authenticated, require_owner
from postboard.auth.passwords import hash_password, verify_password
from postboard.auth.tokens import (
    IdentityClaim,
    InvalidToken,
    ExpiredToken,
    SigningKeyProvider,
    StaticKeyProvider,
    TokenCodec,
    get_token_codec,
)

__all__ = [
    # Identity
    "AuthContext",
    "extract_identity",
    "IdentityMiddleware",
    "get_auth_context",
    # Guard
    "require_authenticated",
    "require_owner",
    # Passwords
    "hash_password",
    "verify_password",
    # Tokens
    "IdentityClaim",
    "InvalidToken",
    "ExpiredToken",
    "SigningKeyProvider",
    "StaticKeyProvider",
    "TokenCodec",
    "get_token_codec",
]

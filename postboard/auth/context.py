"""
Auth context - who is making this request.

The identity extractor turns an Authorization header into an AuthContext.
It never rejects a request: a missing or bad credential simply yields an
anonymous context, and each operation decides whether that is enough.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from postboard.auth.tokens import InvalidToken, TokenCodec

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


@dataclass(frozen=True)
class AuthContext:
    """
    Identity fact attached to a request.

    Usage in resolvers:
        require_authenticated(ctx)
        user = await store.find_user_by_id(ctx.caller_id)
    """

    caller_id: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Is there a verified caller?"""
        return self.caller_id is not None

    @classmethod
    def anonymous(cls) -> AuthContext:
        """Create an unauthenticated context."""
        return cls()


def extract_identity(authorization: str | None, codec: TokenCodec) -> AuthContext:
    """
    Resolve an Authorization header value into an AuthContext.

    Handles:
    - No header -> anonymous
    - Wrong scheme, missing or extra parts -> anonymous
    - Token failing verification -> anonymous
    - Verified token -> authenticated as the token's user
    """
    if not authorization:
        return AuthContext.anonymous()

    parts = authorization.split()
    if len(parts) != 2 or parts[0] != BEARER_PREFIX:
        logger.debug("Ignoring malformed Authorization header")
        return AuthContext.anonymous()

    try:
        claim = codec.verify(parts[1])
    except InvalidToken as e:
        logger.debug(f"Rejected bearer token: {e}")
        return AuthContext.anonymous()

    return AuthContext(caller_id=claim.user_id, email=claim.email)

# =============================================================================
# Token Codec
# =============================================================================
#
# Signed, time-limited identity tokens:
#   - Token issuing (HS256 JWT, 1 hour lifetime by default)
#   - Token verification
#   - Pluggable signing keys (the "kid" header names the key)
#
# There is no revocation list: a token stays valid until it expires.
#
# =============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import logging

from pydantic import BaseModel
import jwt

from postboard.config import Settings, get_settings
from postboard.core.utils import utc_now

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


# =============================================================================
# Models
# =============================================================================

class IdentityClaim(BaseModel):
    """The identity carried inside a token."""
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


# =============================================================================
# Errors
# =============================================================================

class InvalidToken(Exception):
    """Token is malformed, tampered with, signed by an unknown key, or expired."""
    pass


class ExpiredToken(InvalidToken):
    """Token was valid but its expiry has passed."""
    pass


# =============================================================================
# Signing Keys
# =============================================================================

class SigningKeyProvider(ABC):
    """
    Source of signing secrets.

    New tokens are signed with the active key. Verification looks the key
    up by the token's "kid" header, so retired keys can stay verifiable
    while a new one takes over.
    """

    @property
    @abstractmethod
    def active_key_id(self) -> str:
        """Key id used to sign new tokens."""
        pass

    @abstractmethod
    def get_key(self, key_id: str) -> str | None:
        """Return the secret for a key id, or None if unknown."""
        pass


class StaticKeyProvider(SigningKeyProvider):
    """Keys held in memory, typically loaded from settings."""

    def __init__(self, keys: dict[str, str], active_key_id: str):
        if active_key_id not in keys:
            raise ValueError(f"Active key '{active_key_id}' is not among the provided keys")
        if not keys[active_key_id]:
            raise ValueError("Signing secret must not be blank")
        self._keys = dict(keys)
        self._active_key_id = active_key_id

    @property
    def active_key_id(self) -> str:
        return self._active_key_id

    def get_key(self, key_id: str) -> str | None:
        return self._keys.get(key_id)

    @classmethod
    def from_settings(cls, settings: Settings) -> StaticKeyProvider:
        return cls({settings.jwt_key_id: settings.jwt_secret_key}, settings.jwt_key_id)


# =============================================================================
# Codec
# =============================================================================

class TokenCodec:
    """
    Issues and verifies identity tokens.

    Usage:
        codec = TokenCodec(StaticKeyProvider({"k1": "secret"}, "k1"))
        token = codec.issue(user.id, user.email)
        claim = codec.verify(token)  # raises InvalidToken
    """

    def __init__(
        self,
        keys: SigningKeyProvider,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=1),
    ):
        self.keys = keys
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user_id: str, email: str, issued_at: datetime | None = None) -> str:
        """Create a token for this identity, expiring exactly one lifetime after issuance."""
        now = issued_at or utc_now()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + self.lifetime,
        }
        key_id = self.keys.active_key_id
        return jwt.encode(
            payload,
            self.keys.get_key(key_id),
            algorithm=self.algorithm,
            headers={"kid": key_id},
        )

    def verify(self, token: str) -> IdentityClaim:
        """
        Decode and validate a token.

        Returns:
            The claim exactly as it was signed

        Raises:
            ExpiredToken: Token has expired
            InvalidToken: Token is malformed, tampered with or signed by an unknown key
        """
        if not token or not isinstance(token, str):
            raise InvalidToken("Token is empty")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Malformed token: {e}")

        key_id = header.get("kid")
        key = self.keys.get_key(key_id) if isinstance(key_id, str) else None
        if key is None:
            raise InvalidToken(f"Unknown signing key: {key_id!r}")

        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredToken("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}")

        return IdentityClaim(
            user_id=payload["sub"],
            email=payload["email"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built from settings."""
    settings = get_settings()
    return TokenCodec(
        StaticKeyProvider.from_settings(settings),
        algorithm=settings.jwt_algorithm,
        lifetime=timedelta(minutes=settings.jwt_token_expire_minutes),
    )

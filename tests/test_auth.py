"""
Tests for identity extraction and the authorization guard.
"""

from datetime import timedelta

import pytest

from postboard.auth.context import AuthContext, extract_identity
from postboard.auth.passwords import hash_password, verify_password
from postboard.auth.policies import require_authenticated, require_owner
from postboard.auth.tokens import StaticKeyProvider, TokenCodec
from postboard.core.errors import Forbidden, Unauthenticated
from postboard.core.utils import utc_now


@pytest.fixture
def codec():
    return TokenCodec(StaticKeyProvider({"k1": "test-secret"}, "k1"))


# =============================================================================
# Identity Extractor
# =============================================================================


class TestExtractIdentity:
    def test_no_header(self, codec):
        ctx = extract_identity(None, codec)

        assert not ctx.is_authenticated
        assert ctx.caller_id is None

    @pytest.mark.parametrize(
        "header",
        ["", "Bearer", "Bearer ", "Token abc", "Basic dXNlcjpwYXNz", "Bearer a b", "Bearer not-a-jwt"],
    )
    def test_malformed_header_is_anonymous(self, codec, header):
        assert not extract_identity(header, codec).is_authenticated

    def test_valid_token(self, codec):
        token = codec.issue("user_1", "a@x.com")
        ctx = extract_identity(f"Bearer {token}", codec)

        assert ctx.is_authenticated
        assert ctx.caller_id == "user_1"
        assert ctx.email == "a@x.com"

    def test_wrong_prefix_with_valid_token(self, codec):
        token = codec.issue("user_1", "a@x.com")

        assert not extract_identity(f"Token {token}", codec).is_authenticated

    def test_token_at_59_minutes(self, codec):
        token = codec.issue("user_1", "a@x.com", issued_at=utc_now() - timedelta(minutes=59))

        assert extract_identity(f"Bearer {token}", codec).is_authenticated

    def test_token_at_61_minutes(self, codec):
        token = codec.issue("user_1", "a@x.com", issued_at=utc_now() - timedelta(minutes=61))

        assert not extract_identity(f"Bearer {token}", codec).is_authenticated


# =============================================================================
# Authorization Guard
# =============================================================================


class TestGuard:
    def test_require_authenticated_rejects_anonymous(self):
        with pytest.raises(Unauthenticated) as exc:
            require_authenticated(AuthContext.anonymous())

        assert exc.value.status_code == 401

    def test_require_authenticated_passes(self):
        require_authenticated(AuthContext(caller_id="user_1"))

    def test_require_owner_rejects_other_user(self):
        with pytest.raises(Forbidden) as exc:
            require_owner(AuthContext(caller_id="user_2"), "user_1")

        assert exc.value.status_code == 403

    def test_require_owner_rejects_anonymous(self):
        with pytest.raises(Forbidden):
            require_owner(AuthContext.anonymous(), "user_1")

    def test_require_owner_passes(self):
        require_owner(AuthContext(caller_id="user_1"), "user_1")


# =============================================================================
# Passwords
# =============================================================================


class TestPasswords:
    def test_hash_is_salted(self):
        first = hash_password("abcde", rounds=4)
        second = hash_password("abcde", rounds=4)

        assert first != second
        assert "abcde" not in first

    def test_verify(self):
        hashed = hash_password("abcde", rounds=4)

        assert verify_password("abcde", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_garbage_hash(self):
        assert not verify_password("abcde", "not-a-hash")
        assert not verify_password("abcde", "")

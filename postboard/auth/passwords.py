"""
Password hashing with bcrypt.
"""

from __future__ import annotations

import bcrypt

from postboard.config import get_settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """
    Hash a password with a random salt.

    Returns the bcrypt hash string ("$2b$12$...").
    """
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False

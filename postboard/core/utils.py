"""
Small helpers shared by the stores and resolvers.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique document ID with optional prefix.

    Returns an ID like "post_3f2a9c0d1b7e4e55a0c2d9b1e8f7a6c4".
    """
    uid = uuid.uuid4().hex
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat(value: datetime) -> str:
    """Render a timestamp the way API responses carry it."""
    return value.astimezone(timezone.utc).isoformat()

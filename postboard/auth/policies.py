"""
Authorization guard.

Two checks, both pure given the context and the resource:

    require_authenticated(ctx)          -> raises Unauthenticated (401)
    require_owner(ctx, post.creator)    -> raises Forbidden (403)

Resolvers call them before touching any state.
"""

from __future__ import annotations

import logging

from postboard.auth.context import AuthContext
from postboard.core.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)


def require_authenticated(ctx: AuthContext) -> None:
    """Raise if there is no verified caller."""
    if not ctx.is_authenticated:
        raise Unauthenticated()


def require_owner(ctx: AuthContext, owner_id: str) -> None:
    """Raise if the caller is not the owner of the resource."""
    if ctx.caller_id is None or str(ctx.caller_id) != str(owner_id):
        logger.info(f"Caller {ctx.caller_id} denied access to resource owned by {owner_id}")
        raise Forbidden()

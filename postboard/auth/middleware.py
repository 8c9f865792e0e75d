"""
Identity middleware.

Runs on every request, resolves the Authorization header and stores the
result on `request.state.auth`. Route handlers pick it up with
`Depends(get_auth_context)`.
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from postboard.auth.context import AuthContext, extract_identity
from postboard.auth.tokens import TokenCodec, get_token_codec


class IdentityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, codec_factory: Callable[[], TokenCodec] = get_token_codec):
        super().__init__(app)
        self.codec_factory = codec_factory

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.auth = extract_identity(
            request.headers.get("Authorization"),
            self.codec_factory(),
        )
        return await call_next(request)


def get_auth_context(request: Request) -> AuthContext:
    """FastAPI dependency returning the identity the middleware attached."""
    ctx = getattr(request.state, "auth", None)
    if ctx is None:
        # Middleware not installed (e.g. a bare sub-app); resolve on the spot.
        ctx = extract_identity(request.headers.get("Authorization"), get_token_codec())
    return ctx

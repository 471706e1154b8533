"""
Global middleware.

``bearer_auth`` is the single gate in front of every route except the
public paths (login / register).  It verifies the bearer token once and
leaves the caller's identity on ``request.state`` for the handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, Response, status

from auth.jwt import verify_token
from config.settings import config
from utils.errors import InvalidToken

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


def _unauthorized() -> Response:
    return Response(
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""
    public_paths = frozenset(config.public_paths)

    @app.middleware("http")
    async def bearer_auth(request: Request, call_next):
        # "/login/" is let through so the router can redirect it to "/login".
        if (request.url.path.rstrip("/") or "/") in public_paths:
            return await call_next(request)

        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith(_BEARER_PREFIX):
            logger.debug("Rejected %s %s: missing Bearer token", request.method, request.url.path)
            return _unauthorized()

        try:
            claims = verify_token(authorization[len(_BEARER_PREFIX):])
        except InvalidToken:
            logger.debug("Rejected %s %s: invalid token", request.method, request.url.path)
            return _unauthorized()

        request.state.user_id = claims.user_id
        request.state.username = claims.username
        return await call_next(request)

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response

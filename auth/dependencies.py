"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_user_id`` dependencies that
are used across all protected routes.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from database.session import get_db_session
from utils.errors import Unauthenticated


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_current_user_id(request: Request) -> int:
    """
    Return the ``user_id`` the bearer middleware attached to this request.

    The token has already been verified; if no identity is present the
    request is rejected.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise Unauthenticated()
    return user_id

"""
Auth API routes — register, login.

Both paths are listed in ``config.public_paths`` and are therefore not
gated by the bearer middleware.  Clients send an already-hashed password;
the server stores and compares that value as-is.
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session
from auth.jwt import create_token
from database.helpers import find_by_credentials, register_user
from utils.errors import InvalidCredentials

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=100)
    password_hash: str = Field(..., alias="passwordHash", min_length=1, max_length=255)


class RegisterResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    token: str


@router.post("/register", response_model=RegisterResponse)
async def register(
    req: CredentialsRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, str]:
    """Register a new user."""
    user = await register_user(session, req.username, req.password_hash)
    await session.commit()
    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: CredentialsRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, str]:
    """Exchange a username / password hash for a bearer token."""
    user = await find_by_credentials(session, req.username, req.password_hash)
    if user is None:
        logger.info("Login failed for %s", req.username)
        raise InvalidCredentials()

    token = create_token(user.id, user.username)
    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token}

"""
Exception handlers — map domain errors to HTTP responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from utils.errors import DuplicateUsername, InvalidCredentials, ItemNotFound, Unauthenticated

logger = logging.getLogger(__name__)


async def unauthenticated_handler(request: Request, exc: Unauthenticated) -> Response:
    return Response(
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def invalid_credentials_handler(request: Request, exc: InvalidCredentials) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": "Invalid username or password"},
    )


async def duplicate_username_handler(request: Request, exc: DuplicateUsername) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "User already exists"},
    )


async def item_not_found_handler(request: Request, exc: ItemNotFound) -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Unauthenticated, unauthenticated_handler)
    app.add_exception_handler(InvalidCredentials, invalid_credentials_handler)
    app.add_exception_handler(DuplicateUsername, duplicate_username_handler)
    app.add_exception_handler(ItemNotFound, item_not_found_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

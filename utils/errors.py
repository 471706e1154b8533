"""
Domain exceptions shared by the auth layer, the stores and the API.

Each one maps to exactly one HTTP outcome in ``api/errors.py``.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for every error raised by this service."""


class InvalidToken(TodoError):
    """Token failed verification (malformed, bad signature or expired)."""

    def __init__(self) -> None:
        # One message for every cause so callers cannot tell them apart.
        super().__init__("Invalid or expired token")


class Unauthenticated(TodoError):
    """No verified identity is attached to the request."""


class InvalidCredentials(TodoError):
    """Username / password hash pair did not match a stored user."""


class DuplicateUsername(TodoError):
    def __init__(self, username: str) -> None:
        super().__init__(f"User '{username}' already exists")
        self.username = username


class ItemNotFound(TodoError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id

"""
Database helper functions — credential store and owner-scoped item store.

Helpers only ``flush``; the caller's session decides when to commit.
"""

from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Item, User
from utils.errors import DuplicateUsername, ItemNotFound

logger = logging.getLogger(__name__)


# ── Credential store ─────────────────────────────────────────────────


async def _get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    for user in result.scalars():
        # Lookups are case-exact even under a case-insensitive collation.
        # Uniqueness still follows the collation of users.username.
        if user.username == username:
            return user
    return None


async def register_user(
    session: AsyncSession,
    username: str,
    password_hash: str,
) -> User:
    """
    Persist a new user and return it with its assigned ``id``.

    Raises ``DuplicateUsername`` if the username is taken, including when a
    concurrent registration wins the race on the unique constraint.
    """
    if await _get_user_by_username(session, username) is not None:
        raise DuplicateUsername(username)

    user = User(
        username=username,
        password_hash=password_hash,
        created_at=datetime.now(timezone.utc),
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateUsername(username) from exc
    return user


async def find_by_credentials(
    session: AsyncSession,
    username: str,
    password_hash: str,
) -> Optional[User]:
    """Return the user matching both fields exactly, or ``None``."""
    user = await _get_user_by_username(session, username)
    if user is None:
        return None
    if not hmac.compare_digest(user.password_hash.encode(), password_hash.encode()):
        return None
    return user


# ── Item store ───────────────────────────────────────────────────────


async def list_items_by_owner(session: AsyncSession, user_id: int) -> List[Item]:
    """All items owned by ``user_id``, oldest first."""
    result = await session.execute(
        select(Item).where(Item.user_id == user_id).order_by(Item.id.asc())
    )
    return list(result.scalars().all())


async def create_item(
    session: AsyncSession,
    name: Optional[str],
    completed: bool,
    owner_id: int,
) -> Item:
    """Insert an item owned by ``owner_id`` and return it with its ``id``."""
    item = Item(name=name, is_complete=completed, user_id=owner_id)
    session.add(item)
    await session.flush()
    return item


async def _get_item(
    session: AsyncSession,
    item_id: int,
    owner_id: Optional[int],
) -> Item:
    item = await session.get(Item, item_id)
    if item is None:
        raise ItemNotFound(item_id)
    if owner_id is not None and item.user_id != owner_id:
        # Foreign items are reported exactly like missing ones.
        raise ItemNotFound(item_id)
    return item


async def update_item_by_id(
    session: AsyncSession,
    item_id: int,
    name: Optional[str],
    completed: bool,
    *,
    owner_id: Optional[int] = None,
) -> Item:
    """
    Overwrite ``name`` and ``completed`` on the item with ``item_id``.

    Looks the item up by id alone unless ``owner_id`` is given, in which
    case items owned by other users raise ``ItemNotFound``.
    """
    item = await _get_item(session, item_id, owner_id)
    item.name = name
    item.is_complete = completed
    await session.flush()
    return item


async def delete_item_by_id(
    session: AsyncSession,
    item_id: int,
    *,
    owner_id: Optional[int] = None,
) -> None:
    """Remove the item with ``item_id``; same lookup rules as ``update_item_by_id``."""
    item = await _get_item(session, item_id, owner_id)
    await session.delete(item)
    await session.flush()

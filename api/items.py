"""
To-do item routes.

Every route here sits behind the bearer middleware.  Listing and creation
are scoped to the caller; update and delete look items up by id and only
check ownership when ``config.enforce_item_ownership`` is on.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user_id
from config.settings import config
from database.helpers import (
    create_item,
    delete_item_by_id,
    list_items_by_owner,
    update_item_by_id,
)
from utils.schemas import ItemIn, ItemOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["items"])


def _ownership_scope(user_id: int) -> Optional[int]:
    return user_id if config.enforce_item_ownership else None


@router.get("/", response_class=PlainTextResponse)
async def status_check() -> str:
    return "ToDo API is running."


@router.get("/items", response_model=List[ItemOut])
async def get_items(
    session: AsyncSession = Depends(db_session),
    user_id: int = Depends(get_current_user_id),
) -> List[ItemOut]:
    items = await list_items_by_owner(session, user_id)
    return [ItemOut.model_validate(item) for item in items]


@router.post("/items", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
async def add_item(
    payload: ItemIn,
    response: Response,
    session: AsyncSession = Depends(db_session),
    user_id: int = Depends(get_current_user_id),
) -> ItemOut:
    item = await create_item(session, payload.name, payload.completed, owner_id=user_id)
    await session.commit()
    logger.info("Item %s created by user %s", item.id, user_id)
    response.headers["Location"] = f"/items/{item.id}"
    return ItemOut.model_validate(item)


@router.put("/items/{item_id}", response_model=ItemOut)
async def update_item(
    item_id: int,
    payload: ItemIn,
    session: AsyncSession = Depends(db_session),
    user_id: int = Depends(get_current_user_id),
) -> ItemOut:
    item = await update_item_by_id(
        session,
        item_id,
        payload.name,
        payload.completed,
        owner_id=_ownership_scope(user_id),
    )
    await session.commit()
    logger.info("Item %s updated by user %s", item_id, user_id)
    return ItemOut.model_validate(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    session: AsyncSession = Depends(db_session),
    user_id: int = Depends(get_current_user_id),
) -> Response:
    await delete_item_by_id(session, item_id, owner_id=_ownership_scope(user_id))
    await session.commit()
    logger.info("Item %s deleted by user %s", item_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Pydantic schemas for the to-do item API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ItemIn(BaseModel):
    """
    Body of ``POST /items`` and ``PUT /items/{id}``.

    Any owner field sent by the client is ignored; the owner always comes
    from the authenticated identity.
    """

    name: Optional[str] = None
    completed: bool = False


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: Optional[str] = None
    completed: bool = Field(False, validation_alias=AliasChoices("is_complete", "completed"))
    owner_id: int = Field(
        ...,
        validation_alias=AliasChoices("user_id", "ownerId", "owner_id"),
        serialization_alias="ownerId",
    )

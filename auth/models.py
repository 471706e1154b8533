"""Claim set carried inside auth tokens."""

from pydantic import BaseModel, StrictInt

__all__ = ["TokenClaims"]


class TokenClaims(BaseModel):
    user_id: StrictInt
    username: str   # label only; authorization uses user_id
    exp: StrictInt

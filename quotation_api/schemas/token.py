"""Pydantic schemas for JWT tokens."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

Role = Literal["user", "admin"]


class TokenClaims(BaseModel):
    """Identity claims carried by a verified access token."""

    id: int
    username: str
    email: str
    role: Role
    exp: int

    model_config = {"extra": "ignore"}

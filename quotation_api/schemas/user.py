"""Pydantic schemas for signup, login and the public user view."""

from __future__ import annotations

from pydantic import BaseModel

from quotation_api.schemas.token import Role


class UserSignup(BaseModel):
    # Presence and format are validated by the registration flow.
    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class UserLogin(BaseModel):
    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    id: int
    username: str
    email: str
    role: Role

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


class ProfileResponse(BaseModel):
    user: UserPublic

"""Pydantic request/response models for session endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import User


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterRequest(LoginRequest):
    name: str = Field(..., min_length=1, max_length=128)


class UserModel(BaseModel):
    id: str
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "UserModel":
        return cls(id=user.id, email=user.email, name=user.name)


class SessionResponse(BaseModel):
    user: Optional[UserModel] = None
    redirect: Optional[str] = None

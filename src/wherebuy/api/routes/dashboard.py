"""Profile view for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...models.domain import User
from ...schemas.auth import UserModel
from ..deps import require_user

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=UserModel, status_code=status.HTTP_200_OK)
def dashboard(user: User = Depends(require_user)) -> UserModel:
    return UserModel.from_user(user)

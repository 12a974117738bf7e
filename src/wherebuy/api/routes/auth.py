"""Login, registration and logout endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...config import settings
from ...schemas.auth import LoginRequest, RegisterRequest, SessionResponse, UserModel
from ...services.session import SessionFlow
from ..deps import get_session

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(flow: SessionFlow, redirect: str | None = None) -> SessionResponse:
    user = flow.state.user
    return SessionResponse(user=UserModel.from_user(user) if user else None, redirect=redirect)


def _set_session_cookie(response: Response, secret: str | None) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        secret or "",
        httponly=True,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=SessionResponse, status_code=status.HTTP_200_OK)
def login(payload: LoginRequest, response: Response, flow: SessionFlow = Depends(get_session)) -> SessionResponse:
    redirect = flow.login(payload.email, payload.password)
    _set_session_cookie(response, flow.state.secret)
    return _session_response(flow, redirect)


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, flow: SessionFlow = Depends(get_session)) -> SessionResponse:
    redirect = flow.register(payload.email, payload.password, payload.name)
    _set_session_cookie(response, flow.state.secret)
    return _session_response(flow, redirect)


@router.post("/logout", response_model=SessionResponse, status_code=status.HTTP_200_OK)
def logout(response: Response, flow: SessionFlow = Depends(get_session)) -> SessionResponse:
    redirect = flow.logout()
    response.delete_cookie(settings.session_cookie_name, path="/")
    return _session_response(flow, redirect)


@router.get("/me", response_model=SessionResponse, status_code=status.HTTP_200_OK)
def me(flow: SessionFlow = Depends(get_session)) -> SessionResponse:
    return _session_response(flow)

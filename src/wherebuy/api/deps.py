"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from ..config import settings
from ..models.domain import User
from ..services.auth import AuthService
from ..services.locations import LocationService
from ..services.session import GateDecision, SessionFlow, SessionState, gate

LOGIN_PATH = "/login"


def get_auth_service() -> AuthService:
    try:
        return AuthService()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_location_service() -> LocationService:
    try:
        return LocationService()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_session(request: Request, auth: AuthService = Depends(get_auth_service)) -> SessionFlow:
    """Session for this visitor, resolved from the session cookie."""
    state = SessionState(secret=request.cookies.get(settings.session_cookie_name))
    flow = SessionFlow(auth, state)
    flow.initialize()
    return flow


def require_user(flow: SessionFlow = Depends(get_session)) -> User:
    if gate(flow.state) is not GateDecision.RENDER:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"Location": LOGIN_PATH},
        )
    return flow.state.user

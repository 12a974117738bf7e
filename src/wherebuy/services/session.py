"""Per-visitor session state and the login/register/logout flow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import AuthError
from ..models.domain import User
from .auth import AuthService

AUTHENTICATED_LANDING = "/dashboard"
PUBLIC_LANDING = "/"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionState:
    user: Optional[User] = None
    loading: bool = True
    secret: Optional[str] = None


class GateDecision(str, Enum):
    PLACEHOLDER = "placeholder"
    REDIRECT = "redirect"
    RENDER = "render"


def gate(state: SessionState) -> GateDecision:
    """Decide what a view that requires authentication should do."""
    if state.loading:
        return GateDecision.PLACEHOLDER
    if state.user is None:
        return GateDecision.REDIRECT
    return GateDecision.RENDER


class SessionFlow:
    def __init__(self, auth: AuthService, state: SessionState | None = None) -> None:
        self.auth = auth
        self.state = state or SessionState()

    def initialize(self) -> SessionState:
        """Resolve the user behind an existing session; no session means anonymous."""
        try:
            self.state.user = self.auth.get_current_user(self.state.secret)
        finally:
            self.state.loading = False
        if self.state.user is None:
            self.state.secret = None
        return self.state

    def login(self, email: str, password: str) -> str:
        try:
            secret = self.auth.login(email, password)
            user = self.auth.get_current_user(secret)
        except AuthError as exc:
            logger.error(f"Login failed: {exc}")
            raise
        if user is None:
            raise AuthError("Session could not be resolved after login.")
        self.state.secret = secret
        self.state.user = user
        self.state.loading = False
        return AUTHENTICATED_LANDING

    def register(self, email: str, password: str, name: str) -> str:
        try:
            _, secret = self.auth.register(email, password, name)
            user = self.auth.get_current_user(secret)
        except AuthError as exc:
            logger.error(f"Registration failed: {exc}")
            raise
        if user is None:
            raise AuthError("Session could not be resolved after registration.")
        self.state.secret = secret
        self.state.user = user
        self.state.loading = False
        return AUTHENTICATED_LANDING

    def logout(self) -> str:
        if self.state.secret:
            try:
                self.auth.logout(self.state.secret)
            except AuthError as exc:
                logger.error(f"Logout failed: {exc}")
                raise
        self.state.secret = None
        self.state.user = None
        return PUBLIC_LANDING

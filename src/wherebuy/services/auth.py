"""Thin wrapper around the Appwrite account service."""

from __future__ import annotations

import logging
from typing import Any, Callable

from appwrite.exception import AppwriteException
from appwrite.id import ID

from ..db.appwrite import get_account, get_session_account
from ..errors import AuthError
from ..models.domain import User

logger = logging.getLogger(__name__)


def _auth_error(exc: AppwriteException) -> AuthError:
    return AuthError(exc.message or str(exc), code=exc.code)


class AuthService:
    """Sessions are identified by the secret returned on login.

    The server client creates accounts and sessions; everything acting as the
    user goes through an account service bound to that user's secret.
    """

    def __init__(
        self,
        account: Any | None = None,
        session_account: Callable[[str], Any] = get_session_account,
    ) -> None:
        self.account = account if account is not None else get_account()
        if self.account is None:
            raise ValueError("Appwrite is not configured.")
        self.session_account = session_account

    def login(self, email: str, password: str) -> str:
        try:
            session = self.account.create_email_password_session(email=email, password=password)
        except AppwriteException as exc:
            logger.error(f"Login error: {exc}")
            raise _auth_error(exc) from exc
        secret = session.get("secret")
        if not secret:
            raise AuthError("Session created without a secret; check the server API key scopes.")
        return secret

    def register(self, email: str, password: str, name: str) -> tuple[User, str]:
        try:
            account = self.account.create(user_id=ID.unique(), email=email, password=password, name=name)
        except AppwriteException as exc:
            logger.error(f"Registration error: {exc}")
            raise _auth_error(exc) from exc
        # Auto login after registration
        secret = self.login(email, password)
        return User(id=account["$id"], email=account["email"], name=account["name"]), secret

    def logout(self, secret: str) -> None:
        try:
            self.session_account(secret).delete_session(session_id="current")
        except AppwriteException as exc:
            logger.error(f"Logout error: {exc}")
            raise _auth_error(exc) from exc

    def get_current_user(self, secret: str | None) -> User | None:
        if not secret:
            return None
        try:
            account = self.session_account(secret).get()
        except AppwriteException:
            return None
        return User(id=account["$id"], email=account["email"], name=account["name"])

    def get_session(self, secret: str | None) -> dict | None:
        if not secret:
            return None
        try:
            return self.session_account(secret).get_session(session_id="current")
        except AppwriteException:
            return None

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import AuthError, Client

from plated.app.infra.auth.base import AuthProvider, AuthSession, CurrentUser, SignUpResult
from plated.services.errors import InvalidArgumentError, UnauthenticatedError

logger = logging.getLogger(__name__)


def _to_current_user(user: Any) -> CurrentUser:
    # metadados podem conter 'name'
    name = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        name = meta.get("name")
    return CurrentUser(id=str(user.id), email=getattr(user, "email", None), name=name)


def _to_session(session: Any, user: Any) -> AuthSession:
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user=_to_current_user(user),
    )


class SupabaseAuthProvider(AuthProvider):
    """
    Validates access tokens against Supabase GoTrue.

    Use a client dedicated to auth: signing in stores the user session on the
    client it runs on.
    """

    def __init__(self, client: Client):
        self._client = client

    def get_user(self, token: str) -> Optional[CurrentUser]:
        if not token:
            return None
        try:
            res = self._client.auth.get_user(token)
        except AuthError as error:
            logger.info("auth.invalid_token error=%s", error)
            return None

        user = getattr(res, "user", None) if res else None
        if not user:
            return None
        return _to_current_user(user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as error:
            logger.info("auth.sign_in_fail email=%s error=%s", email, error)
            raise UnauthenticatedError("Invalid email or password") from error

        session = getattr(res, "session", None)
        if not session or not res.user:
            raise UnauthenticatedError("Invalid email or password")

        return _to_session(session, res.user)

    def sign_up(self, email: str, password: str, name: Optional[str] = None) -> SignUpResult:
        credentials: dict[str, Any] = {"email": email, "password": password}
        if name:
            credentials["options"] = {"data": {"name": name}}
        try:
            res = self._client.auth.sign_up(credentials)
        except AuthError as error:
            logger.info("auth.sign_up_fail email=%s error=%s", email, error)
            raise InvalidArgumentError(error.message or "Could not create account") from error

        if not res or not res.user:
            raise InvalidArgumentError("Could not create account")

        user = _to_current_user(res.user)
        session = getattr(res, "session", None)
        logger.info("auth.signed_up user=%s confirmed=%s", user.id, session is not None)
        return SignUpResult(user=user, session=_to_session(session, res.user) if session else None)

    def sign_out(self, token: str) -> None:
        try:
            self._client.auth.admin.sign_out(token)
        except AuthError as error:
            logger.info("auth.sign_out_fail error=%s", error)
            raise UnauthenticatedError("Session is invalid or already expired") from error

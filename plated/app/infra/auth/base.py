# plated/app/infra/auth/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    user: CurrentUser


class SignUpResult(BaseModel):
    user: CurrentUser
    # None until the email address is confirmed
    session: AuthSession | None = None


class AuthProvider(ABC):
    """Session lookup, sign-up and sign-in/out, delegated to the hosted auth service."""

    @abstractmethod
    def get_user(self, token: str) -> Optional[CurrentUser]:
        """Return the user behind an access token, or None if it is invalid."""
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Raises:
            UnauthenticatedError: credentials were rejected
        """
        pass

    @abstractmethod
    def sign_up(self, email: str, password: str, name: Optional[str] = None) -> SignUpResult:
        """
        Raises:
            InvalidArgumentError: the account could not be created
        """
        pass

    @abstractmethod
    def sign_out(self, token: str) -> None:
        pass

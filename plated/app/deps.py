# plated/app/deps.py
# Clients are built once in create_app() and exposed as dependencies.
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from plated.app.infra.auth.base import AuthProvider, CurrentUser
from plated.services.errors import UnauthenticatedError
from plated.services.functions import FunctionInvoker
from plated.services.pipeline import RecipePipeline

auth_scheme = HTTPBearer(auto_error=False)


def get_pipeline(request: Request) -> RecipePipeline:
    return request.app.state.pipeline


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth


def get_function_invoker(request: Request) -> FunctionInvoker:
    return request.app.state.functions


def get_access_token(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
) -> Optional[str]:
    if cred is None or cred.scheme.lower() != "bearer":
        return None
    return cred.credentials or None


async def get_optional_user(
    token: Optional[str] = Depends(get_access_token),
    auth: AuthProvider = Depends(get_auth_provider),
) -> Optional[CurrentUser]:
    """
    Recebe Authorization: Bearer <access_token> e retorna o usuario, ou None
    quando nao ha token. Um token invalido continua sendo um erro.
    """
    if token is None:
        return None
    user = auth.get_user(token)
    if user is None:
        raise UnauthenticatedError("Invalid or expired session. Please sign in again.")
    return user


async def get_current_user(
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    if user is None:
        raise UnauthenticatedError("Please sign in to continue")
    return user

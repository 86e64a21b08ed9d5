from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from plated.app.deps import get_access_token, get_auth_provider, get_current_user
from plated.app.infra.auth.base import AuthProvider, AuthSession, CurrentUser, SignUpResult

router = APIRouter(prefix="/auth", tags=["auth"])


class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=6)
    name: Optional[str] = None


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)):
    return user


@router.post("/sign-in", response_model=AuthSession)
async def sign_in(body: SignInRequest, auth: AuthProvider = Depends(get_auth_provider)):
    return await run_in_threadpool(auth.sign_in, body.email, body.password)


@router.post("/sign-up", response_model=SignUpResult, status_code=status.HTTP_201_CREATED)
async def sign_up(body: SignUpRequest, auth: AuthProvider = Depends(get_auth_provider)):
    return await run_in_threadpool(auth.sign_up, body.email, body.password, body.name)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    user: CurrentUser = Depends(get_current_user),
    token: str = Depends(get_access_token),
    auth: AuthProvider = Depends(get_auth_provider),
) -> Response:
    await run_in_threadpool(auth.sign_out, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from plated.app.deps import get_function_invoker, get_optional_user
from plated.app.infra.auth.base import CurrentUser
from plated.app.schemas.recipes import FunctionCall, FunctionResult
from plated.services.functions import FunctionInvoker

router = APIRouter(prefix="/functions", tags=["functions"])


@router.post("/{name}", response_model=FunctionResult)
async def call_function(
    name: str,
    body: FunctionCall,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    functions: FunctionInvoker = Depends(get_function_invoker),
) -> FunctionResult:
    result = await run_in_threadpool(functions.invoke, name, body.data, user)
    return FunctionResult(result=result)

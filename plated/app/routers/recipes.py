# plated/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from starlette.concurrency import run_in_threadpool

from plated.app.deps import get_current_user, get_optional_user, get_pipeline
from plated.app.domain.models import RecipeRecord
from plated.app.infra.auth.base import CurrentUser
from plated.app.schemas.recipes import (
    GenerateRequest,
    RecipeDraftOut,
    RecipeListResponse,
    RecipeOut,
    RecipeUpdate,
    SaveRequest,
)
from plated.services.errors import UnauthenticatedError
from plated.services.normalize import draft_warnings
from plated.services.pipeline import RecipePipeline

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])


def _list_response(records: list[RecipeRecord]) -> RecipeListResponse:
    items = [RecipeOut.from_record(record) for record in records]
    return RecipeListResponse(recipes=items, total=len(items))


@router.post("/generate", response_model=RecipeDraftOut, response_model_exclude_none=True)
async def generate_recipe(
    body: GenerateRequest,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeDraftOut:
    log.info("generate.request url=%s user=%s", body.videoUrl, user.id)
    draft = await run_in_threadpool(pipeline.generate, body.videoUrl)
    for warning in draft_warnings(draft):
        log.info("generate.soft_warning url=%s warning=%s", body.videoUrl, warning)
    return RecipeDraftOut.from_draft(draft)


@router.post(
    "",
    response_model=RecipeOut,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def save_recipe(
    body: SaveRequest,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeOut:
    record = await run_in_threadpool(
        pipeline.save,
        body.recipe,
        body.videoUrl,
        user.id,
        body.isPublic,
    )
    return RecipeOut.from_record(record)


@router.get("/mine", response_model=RecipeListResponse, response_model_exclude_none=True)
async def list_my_recipes(
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeListResponse:
    records = await run_in_threadpool(pipeline.list_for_owner, user.id)
    return _list_response(records)


@router.get("/public", response_model=RecipeListResponse, response_model_exclude_none=True)
async def list_public_recipes(
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeListResponse:
    records = await run_in_threadpool(pipeline.list_public)
    return _list_response(records)


@router.get("/search", response_model=RecipeListResponse, response_model_exclude_none=True)
async def search_recipes(
    q: str = Query(..., min_length=1, max_length=120, description="Text to look for in recipe titles."),
    scope: Literal["public", "mine"] = Query("public"),
    user: Optional[CurrentUser] = Depends(get_optional_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeListResponse:
    owner_id = None
    if scope == "mine":
        if user is None:
            raise UnauthenticatedError("Please sign in to search your recipes")
        owner_id = user.id
    records = await run_in_threadpool(pipeline.search, q, owner_id)
    return _list_response(records)


@router.get("/{recipe_id}", response_model=RecipeOut, response_model_exclude_none=True)
async def get_recipe(
    recipe_id: str,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeOut:
    record = await run_in_threadpool(pipeline.get, recipe_id, user.id if user else None)
    return RecipeOut.from_record(record)


@router.patch("/{recipe_id}", response_model=RecipeOut, response_model_exclude_none=True)
async def update_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeOut:
    fields = body.model_dump(exclude_unset=True)
    record = await run_in_threadpool(pipeline.update, recipe_id, fields, user.id)
    log.info("update.ok recipe=%s user=%s fields=%s", recipe_id, user.id, ",".join(sorted(fields)))
    return RecipeOut.from_record(record)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> Response:
    await run_in_threadpool(pipeline.delete, recipe_id, user.id)
    log.info("delete.ok recipe=%s user=%s", recipe_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from plated.app.domain.models import RecipeDraft, RecipeRecord

Difficulty = Literal["Easy", "Medium", "Hard"]


class RecipeDraftOut(BaseModel):
    title: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    prepTime: Optional[str] = None
    cookTime: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_draft(cls, draft: RecipeDraft) -> RecipeDraftOut:
        return cls(**draft.to_dict())


class RecipeOut(RecipeDraftOut):
    id: str
    videoUrl: str
    ownerId: str
    createdAt: str
    isPublic: bool = False

    @classmethod
    def from_record(cls, record: RecipeRecord) -> RecipeOut:
        return cls(**record.to_dict())


class RecipeListResponse(BaseModel):
    recipes: list[RecipeOut]
    total: int


class GenerateRequest(BaseModel):
    videoUrl: Optional[str] = None


class SaveRequest(BaseModel):
    # Shape is checked by validate_draft, not here.
    recipe: Optional[dict[str, Any]] = None
    videoUrl: Optional[str] = None
    isPublic: Optional[bool] = None


class RecipeUpdate(BaseModel):
    title: Optional[str] = None
    ingredients: Optional[list[str]] = None
    instructions: Optional[list[str]] = None
    prepTime: Optional[str] = None
    cookTime: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[list[str]] = None
    isPublic: Optional[bool] = None


class FunctionCall(BaseModel):
    data: Optional[dict[str, Any]] = None


class FunctionResult(BaseModel):
    result: dict[str, Any]


class ErrorBody(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorBody

# plated/app/domain/models.py
"""
Domain models for the recipe generation pipeline.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{asset_id}/maxresdefault.jpg"


class Platform(str, Enum):
    """Video-hosting family a submitted URL belongs to."""
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    UNKNOWN = "unknown"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass(frozen=True)
class VideoReference:
    """A classified video URL. Asset ids are best-effort only."""
    url: str
    platform: Platform
    asset_id: Optional[str] = None

    @property
    def is_supported(self) -> bool:
        return self.platform is not Platform.UNKNOWN

    @property
    def thumbnail_url(self) -> Optional[str]:
        """Only youtube thumbnails can be derived without an API call."""
        if self.platform is Platform.YOUTUBE and self.asset_id:
            return YOUTUBE_THUMBNAIL_URL.format(asset_id=self.asset_id)
        return None


@dataclass(frozen=True)
class PromptPayload:
    """Exact text (and optional image reference) sent to the model."""
    text: str
    image_url: Optional[str] = None


def _optional_items(
    prep_time: Optional[str],
    cook_time: Optional[str],
    servings: Optional[str],
    difficulty: Optional[Difficulty],
) -> dict[str, Any]:
    items = {
        "prepTime": prep_time,
        "cookTime": cook_time,
        "servings": servings,
        "difficulty": difficulty.value if difficulty else None,
    }
    return {key: value for key, value in items.items() if value is not None}


@dataclass
class RecipeDraft:
    """AI-produced recipe content prior to merging with caller context."""
    title: str
    ingredients: list[str]
    instructions: list[str]
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: list[str] = field(default_factory=list)

    def copy(self) -> RecipeDraft:
        return RecipeDraft(
            title=self.title,
            ingredients=list(self.ingredients),
            instructions=list(self.instructions),
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            servings=self.servings,
            difficulty=self.difficulty,
            tags=list(self.tags),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape. Absent optional fields are omitted, never null."""
        data: dict[str, Any] = {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
        }
        data.update(_optional_items(self.prep_time, self.cook_time, self.servings, self.difficulty))
        data["tags"] = list(self.tags)
        return data


@dataclass
class RecipeRecord:
    """
    A draft merged with ownership, visibility and timestamp context.
    `id` is assigned by the store on create; `created_at` is never mutated.
    """
    title: str
    ingredients: list[str]
    instructions: list[str]
    video_url: str
    owner_id: str
    created_at: datetime
    is_public: bool = False
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: list[str] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def draft(self) -> RecipeDraft:
        return RecipeDraft(
            title=self.title,
            ingredients=list(self.ingredients),
            instructions=list(self.instructions),
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            servings=self.servings,
            difficulty=self.difficulty,
            tags=list(self.tags),
        )

    def with_id(self, record_id: str) -> RecipeRecord:
        record = self.copy()
        record.id = record_id
        return record

    def copy(self) -> RecipeRecord:
        return RecipeRecord(
            title=self.title,
            ingredients=list(self.ingredients),
            instructions=list(self.instructions),
            video_url=self.video_url,
            owner_id=self.owner_id,
            created_at=self.created_at,
            is_public=self.is_public,
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            servings=self.servings,
            difficulty=self.difficulty,
            tags=list(self.tags),
            id=self.id,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data.update(self.draft.to_dict())
        data.update(
            {
                "videoUrl": self.video_url,
                "ownerId": self.owner_id,
                "createdAt": self.created_at.isoformat(),
                "isPublic": self.is_public,
            }
        )
        return data

# plated/services/records.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from plated.app.domain.models import RecipeDraft, RecipeRecord


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RecordContext:
    video_url: str
    owner_id: str
    is_public: Optional[bool] = None
    created_at: Optional[datetime] = None


def build_record(draft: RecipeDraft, context: RecordContext) -> RecipeRecord:
    """
    Merge a validated draft with caller context. AI-generated recipes are
    private until the owner publishes them.
    """
    source = draft.copy()
    return RecipeRecord(
        title=source.title,
        ingredients=source.ingredients,
        instructions=source.instructions,
        prep_time=source.prep_time,
        cook_time=source.cook_time,
        servings=source.servings,
        difficulty=source.difficulty,
        tags=source.tags,
        video_url=context.video_url,
        owner_id=context.owner_id,
        created_at=context.created_at or _now_utc(),
        is_public=bool(context.is_public),
    )

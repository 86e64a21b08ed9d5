from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional

from plated.app.domain.models import RecipeDraft, RecipeRecord
from plated.app.infra.db.base import RecipeStore
from plated.services.errors import (
    GenerationError,
    InvalidArgumentError,
    MalformedOutputError,
    NotFoundError,
    UnauthenticatedError,
    UnsupportedPlatformError,
)
from plated.services.gemini_client import ModelInvoker
from plated.services.normalize import normalize, validate_draft
from plated.services.prompt import build_prompt
from plated.services.records import RecordContext, build_record
from plated.services.video_urls import classify

logger = logging.getLogger(__name__)


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message)
    return value.strip()


def _require_owner(owner_id: Optional[str]) -> str:
    if not owner_id:
        raise UnauthenticatedError()
    return owner_id


class RecipePipeline:
    """
    Turns a video URL into a validated recipe draft and persists drafts as
    owner-scoped records. Stateless; nothing is retried.
    """

    def __init__(self, model: ModelInvoker, store: RecipeStore):
        self._model = model
        self._store = store

    def generate(self, video_url: Any) -> RecipeDraft:
        url = _require_text(video_url, "Video URL is required")
        ref = classify(url)
        if not ref.is_supported:
            logger.info("generate.unsupported url=%s", url)
            raise UnsupportedPlatformError(
                "Unsupported video platform. Use a YouTube, TikTok or Instagram link."
            )

        t0 = time.time()
        logger.info("generate.start url=%s platform=%s asset=%s", url, ref.platform.value, ref.asset_id)
        prompt = build_prompt(ref)
        try:
            raw_text = self._model.invoke(prompt)
            draft = normalize(raw_text)
        except MalformedOutputError as error:
            logger.warning("generate.malformed url=%s dt=%.2fs error=%s", url, time.time() - t0, error)
            raise
        except GenerationError as error:
            logger.error(
                "generate.model_fail url=%s kind=%s dt=%.2fs error=%s",
                url,
                error.kind,
                time.time() - t0,
                error,
            )
            raise

        logger.info("generate.ok url=%s title=%s dt=%.2fs", url, draft.title, time.time() - t0)
        return draft

    def save(
        self,
        recipe: Any,
        video_url: Any,
        owner_id: Optional[str],
        is_public: Optional[bool] = None,
    ) -> RecipeRecord:
        owner = _require_owner(owner_id)
        if not recipe or not isinstance(video_url, str) or not video_url.strip():
            raise InvalidArgumentError("Recipe and video URL are required")

        try:
            draft = recipe.copy() if isinstance(recipe, RecipeDraft) else validate_draft(recipe)
        except MalformedOutputError as error:
            raise InvalidArgumentError(f"Invalid recipe: {error}") from error

        record = build_record(
            draft,
            RecordContext(video_url=video_url.strip(), owner_id=owner, is_public=is_public),
        )
        record_id = self._store.create(record)
        logger.info("save.ok recipe=%s owner=%s", record_id, owner)
        return record.with_id(record_id)

    def get(self, record_id: str, viewer_id: Optional[str] = None) -> RecipeRecord:
        record = self._store.get_by_id(record_id)
        if record is None or not (record.is_public or record.owner_id == viewer_id):
            raise NotFoundError("Recipe", record_id)
        return record

    def _get_owned(self, record_id: str, owner_id: Optional[str]) -> RecipeRecord:
        owner = _require_owner(owner_id)
        record = self._store.get_by_id(record_id)
        if record is None or record.owner_id != owner:
            raise NotFoundError("Recipe", record_id)
        return record

    def update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        owner_id: Optional[str],
    ) -> RecipeRecord:
        self._get_owned(record_id, owner_id)
        self._store.update(record_id, fields)
        updated = self._store.get_by_id(record_id)
        if updated is None:
            raise NotFoundError("Recipe", record_id)
        return updated

    def delete(self, record_id: str, owner_id: Optional[str]) -> None:
        self._get_owned(record_id, owner_id)
        self._store.delete(record_id)

    def list_for_owner(self, owner_id: Optional[str]) -> list[RecipeRecord]:
        return self._store.query_by_owner(_require_owner(owner_id))

    def list_public(self) -> list[RecipeRecord]:
        return self._store.query_public()

    def search(self, term: Any, owner_id: Optional[str] = None) -> list[RecipeRecord]:
        return self._store.search_by_title(_require_text(term, "Search term is required"), owner_id)

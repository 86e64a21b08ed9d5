# plated/services/normalize.py
"""
Turns raw model output into a validated RecipeDraft.

This module is the only place that decides what a missing optional field
means. The persistence gateway reuses `recover_draft` when it reads documents
back, so stored and freshly generated recipes get identical defaults.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from plated.app.domain.models import Difficulty, RecipeDraft
from plated.services.errors import MalformedOutputError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "ingredients", "instructions")
OPTIONAL_FIELDS = ("prepTime", "cookTime", "servings", "difficulty", "tags")
RECIPE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS

UNTITLED_RECIPE = "Untitled Recipe"

_FENCE_START = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_END = re.compile(r"\n?```$")
_DIFFICULTIES = {item.value.lower(): item for item in Difficulty}


def strip_fences(text: str) -> str:
    stripped = text.strip()
    stripped = _FENCE_START.sub("", stripped, count=1)
    stripped = _FENCE_END.sub("", stripped, count=1)
    return stripped.strip()


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _clean_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        text = _clean_str(item)
        if text:
            out.append(text)
    return out


def _clean_tags(value: Any) -> list[str]:
    tags: list[str] = []
    for tag in _clean_str_list(value):
        if tag not in tags:
            tags.append(tag)
    return tags


def _clean_difficulty(value: Any) -> Optional[Difficulty]:
    if isinstance(value, Difficulty):
        return value
    text = _clean_str(value)
    if not text:
        return None
    return _DIFFICULTIES.get(text.lower())


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _draft_from_mapping(data: Mapping[str, Any], title: str) -> RecipeDraft:
    return RecipeDraft(
        title=title,
        ingredients=_clean_str_list(data.get("ingredients")),
        instructions=_clean_str_list(data.get("instructions")),
        prep_time=_clean_str(_first(data, "prepTime", "prep_time")),
        cook_time=_clean_str(_first(data, "cookTime", "cook_time")),
        servings=_clean_str(data.get("servings")),
        difficulty=_clean_difficulty(data.get("difficulty")),
        tags=_clean_tags(data.get("tags")),
    )


def validate_draft(data: Any) -> RecipeDraft:
    """Validate required fields of an already-parsed object and fill defaults."""
    if not isinstance(data, Mapping):
        raise MalformedOutputError(f"Expected a JSON object, got {type(data).__name__}")

    title = _clean_str(data.get("title")) if isinstance(data.get("title"), str) else None
    if not title:
        raise MalformedOutputError("Recipe is missing a non-empty 'title'")
    if not isinstance(data.get("ingredients"), list):
        raise MalformedOutputError("Recipe is missing an 'ingredients' list")
    if not isinstance(data.get("instructions"), list):
        raise MalformedOutputError("Recipe is missing an 'instructions' list")

    return _draft_from_mapping(data, title)


def recover_draft(data: Mapping[str, Any]) -> RecipeDraft:
    """Lenient variant for stored documents the store never validated."""
    title = _clean_str(data.get("title")) or UNTITLED_RECIPE
    return _draft_from_mapping(data, title)


def clean_partial(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Clean the draft fields of a partial update, keyed by wire name. Keys that
    are not draft fields are ignored. An optional field set to None is cleared.
    """
    cleaned: dict[str, Any] = {}
    if "title" in fields:
        title = _clean_str(fields["title"]) if isinstance(fields["title"], str) else None
        if not title:
            raise MalformedOutputError("'title' cannot be empty")
        cleaned["title"] = title
    for key in ("ingredients", "instructions"):
        if key in fields:
            if not isinstance(fields[key], list):
                raise MalformedOutputError(f"'{key}' must be a list")
            cleaned[key] = _clean_str_list(fields[key])
    for key in ("prepTime", "cookTime", "servings"):
        if key in fields:
            cleaned[key] = _clean_str(fields[key])
    if "difficulty" in fields:
        cleaned["difficulty"] = _clean_difficulty(fields["difficulty"])
    if "tags" in fields:
        cleaned["tags"] = _clean_tags(fields["tags"])
    return cleaned


def normalize(raw_text: str) -> RecipeDraft:
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise MalformedOutputError("Model output is empty")

    logger.debug("normalize.raw text=%r", raw_text)
    cleaned = strip_fences(raw_text)
    logger.debug("normalize.cleaned text=%r", cleaned)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as error:
        raise MalformedOutputError(f"Model output is not valid JSON: {error}") from error

    draft = validate_draft(parsed)
    for warning in draft_warnings(draft):
        logger.warning("normalize.warning title=%s warning=%s", draft.title, warning)
    return draft


def draft_warnings(draft: RecipeDraft) -> list[str]:
    warnings: list[str] = []
    if not draft.ingredients:
        warnings.append("Model did not identify any ingredients.")
    if not draft.instructions:
        warnings.append("Model did not identify any instructions.")
    return warnings

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import UUID, uuid4

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from plated.app.domain.models import RecipeRecord
from plated.app.infra.db.base import RecipeStore
from plated.services.errors import InvalidArgumentError, MalformedOutputError, PersistenceFailureError
from plated.services.normalize import clean_partial, recover_draft

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "recipes"
# Legacy documents written without a timestamp sort last.
MISSING_CREATED_AT = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Wire name -> column for every field an update may touch.
UPDATABLE_COLUMNS = {
    "title": "title",
    "ingredients": "ingredients",
    "instructions": "instructions",
    "prepTime": "prep_time",
    "cookTime": "cook_time",
    "servings": "servings",
    "difficulty": "difficulty",
    "tags": "tags",
    "isPublic": "is_public",
}

_STORE_ERRORS = (PostgrestAPIError, httpx.HTTPError, ConnectionError, TimeoutError)
# Postgres trims trailing zeros; fromisoformat before 3.11 needs 3 or 6 digits.
_FRACTION_RE = re.compile(r"\.(\d{1,6})(?=\D|$)")


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        normalized = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0"), normalized, count=1)
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _is_uuid(value: str) -> bool:
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def _like_pattern(term: str) -> str:
    """Escape LIKE metacharacters. PostgREST reads '*' as '%', so it becomes '_'."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "_")


def _row_to_record(row: Mapping[str, Any]) -> RecipeRecord:
    draft = recover_draft(row)
    return RecipeRecord(
        id=str(row["id"]) if row.get("id") else None,
        title=draft.title,
        ingredients=draft.ingredients,
        instructions=draft.instructions,
        prep_time=draft.prep_time,
        cook_time=draft.cook_time,
        servings=draft.servings,
        difficulty=draft.difficulty,
        tags=draft.tags,
        video_url=str(row.get("video_url") or ""),
        owner_id=str(row.get("owner_id") or ""),
        created_at=_parse_datetime(row.get("created_at")) or MISSING_CREATED_AT,
        is_public=row.get("is_public") is True,
    )


def _record_to_row(record: RecipeRecord, record_id: str) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": record_id,
        "title": record.title,
        "ingredients": list(record.ingredients),
        "instructions": list(record.instructions),
        "prep_time": record.prep_time,
        "cook_time": record.cook_time,
        "servings": record.servings,
        "difficulty": record.difficulty.value if record.difficulty else None,
        "tags": list(record.tags),
        "video_url": record.video_url,
        "owner_id": record.owner_id,
        "created_at": record.created_at.isoformat(),
        "is_public": record.is_public,
    }
    return {column: value for column, value in row.items() if value is not None}


def _update_to_row(fields: Mapping[str, Any]) -> dict[str, Any]:
    rejected = sorted(set(fields) - set(UPDATABLE_COLUMNS))
    if rejected:
        raise InvalidArgumentError(f"Fields cannot be updated: {', '.join(rejected)}")

    try:
        cleaned = clean_partial(fields)
    except MalformedOutputError as error:
        raise InvalidArgumentError(str(error)) from error

    if "isPublic" in fields:
        if not isinstance(fields["isPublic"], bool):
            raise InvalidArgumentError("'isPublic' must be a boolean")
        cleaned["isPublic"] = fields["isPublic"]

    if cleaned.get("difficulty") is not None:
        cleaned["difficulty"] = cleaned["difficulty"].value
    return {UPDATABLE_COLUMNS[key]: value for key, value in cleaned.items()}


class SupabaseRecipeStore(RecipeStore):
    def __init__(self, client: Client, table_name: str = DEFAULT_TABLE_NAME):
        self._client = client
        self.table_name = table_name
        logger.info("SupabaseRecipeStore initialized table=%s", table_name)

    def _table(self):
        return self._client.table(self.table_name)

    def _execute(self, operation: str, query):
        try:
            return query.execute()
        except _STORE_ERRORS as error:
            logger.error("store.%s_fail error=%s", operation, error)
            raise PersistenceFailureError(operation, str(error)) from error

    def _rows(self, operation: str, query) -> list[RecipeRecord]:
        result = self._execute(operation, query)
        return [_row_to_record(row) for row in (result.data or [])]

    def create(self, record: RecipeRecord) -> str:
        record_id = str(uuid4())
        row = _record_to_row(record, record_id)
        result = self._execute("create", self._table().insert(row))

        if not result.data:
            raise PersistenceFailureError("create", "insert returned no rows")

        created_id = str(result.data[0].get("id") or record_id)
        logger.info("store.created id=%s owner=%s", created_id, record.owner_id)
        return created_id

    def get_by_id(self, record_id: str) -> Optional[RecipeRecord]:
        if not _is_uuid(record_id):
            return None
        records = self._rows("get", self._table().select("*").eq("id", str(record_id)).limit(1))
        return records[0] if records else None

    def query_by_owner(self, owner_id: str) -> list[RecipeRecord]:
        query = (
            self._table()
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True)
        )
        return self._rows("query_by_owner", query)

    def query_public(self) -> list[RecipeRecord]:
        query = (
            self._table()
            .select("*")
            .eq("is_public", True)
            .order("created_at", desc=True)
        )
        return self._rows("query_public", query)

    def update(self, record_id: str, fields: Mapping[str, Any]) -> None:
        row = _update_to_row(fields)
        if not row:
            return
        self._execute("update", self._table().update(row).eq("id", str(record_id)))
        logger.info("store.updated id=%s fields=%s", record_id, ",".join(sorted(row)))

    def delete(self, record_id: str) -> None:
        self._execute("delete", self._table().delete().eq("id", str(record_id)))
        logger.info("store.deleted id=%s", record_id)

    def search_by_title(
        self,
        term: str,
        owner_id: Optional[str] = None,
    ) -> list[RecipeRecord]:
        needle = term.strip()
        if not needle:
            return []

        query = self._table().select("*").ilike("title", f"%{_like_pattern(needle)}%")
        if owner_id:
            query = query.eq("owner_id", owner_id)
        else:
            query = query.eq("is_public", True)
        records = self._rows("search", query.order("title"))
        # ILIKE only narrows; '*' cannot be escaped through PostgREST.
        return [record for record in records if needle.lower() in record.title.lower()]

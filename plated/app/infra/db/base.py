# plated/app/infra/db/base.py
"""
Abstract base class for the recipe document store.
This interface allows easy swapping between different store backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from plated.app.domain.models import RecipeRecord


class RecipeStore(ABC):
    """
    Abstract interface for recipe persistence.

    Every read re-applies the draft defaults, because the backing store does
    not enforce the recipe schema.

    Implementations:
    - SupabaseRecipeStore: Postgres table behind Supabase/PostgREST
    """

    @abstractmethod
    def create(self, record: RecipeRecord) -> str:
        """
        Persist a new record.

        Args:
            record: Fully built record without an id

        Returns:
            The id assigned to the record
        """
        pass

    @abstractmethod
    def get_by_id(self, record_id: str) -> Optional[RecipeRecord]:
        """
        Args:
            record_id: The record id

        Returns:
            The record, or None if not found
        """
        pass

    @abstractmethod
    def query_by_owner(self, owner_id: str) -> list[RecipeRecord]:
        """Records owned by a user, ordered by creation date descending."""
        pass

    @abstractmethod
    def query_public(self) -> list[RecipeRecord]:
        """Public records, ordered by creation date descending."""
        pass

    @abstractmethod
    def update(self, record_id: str, fields: Mapping[str, Any]) -> None:
        """
        Merge a partial set of fields into an existing record.

        Args:
            record_id: The record to update
            fields: Draft fields and/or isPublic, by wire name
        """
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        pass

    @abstractmethod
    def search_by_title(
        self,
        term: str,
        owner_id: Optional[str] = None,
    ) -> list[RecipeRecord]:
        """
        Case-insensitive title search, ordered by title.

        Args:
            term: Text that must appear in the title
            owner_id: If provided, search this user's records; otherwise
                search public records
        """
        pass

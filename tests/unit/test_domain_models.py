from __future__ import annotations

from datetime import datetime, timezone

from plated.app.domain.models import (
    Difficulty,
    Platform,
    RecipeDraft,
    RecipeRecord,
    VideoReference,
)


def _record() -> RecipeRecord:
    return RecipeRecord(
        title="Pancakes",
        ingredients=["flour"],
        instructions=["mix"],
        video_url="https://youtu.be/abc",
        owner_id="alice",
        created_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        difficulty=Difficulty.MEDIUM,
        tags=["breakfast"],
    )


class TestEnums:
    def test_platform_values(self) -> None:
        assert Platform.YOUTUBE.value == "youtube"
        assert Platform.TIKTOK.value == "tiktok"
        assert Platform.INSTAGRAM.value == "instagram"
        assert Platform.UNKNOWN.value == "unknown"

    def test_difficulty_is_string_enum(self) -> None:
        assert isinstance(Difficulty.EASY, str)
        assert Difficulty.HARD == "Hard"


class TestVideoReference:
    def test_only_youtube_has_thumbnail(self) -> None:
        assert VideoReference("u", Platform.TIKTOK, "123").thumbnail_url is None
        assert VideoReference("u", Platform.YOUTUBE, None).thumbnail_url is None
        assert VideoReference("u", Platform.YOUTUBE, "abc").thumbnail_url is not None

    def test_unknown_is_not_supported(self) -> None:
        assert VideoReference("u", Platform.UNKNOWN).is_supported is False


class TestRecipeDraft:
    def test_to_dict_uses_wire_names(self) -> None:
        draft = RecipeDraft(
            title="Pancakes",
            ingredients=["flour"],
            instructions=["mix"],
            prep_time="5 mins",
            difficulty=Difficulty.EASY,
        )

        assert draft.to_dict() == {
            "title": "Pancakes",
            "ingredients": ["flour"],
            "instructions": ["mix"],
            "prepTime": "5 mins",
            "difficulty": "Easy",
            "tags": [],
        }

    def test_copy_is_independent(self) -> None:
        draft = RecipeDraft(title="Pancakes", ingredients=["flour"], instructions=["mix"])

        clone = draft.copy()
        clone.ingredients.append("eggs")

        assert draft.ingredients == ["flour"]


class TestRecipeRecord:
    def test_to_dict_without_id(self) -> None:
        data = _record().to_dict()

        assert "id" not in data
        assert data["createdAt"] == "2024-01-15T12:00:00+00:00"
        assert data["isPublic"] is False
        assert data["ownerId"] == "alice"
        assert data["videoUrl"] == "https://youtu.be/abc"
        assert data["difficulty"] == "Medium"

    def test_with_id_returns_a_new_record(self) -> None:
        record = _record()

        saved = record.with_id("rec-1")

        assert saved.id == "rec-1"
        assert record.id is None
        assert saved.to_dict()["id"] == "rec-1"

    def test_draft_view(self) -> None:
        draft = _record().draft

        assert draft.title == "Pancakes"
        assert draft.tags == ["breakfast"]

from __future__ import annotations

import copy
import json
import re
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient

from plated.app.domain.models import PromptPayload
from plated.app.infra.auth.base import AuthProvider, AuthSession, CurrentUser, SignUpResult
from plated.app.infra.db.supabase_recipes_repo import SupabaseRecipeStore
from plated.app.main import create_app
from plated.services.errors import InvalidArgumentError, UnauthenticatedError
from plated.services.gemini_client import ModelInvoker
from plated.services.pipeline import RecipePipeline

PANCAKES_JSON = json.dumps(
    {
        "title": "Pancakes",
        "ingredients": ["1 cup flour", "1 egg", "1 cup milk"],
        "instructions": ["Mix everything", "Cook on a hot pan"],
        "prepTime": "5 mins",
        "cookTime": "10 mins",
        "servings": 4,
        "difficulty": "easy",
        "tags": ["breakfast", "sweet", "breakfast"],
    }
)


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    """ILIKE as PostgREST applies it: '*' and '%' match any run, '_' one char."""
    parts: list[str] = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "")))
        elif char in "%*":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST query builder for SupabaseRecipeStore."""

    def __init__(self, db: FakeSupabase, table: str) -> None:
        self._db = db
        self._table = table
        self._action = "select"
        self._payload: dict[str, Any] = {}
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def select(self, *columns: str, **kwargs: Any) -> FakeQuery:
        self._action = "select"
        return self

    def insert(self, row: dict[str, Any]) -> FakeQuery:
        self._action = "insert"
        self._payload = copy.deepcopy(row)
        return self

    def update(self, row: dict[str, Any]) -> FakeQuery:
        self._action = "update"
        self._payload = copy.deepcopy(row)
        return self

    def delete(self) -> FakeQuery:
        self._action = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(lambda row, c=column, v=value: row.get(c) == v)
        return self

    def ilike(self, column: str, pattern: str) -> FakeQuery:
        regex = _like_to_regex(pattern)
        self._filters.append(lambda row, c=column: regex.fullmatch(str(row.get(c) or "")) is not None)
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> FakeQuery:
        self._limit = count
        return self

    def execute(self) -> FakeResponse:
        self._db.executed.append((self._table, self._action))
        if self._db.error is not None:
            raise self._db.error

        rows = self._db.tables.setdefault(self._table, [])
        if self._action == "insert":
            rows.append(copy.deepcopy(self._payload))
            return FakeResponse([copy.deepcopy(self._payload)])

        matched = [row for row in rows if all(check(row) for check in self._filters)]
        if self._action == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse(copy.deepcopy(matched))
        if self._action == "delete":
            self._db.tables[self._table] = [row for row in rows if row not in matched]
            return FakeResponse(copy.deepcopy(matched))

        if self._order:
            column, desc = self._order
            matched.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        return FakeResponse(copy.deepcopy(matched))


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.executed: list[tuple[str, str]] = []
        self.error: Optional[Exception] = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class ModelInvokerStub(ModelInvoker):
    def __init__(self) -> None:
        self.responses: list[str] = [PANCAKES_JSON]
        self.error: Optional[Exception] = None
        self.prompts: list[PromptPayload] = []

    def invoke(self, prompt: PromptPayload) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.responses[min(len(self.prompts), len(self.responses)) - 1]


class AuthProviderStub(AuthProvider):
    PASSWORD = "correct-horse"

    def __init__(self) -> None:
        self.users = {
            "token-alice": CurrentUser(id="alice", email="alice@example.com", name="Alice"),
            "token-bob": CurrentUser(id="bob", email="bob@example.com"),
        }
        self.signed_out: list[str] = []

    def get_user(self, token: str) -> Optional[CurrentUser]:
        return self.users.get(token)

    def sign_in(self, email: str, password: str) -> AuthSession:
        for token, user in self.users.items():
            if user.email == email and password == self.PASSWORD:
                return AuthSession(access_token=token, user=user)
        raise UnauthenticatedError("Invalid email or password")

    def sign_up(self, email: str, password: str, name: Optional[str] = None) -> SignUpResult:
        if any(user.email == email for user in self.users.values()):
            raise InvalidArgumentError("User already registered")
        user = CurrentUser(id=f"user-{len(self.users) + 1}", email=email, name=name)
        # Accounts start unconfirmed, so no session is issued.
        self.users[f"token-{user.id}"] = user
        return SignUpResult(user=user)

    def sign_out(self, token: str) -> None:
        self.signed_out.append(token)


@pytest.fixture
def pancakes_json() -> str:
    return PANCAKES_JSON


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase: FakeSupabase) -> SupabaseRecipeStore:
    return SupabaseRecipeStore(fake_supabase)


@pytest.fixture
def model() -> ModelInvokerStub:
    return ModelInvokerStub()


@pytest.fixture
def auth() -> AuthProviderStub:
    return AuthProviderStub()


@pytest.fixture
def pipeline(model: ModelInvokerStub, store: SupabaseRecipeStore) -> RecipePipeline:
    return RecipePipeline(model, store)


@pytest.fixture
def client(
    store: SupabaseRecipeStore,
    model: ModelInvokerStub,
    auth: AuthProviderStub,
) -> TestClient:
    app = create_app(store=store, model=model, auth=auth)
    return TestClient(app)


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-bob"}

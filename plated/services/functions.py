# plated/services/functions.py
"""
Named remote-call dispatch for clients that invoke backend functions by name
with a `{data}` payload instead of calling REST routes.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from plated.app.infra.auth.base import CurrentUser
from plated.services.errors import FunctionNotFoundError, InvalidArgumentError, UnauthenticatedError
from plated.services.pipeline import RecipePipeline

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any], Optional[CurrentUser]], dict[str, Any]]


def _require_user(user: Optional[CurrentUser]) -> CurrentUser:
    if user is None:
        raise UnauthenticatedError("User must be authenticated")
    return user


class FunctionInvoker:
    def __init__(self, pipeline: RecipePipeline):
        self._pipeline = pipeline
        self._handlers: dict[str, Handler] = {
            "generateRecipeFromVideo": self._generate,
            "saveGeneratedRecipe": self._save,
            "getUserRecipes": self._user_recipes,
            "getPublicRecipes": self._public_recipes,
        }

    @property
    def names(self) -> list[str]:
        return sorted(self._handlers)

    def invoke(
        self,
        name: str,
        data: Optional[Mapping[str, Any]],
        user: Optional[CurrentUser] = None,
    ) -> dict[str, Any]:
        handler = self._handlers.get(name)
        if handler is None:
            raise FunctionNotFoundError(name)
        if data is not None and not isinstance(data, Mapping):
            raise InvalidArgumentError("Function data must be an object")

        logger.info("function.call name=%s user=%s", name, user.id if user else None)
        return handler(data or {}, user)

    def _generate(self, data: Mapping[str, Any], user: Optional[CurrentUser]) -> dict[str, Any]:
        _require_user(user)
        return self._pipeline.generate(data.get("videoUrl")).to_dict()

    def _save(self, data: Mapping[str, Any], user: Optional[CurrentUser]) -> dict[str, Any]:
        caller = _require_user(user)
        is_public = data.get("isPublic")
        record = self._pipeline.save(
            data.get("recipe"),
            data.get("videoUrl"),
            caller.id,
            is_public=is_public if isinstance(is_public, bool) else None,
        )
        return record.to_dict()

    def _user_recipes(self, data: Mapping[str, Any], user: Optional[CurrentUser]) -> dict[str, Any]:
        caller = _require_user(user)
        return {"recipes": [record.to_dict() for record in self._pipeline.list_for_owner(caller.id)]}

    def _public_recipes(self, data: Mapping[str, Any], user: Optional[CurrentUser]) -> dict[str, Any]:
        return {"recipes": [record.to_dict() for record in self._pipeline.list_public()]}

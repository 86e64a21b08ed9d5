from __future__ import annotations

import pytest

from plated.services.errors import (
    EmptyResponseError,
    FunctionNotFoundError,
    GenerationError,
    InvalidArgumentError,
    MalformedOutputError,
    ModelUnavailableError,
    NotFoundError,
    PersistenceFailureError,
    RateLimitedError,
    ServiceError,
    UnauthenticatedError,
    UnsupportedPlatformError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert error.kind == "Internal"
        assert isinstance(error, Exception)


class TestKinds:
    @pytest.mark.parametrize(
        "error, kind",
        [
            (UnsupportedPlatformError("Vimeo"), "UnsupportedPlatform"),
            (UnauthenticatedError(), "Unauthenticated"),
            (InvalidArgumentError("bad"), "InvalidArgument"),
            (NotFoundError("Recipe", "r1"), "NotFound"),
            (ModelUnavailableError("down"), "ModelUnavailable"),
            (RateLimitedError("slow down"), "ModelUnavailable"),
            (EmptyResponseError(), "EmptyResponse"),
            (MalformedOutputError("not json"), "MalformedOutput"),
            (PersistenceFailureError("create", "timeout"), "PersistenceFailure"),
        ],
    )
    def test_kind(self, error: ServiceError, kind: str) -> None:
        assert error.kind == kind
        assert isinstance(error, ServiceError)


class TestGenerationErrors:
    @pytest.mark.parametrize("error_type", [ModelUnavailableError, EmptyResponseError, MalformedOutputError])
    def test_share_a_base(self, error_type: type[ServiceError]) -> None:
        assert issubclass(error_type, GenerationError)

    def test_rate_limit_is_model_unavailable(self) -> None:
        assert isinstance(RateLimitedError("quota"), ModelUnavailableError)

    def test_empty_response_default_message(self) -> None:
        assert "text content" in str(EmptyResponseError())


class TestUnauthenticatedError:
    def test_default_message(self) -> None:
        assert str(UnauthenticatedError()) == "Please sign in to continue"


class TestNotFoundError:
    def test_carries_resource(self) -> None:
        error = NotFoundError("Recipe", "r1")
        assert error.resource == "Recipe"
        assert error.resource_id == "r1"
        assert "r1" in str(error)

    def test_function_not_found(self) -> None:
        error = FunctionNotFoundError("nope")
        assert isinstance(error, NotFoundError)
        assert error.name == "nope"


class TestPersistenceFailureError:
    def test_message(self) -> None:
        error = PersistenceFailureError("create", "timeout")
        assert str(error) == "Recipe store error during create: timeout"
        assert error.operation == "create"
        assert error.reason == "timeout"

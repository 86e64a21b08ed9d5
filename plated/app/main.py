# plated/app/main.py
from __future__ import annotations

import logging
import sys
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supabase import create_client

from plated.app.config import Settings, get_settings
from plated.app.infra.auth.base import AuthProvider
from plated.app.infra.auth.supabase_auth import SupabaseAuthProvider
from plated.app.infra.db.base import RecipeStore
from plated.app.infra.db.supabase_recipes_repo import SupabaseRecipeStore
from plated.app.routers.auth import router as auth_router
from plated.app.routers.functions import router as functions_router
from plated.app.routers.recipes import router as recipes_router
from plated.services.errors import (
    GenerationError,
    InvalidArgumentError,
    NotFoundError,
    PersistenceFailureError,
    ServiceError,
    UnauthenticatedError,
    UnsupportedPlatformError,
)
from plated.services.functions import FunctionInvoker
from plated.services.gemini_client import GeminiClient, ModelInvoker
from plated.services.pipeline import RecipePipeline

log = logging.getLogger("plated")

GENERATION_FAILED_MESSAGE = "Recipe generation failed, please try again."
PERSISTENCE_FAILED_MESSAGE = "Could not save or load recipes, please try again."

# Checked in order; subclasses before their bases.
ERROR_STATUS: tuple[tuple[type[ServiceError], int], ...] = (
    (UnsupportedPlatformError, status.HTTP_400_BAD_REQUEST),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (GenerationError, status.HTTP_502_BAD_GATEWAY),
    (PersistenceFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def configure_logging(level: str = "INFO") -> None:
    # Logging simples no stdout (bom para dev e containers)
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"kind": kind, "message": message}},
    )


def _status_for(error: ServiceError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _public_message(error: ServiceError) -> str:
    if isinstance(error, GenerationError):
        return GENERATION_FAILED_MESSAGE
    if isinstance(error, PersistenceFailureError):
        return PERSISTENCE_FAILED_MESSAGE
    return str(error)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        log.error("request.fail path=%s kind=%s error=%s", request.url.path, exc.kind, exc)
    return _error_response(status_code, exc.kind, _public_message(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, InvalidArgumentError.kind, message)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unexpected path=%s", request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ServiceError.kind, "Unexpected server error")


def _build_store(settings: Settings) -> RecipeStore:
    client = create_client(str(settings.SUPABASE_URL), settings.SUPABASE_SERVICE_ROLE_KEY)
    return SupabaseRecipeStore(client, table_name=settings.RECIPES_TABLE)


def _build_auth(settings: Settings) -> AuthProvider:
    client = create_client(str(settings.SUPABASE_URL), settings.SUPABASE_SERVICE_ROLE_KEY)
    return SupabaseAuthProvider(client)


def _build_model(settings: Settings) -> ModelInvoker:
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        max_output_tokens=settings.MODEL_MAX_OUTPUT_TOKENS,
        timeout_seconds=settings.MODEL_TIMEOUT_SECONDS,
        thumbnail_timeout_seconds=settings.THUMBNAIL_TIMEOUT_SECONDS,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[RecipeStore] = None,
    model: Optional[ModelInvoker] = None,
    auth: Optional[AuthProvider] = None,
) -> FastAPI:
    """
    Build the API with every client constructed up front.
    Serve with: uvicorn plated.app.main:create_app --factory
    """
    if settings is None and (store is None or model is None or auth is None):
        settings = get_settings()

    configure_logging(settings.LOG_LEVEL if settings else "INFO")

    store = store or _build_store(settings)
    model = model or _build_model(settings)
    auth = auth or _build_auth(settings)
    pipeline = RecipePipeline(model, store)

    app = FastAPI(title="Plated Recipes API", version="0.1.0")
    app.state.pipeline = pipeline
    app.state.auth = auth
    app.state.functions = FunctionInvoker(pipeline)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS if settings else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(recipes_router)
    app.include_router(functions_router)
    app.include_router(auth_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    log.info("app.ready env=%s", settings.APP_ENV if settings else "test")
    return app

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.5-flash"
    MODEL_MAX_OUTPUT_TOKENS: int = Field(default=1500, ge=1)
    MODEL_TIMEOUT_SECONDS: Optional[float] = Field(default=60.0, gt=0)
    THUMBNAIL_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    RECIPES_TABLE: str = "recipes"
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:8081", "http://localhost:19006"],
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

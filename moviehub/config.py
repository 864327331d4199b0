"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="MovieHub", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_image_url: HttpUrl = Field(
        default="https://image.tmdb.org/t/p/w500", alias="TMDB_IMAGE_URL"
    )
    tmdb_language: str = Field(default="en-US", alias="TMDB_LANGUAGE")

    popular_page_count: int = Field(
        default=3, alias="POPULAR_PAGE_COUNT", ge=1, le=20
    )
    page_size: int = Field(default=9, alias="PAGE_SIZE", ge=1, le=100)
    suggestion_limit: int = Field(
        default=10, alias="SUGGESTION_LIMIT", ge=1, le=50
    )
    title_check_min_length: int = Field(
        default=2, alias="TITLE_CHECK_MIN_LENGTH", ge=1, le=20
    )
    collection_storage_key: str = Field(
        default="myMovies", alias="COLLECTION_STORAGE_KEY"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./moviehub.db", alias="DATABASE_URL"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("collection_storage_key", mode="before")
    @classmethod
    def _require_storage_key(cls, value: object) -> object:
        """Reject blank storage keys so the collection always has a home."""

        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("COLLECTION_STORAGE_KEY must not be blank")
        return value

    @property
    def image_base_url(self) -> str:
        """Return the poster base URL without a trailing slash."""

        return str(self.tmdb_image_url).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()

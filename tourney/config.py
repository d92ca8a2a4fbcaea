"""Configuration helpers for tournament constants."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _Settings(BaseSettings):
    api_base_url: str = Field(
        default="http://127.0.0.1:8080", alias="TOURNEY_API_BASE_URL"
    )
    http_timeout: float = Field(default=10.0, alias="TOURNEY_HTTP_TIMEOUT")
    flight_capacity: int = Field(default=4, ge=1, alias="TOURNEY_FLIGHT_CAPACITY")
    max_strokes: int = Field(default=11, ge=1, alias="TOURNEY_MAX_STROKES")
    course_holes: int = Field(default=18, ge=1, alias="TOURNEY_COURSE_HOLES")
    default_par: int = Field(default=4, ge=1, alias="TOURNEY_DEFAULT_PAR")
    default_hole_length: int = Field(
        default=300, ge=0, alias="TOURNEY_DEFAULT_HOLE_LENGTH"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}

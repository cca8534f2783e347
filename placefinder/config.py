"""Runtime configuration based on environment variables."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from placefinder.domain.languages import GoogleLanguage

GOOGLE_PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class ExecutePolicy(str, Enum):
    """What ``execute()`` does with an invocation that is still running."""

    OVERLAP = "overlap"
    REPLACE = "replace"


class GooglePlacesSettings(BaseModel):
    api_key: SecretStr | None = None
    base_url: AnyHttpUrl = Field(
        default=GOOGLE_PLACES_BASE_URL,
        description="Root of the Places web service; endpoints are appended to it.",
    )
    request_timeout_seconds: float = Field(default=10, gt=0, le=120)

    @field_validator("api_key", mode="before")
    @classmethod
    def _empty_key_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def read_api_key(self) -> str | None:
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value() or None

    def endpoint(self, name: str) -> str:
        return f"{str(self.base_url).rstrip('/')}/{name}/json"


class PlaceFinderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PLACEFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    default_language: GoogleLanguage = GoogleLanguage.ENGLISH
    execute_policy: ExecutePolicy = ExecutePolicy.OVERLAP

    google: GooglePlacesSettings = Field(default_factory=GooglePlacesSettings)

    @field_validator("default_language", mode="before")
    @classmethod
    def _parse_language(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return GoogleLanguage.default()
        return GoogleLanguage.parse(value)


@lru_cache
def get_settings() -> PlaceFinderSettings:
    """Return cached settings instance."""

    return PlaceFinderSettings()


__all__ = [
    "GOOGLE_PLACES_BASE_URL",
    "ExecutePolicy",
    "GooglePlacesSettings",
    "PlaceFinderSettings",
    "get_settings",
]

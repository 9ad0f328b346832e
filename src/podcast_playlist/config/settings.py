"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.mentions.scoring import DEFAULT_KEYWORD_WINDOW, DEFAULT_MUSIC_KEYWORDS
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import KeywordWindow, MaxConcurrency, SearchLimit


class ExtractionSettings(BaseModel):
    """Mention extraction and keyword proximity configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    keywords: tuple[str, ...] = Field(
        default=DEFAULT_MUSIC_KEYWORDS,
        validation_alias=AliasChoices("keywords", "music_keywords"),
    )
    keyword_window: KeywordWindow = Field(
        default=DEFAULT_KEYWORD_WINDOW,
        validation_alias=AliasChoices("keyword_window", "window"),
    )
    disabled_patterns: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("keywords", "disabled_patterns", mode="before")
    @classmethod
    def validate_string_tuple(cls, v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
        """Accept comma-separated strings and lists, stripping blanks."""
        if isinstance(v, str):
            v = v.split(",")
        return tuple(item.strip() for item in v if item and item.strip())

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError(ErrorMessages.INVALID_KEYWORDS)
        return v


class ScoringSettings(BaseModel):
    """Bonus and penalty terms of the confidence formula."""

    model_config = SettingsConfigDict(frozen=True)

    keyword_bonus: float = Field(default=0.10, ge=0.0, le=1.0)
    quoted_bonus: float = Field(default=0.05, ge=0.0, le=1.0)
    proper_noun_bonus: float = Field(default=0.05, ge=0.0, le=1.0)
    short_field_penalty: float = Field(default=0.20, ge=0.0, le=1.0)
    self_reference_penalty: float = Field(default=0.10, ge=0.0, le=1.0)


class ResolverSettings(BaseModel):
    """Request quota, retry and fan-out configuration for catalog searches."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    requests_per_window: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("requests_per_window", "requests_per_minute", "quota"),
    )
    window_seconds: float = Field(default=60.0, gt=0.0)
    max_wait_seconds: float = Field(default=30.0, ge=0.0)
    max_retries: int = Field(default=3, ge=0, le=10)
    base_delay_seconds: float = Field(default=0.25, gt=0.0)
    max_delay_seconds: float = Field(default=8.0, gt=0.0)
    max_concurrency: MaxConcurrency = Field(
        default=5, validation_alias=AliasChoices("max_concurrency", "fan_out")
    )

    @model_validator(mode="after")
    def validate_delays(self) -> ResolverSettings:
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        return self


class MatcherSettings(BaseModel):
    """Track matching configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    threshold: float = Field(
        default=0.75,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("threshold", "similarity_threshold"),
    )
    artist_weight: float = Field(default=0.45, ge=0.0, le=1.0)
    title_weight: float = Field(default=0.55, ge=0.0, le=1.0)
    album_bonus: float = Field(default=0.05, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_weights(self) -> MatcherSettings:
        if abs(self.artist_weight + self.title_weight - 1.0) > 1e-6:
            raise ValueError(ErrorMessages.INVALID_MATCH_WEIGHTS)
        return self


class PipelineSettings(BaseModel):
    """Pipeline orchestration configuration."""

    model_config = SettingsConfigDict(frozen=True)

    deadline_seconds: float | None = Field(default=None, gt=0.0)
    systemic_min_items: int = Field(default=2, ge=1)


class CatalogSettings(BaseModel):
    """Catalog (Spotify Web API) configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_id", "spotify_client_id"),
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    api_base_url: str = "https://api.spotify.com/v1"
    token_url: str = "https://accounts.spotify.com/api/token"
    market: str | None = Field(default=None, min_length=2, max_length=2)
    search_limit: SearchLimit = 5
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)

    @field_validator("api_base_url", "token_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("Catalog URLs must start with http:// or https://")
        return v.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id.get_secret_value() and self.client_secret.get_secret_value())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - RESOLVER__REQUESTS_PER_WINDOW, RESOLVER__MAX_RETRIES, ... (nested with "__")
    - MATCHER__THRESHOLD, PIPELINE__DEADLINE_SECONDS, ...
    - CATALOG__CLIENT_ID, CATALOG__CLIENT_SECRET (secrets)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    matcher: MatcherSettings = Field(default_factory=MatcherSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for every settings group
- Loading settings from environment variables (top-level and nested)
- Field aliases
- Custom validators (keywords, match weights, delays, URLs, log level)
- Settings caching and clearing
"""

import pytest
from pydantic import SecretStr, ValidationError

from podcast_playlist.config.settings import (
    CatalogSettings,
    ExtractionSettings,
    MatcherSettings,
    PipelineSettings,
    ResolverSettings,
    ScoringSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from podcast_playlist.domain.mentions.scoring import DEFAULT_MUSIC_KEYWORDS

# =============================================================================
# ExtractionSettings Tests
# =============================================================================


class TestExtractionSettings:
    """Unit tests for ExtractionSettings configuration."""

    def test_create_with_defaults(self):
        """Should default to the built-in music keywords and no disabled patterns."""
        extraction = ExtractionSettings()

        assert extraction.keywords == DEFAULT_MUSIC_KEYWORDS
        assert extraction.keyword_window == 8
        assert extraction.disabled_patterns == ()

    def test_comma_separated_keywords(self):
        """Should split comma-separated strings and drop blanks."""
        extraction = ExtractionSettings(keywords="song, track,, tune ")

        assert extraction.keywords == ("song", "track", "tune")

    def test_keywords_alias(self):
        """Should accept 'music_keywords' alias for keywords."""
        extraction = ExtractionSettings(music_keywords=["banger"])

        assert extraction.keywords == ("banger",)

    def test_empty_keywords_rejected(self):
        """Should raise ValidationError when no keyword remains."""
        with pytest.raises(ValidationError, match="At least one music keyword"):
            ExtractionSettings(keywords=" , ")

    def test_keyword_window_bounds(self):
        """Should raise ValidationError for a window below 1."""
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            ExtractionSettings(keyword_window=0)


# =============================================================================
# ScoringSettings / MatcherSettings Tests
# =============================================================================


class TestScoringSettings:
    def test_create_with_defaults(self):
        scoring = ScoringSettings()

        assert scoring.keyword_bonus == 0.10
        assert scoring.quoted_bonus == 0.05
        assert scoring.proper_noun_bonus == 0.05
        assert scoring.short_field_penalty == 0.20
        assert scoring.self_reference_penalty == 0.10

    def test_bonus_out_of_range(self):
        with pytest.raises(ValidationError, match="less than or equal to 1"):
            ScoringSettings(keyword_bonus=1.5)


class TestMatcherSettings:
    """Unit tests for MatcherSettings configuration."""

    def test_create_with_defaults(self):
        """Should use the documented threshold and weights."""
        matcher = MatcherSettings()

        assert matcher.threshold == 0.75
        assert matcher.artist_weight == 0.45
        assert matcher.title_weight == 0.55
        assert matcher.album_bonus == 0.05

    def test_weights_must_sum_to_one(self):
        """Should raise ValidationError when weights do not sum to 1."""
        with pytest.raises(ValidationError, match="must equal 1.0"):
            MatcherSettings(artist_weight=0.5, title_weight=0.6)

    def test_threshold_alias(self):
        """Should accept 'similarity_threshold' alias for threshold."""
        assert MatcherSettings(similarity_threshold=0.9).threshold == 0.9


# =============================================================================
# ResolverSettings Tests
# =============================================================================


class TestResolverSettings:
    """Unit tests for ResolverSettings configuration."""

    def test_create_with_defaults(self):
        """Should default to 100 requests per 60 seconds and 3 retries."""
        resolver = ResolverSettings()

        assert resolver.requests_per_window == 100
        assert resolver.window_seconds == 60.0
        assert resolver.max_wait_seconds == 30.0
        assert resolver.max_retries == 3
        assert resolver.base_delay_seconds == 0.25
        assert resolver.max_delay_seconds == 8.0
        assert resolver.max_concurrency == 5

    def test_quota_aliases(self):
        """Should accept 'requests_per_minute' and 'quota' aliases."""
        assert ResolverSettings(requests_per_minute=10).requests_per_window == 10
        assert ResolverSettings(quota=20).requests_per_window == 20

    def test_max_delay_below_base_rejected(self):
        """Should raise ValidationError when max delay is below base delay."""
        with pytest.raises(ValidationError, match="max_delay_seconds must be >="):
            ResolverSettings(base_delay_seconds=2.0, max_delay_seconds=1.0)

    def test_concurrency_bounds(self):
        """Should raise ValidationError for zero fan-out."""
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            ResolverSettings(max_concurrency=0)

    def test_immutability(self):
        """Should be immutable (frozen)."""
        resolver = ResolverSettings()

        with pytest.raises(ValidationError):
            resolver.max_retries = 5


class TestPipelineSettings:
    def test_create_with_defaults(self):
        pipeline = PipelineSettings()

        assert pipeline.deadline_seconds is None
        assert pipeline.systemic_min_items == 2

    def test_deadline_must_be_positive(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            PipelineSettings(deadline_seconds=0)


# =============================================================================
# CatalogSettings Tests
# =============================================================================


class TestCatalogSettings:
    """Unit tests for CatalogSettings configuration."""

    def test_create_with_defaults(self):
        """Should point at the public Spotify endpoints without credentials."""
        catalog = CatalogSettings()

        assert catalog.api_base_url == "https://api.spotify.com/v1"
        assert catalog.token_url == "https://accounts.spotify.com/api/token"
        assert catalog.search_limit == 5
        assert catalog.market is None
        assert catalog.has_credentials is False

    def test_credentials(self):
        """Should report credentials only when both parts are present."""
        catalog = CatalogSettings(client_id=SecretStr("id"), client_secret=SecretStr("secret"))

        assert catalog.has_credentials is True
        assert CatalogSettings(client_id=SecretStr("id")).has_credentials is False

    def test_credential_aliases(self):
        """Should accept 'spotify_client_id' and 'spotify_client_secret' aliases."""
        catalog = CatalogSettings(spotify_client_id="id", spotify_client_secret="secret")

        assert catalog.client_id.get_secret_value() == "id"

    def test_trailing_slash_trimmed(self):
        """Should strip the trailing slash from URLs."""
        catalog = CatalogSettings(api_base_url="http://localhost:9000/v1/")

        assert catalog.api_base_url == "http://localhost:9000/v1"

    def test_invalid_url_scheme(self):
        """Should raise ValidationError for non-HTTP URLs."""
        with pytest.raises(ValidationError, match="must start with http"):
            CatalogSettings(token_url="ftp://accounts.spotify.com")

    def test_secrets_not_exposed_in_repr(self):
        """Should not leak the secret in repr."""
        catalog = CatalogSettings(client_secret=SecretStr("hunter2"))

        assert "hunter2" not in repr(catalog)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Unit tests for the main Settings container."""

    def test_create_with_all_defaults(self, monkeypatch):
        """Should create Settings with default values when no env is set."""
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("DEBUG", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.resolver, ResolverSettings)
        assert isinstance(settings.catalog, CatalogSettings)

    def test_load_from_environment_variables(self, monkeypatch):
        """Should load top-level settings from environment variables."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.debug is True
        assert settings.log_level == "WARNING"

    def test_load_nested_settings_from_env(self, monkeypatch):
        """Should load nested settings with the double-underscore delimiter."""
        monkeypatch.setenv("RESOLVER__MAX_RETRIES", "5")
        monkeypatch.setenv("RESOLVER__REQUESTS_PER_WINDOW", "50")
        monkeypatch.setenv("MATCHER__THRESHOLD", "0.8")
        monkeypatch.setenv("PIPELINE__DEADLINE_SECONDS", "12.5")
        monkeypatch.setenv("CATALOG__CLIENT_ID", "env-id")
        monkeypatch.setenv("EXTRACTION__KEYWORDS", '["song", "tune"]')

        settings = Settings(_env_file=None)

        assert settings.resolver.max_retries == 5
        assert settings.resolver.requests_per_window == 50
        assert settings.matcher.threshold == 0.8
        assert settings.pipeline.deadline_seconds == 12.5
        assert settings.catalog.client_id.get_secret_value() == "env-id"
        assert settings.extraction.keywords == ("song", "tune")

    def test_environment_validation(self, monkeypatch):
        """Should raise ValidationError for unknown environments."""
        monkeypatch.setenv("ENVIRONMENT", "staging")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_log_level_validation_case_insensitive(self, monkeypatch):
        """Should accept lowercase log levels and normalise them."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_log_level_validation_invalid(self, monkeypatch):
        """Should raise ValidationError for invalid log level."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None)

    def test_nested_validation_propagates(self, monkeypatch):
        """Should surface nested validator errors."""
        monkeypatch.setenv("MATCHER__ARTIST_WEIGHT", "0.9")

        with pytest.raises(ValidationError, match="must equal 1.0"):
            Settings(_env_file=None)


# =============================================================================
# Settings Caching Tests
# =============================================================================


class TestSettingsCaching:
    """Tests for the get_settings cache."""

    def test_get_settings_returns_cached_instance(self, monkeypatch):
        """Should return the same instance on repeated calls."""
        monkeypatch.setenv("ENVIRONMENT", "test")

        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        """Should reload settings after the cache is cleared."""
        monkeypatch.setenv("ENVIRONMENT", "test")
        first = get_settings()

        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_settings().environment == "test"

        clear_settings_cache()
        second = get_settings()

        assert second is not first
        assert second.environment == "production"

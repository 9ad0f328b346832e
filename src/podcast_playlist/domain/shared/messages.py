"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Extraction
    TRANSCRIPT_NOT_STRING = "Transcript must be a string, got {type_name}"
    TRANSCRIPT_EMPTY = "Transcript is empty after trimming"

    # Transcript sources
    TRANSCRIPT_FILE_MISSING = "Transcript file not found: {path}"
    TRANSCRIPT_FILE_UNREADABLE = "Transcript file could not be read: {path} ({error})"
    TRANSCRIPT_SEGMENTS_INVALID = "Transcript segments in {path} are invalid: {error}"

    # Catalog
    CATALOG_CREDENTIALS_MISSING = (
        "CATALOG__CLIENT_ID and CATALOG__CLIENT_SECRET must be set to search the catalog"
    )
    CATALOG_INVALID_JSON = "Catalog returned a non-JSON body"
    CATALOG_INVALID_PAYLOAD = "Catalog payload failed validation: {error}"
    SEARCH_RETRIES_EXHAUSTED = "Search for '{artist} - {title}' failed after {attempts} attempts"
    SEARCH_NOT_RETRIABLE = "Search for '{artist} - {title}' failed: {error}"

    # Settings
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_KEYWORDS = "At least one music keyword is required"
    INVALID_MATCH_WEIGHTS = "artist_weight + title_weight must equal 1.0"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application lifecycle
    APP_STARTING = "Starting podcast playlist pipeline (environment=%s)"
    APP_FATAL_ERROR = "Fatal error: %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    CONTAINER_SHUTDOWN_FAILED = "Failed closing %s: %r"

    # Extraction
    EXTRACTION_COMPLETED = "Extracted %d mention candidates from %d characters"
    DEDUP_COMPLETED = "Deduplicated %d scored mentions into %d recommendations"

    # Transcript sources
    TRANSCRIPT_SEGMENTS_LOADED = "Loaded %d caption segments from %s"

    # Rate limiting / retries
    RATE_LIMIT_WAITING = "Request quota exhausted, waiting %.2fs for a slot"
    RATE_LIMIT_TIMEOUT = "Request quota slot needs %.2fs, max wait is %.2fs"
    SEARCH_RETRYING = "Search for '%s - %s' failed (%s), retry %d/%d in %.2fs"
    SEARCH_GAVE_UP = "Search for '%s - %s' gave up after %d attempts: %s"
    SEARCH_NOT_RETRIABLE = "Search for '%s - %s' failed without retry: %s"

    # Catalog adapter
    CATALOG_TOKEN_REFRESHED = "Catalog access token refreshed (expires in %ds)"
    CATALOG_TOKEN_REJECTED = "Catalog rejected access token, refreshing once"
    CATALOG_SEARCH = "Catalog search q=%r returned %d results"

    # Matching
    MATCH_RESOLVED = "Resolved '%s - %s' to %s (similarity=%.3f)"
    MATCH_NO_MATCH = "No catalog match for '%s - %s' (best similarity=%.3f)"

    # Pipeline
    PIPELINE_STARTED = "Resolving %d recommendations with fan-out %d"
    PIPELINE_ITEM_FAILED = "Resolution of '%s - %s' failed: %s"
    PIPELINE_ITEM_UNEXPECTED = "Unexpected error resolving '%s - %s'"
    PIPELINE_DEADLINE_SKIPPED = "Deadline exceeded, skipping '%s - %s'"
    PIPELINE_COMPLETED = "Pipeline finished: %d resolved, %d unresolved, %d errors"
    PIPELINE_SYSTEMIC_FAILURE = "All %d recommendations failed with the same cause: %s"

    # Playlist command
    PLAYLIST_CREATED = "Created playlist %r with %d tracks"
    PLAYLIST_SKIPPED_EMPTY = "No resolved tracks for %r, playlist not created"
    PLAYLIST_TRANSCRIPT_UNAVAILABLE = "Transcript %r unavailable: %s"

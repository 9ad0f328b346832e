"""Shared string enumerations for type-safe comparisons across the pipeline."""

from __future__ import annotations

from enum import StrEnum


class UnresolvedReason(StrEnum):
    """Why a recommendation did not resolve to a catalog track."""

    NO_MATCH = "no_match"
    SEARCH_FAILED = "search_failed"


class ErrorKind(StrEnum):
    """Structured error categories recorded in a processing report."""

    EXTRACTION = "extraction"
    RATE_LIMIT_TIMEOUT = "rate_limit_timeout"
    SEARCH_FAILED = "search_failed"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    SYSTEMIC_FAILURE = "systemic_failure"


class MatchStatus(StrEnum):
    """Discriminator for track match results."""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"

"""Base exception classes for domain-level errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..matching.entities import ProcessingReport


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ExtractionError(DomainError):
    """Raised when a transcript cannot be scanned for mentions."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="EXTRACTION_ERROR")


class TranscriptUnavailable(DomainError):
    """Raised by a transcript source when the transcript cannot be obtained."""

    def __init__(self, identifier: str, message: str | None = None) -> None:
        msg = message or f"Transcript '{identifier}' is unavailable"
        super().__init__(msg, code="TRANSCRIPT_UNAVAILABLE")
        self.identifier = identifier


# ── Catalog boundary errors ─────────────────────────────────────────


class CatalogError(DomainError):
    """Base class for raw failures reported by a catalog search backend."""

    transient: bool = False
    status_code: int | None = None


class CatalogHTTPError(CatalogError):
    """Catalog answered with a non-success HTTP status."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        msg = message or f"Catalog request failed with status {status_code}"
        super().__init__(msg, code="CATALOG_HTTP_ERROR")
        self.status_code = status_code
        self.retry_after = retry_after

    @property
    def transient(self) -> bool:  # type: ignore[override]
        return self.status_code == 429 or self.status_code >= 500


class CatalogTransportError(CatalogError):
    """Network-level failure (connection refused, timeout, reset)."""

    transient = True

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CATALOG_TRANSPORT_ERROR")


class MalformedCatalogResponse(CatalogError):
    """Catalog answered, but the payload could not be understood."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="MALFORMED_CATALOG_RESPONSE")


# ── Resolution errors ───────────────────────────────────────────────


class RateLimitTimeout(DomainError):
    """Raised when a request quota slot could not be obtained in time."""

    def __init__(self, waited_for: float, max_wait: float) -> None:
        msg = f"Rate limit slot needs {waited_for:.2f}s, exceeding max wait of {max_wait:.2f}s"
        super().__init__(msg, code="RATE_LIMIT_TIMEOUT")
        self.waited_for = waited_for
        self.max_wait = max_wait


class SearchFailed(DomainError):
    """Raised when a catalog search failed for good (retries exhausted or non-retriable)."""

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        attempts: int = 1,
        transient: bool = False,
    ) -> None:
        super().__init__(message, code="SEARCH_FAILED")
        self.cause = cause
        self.attempts = attempts
        self.transient = transient

    @property
    def status_code(self) -> int | None:
        return getattr(self.cause, "status_code", None)

    @property
    def cause_code(self) -> str:
        if self.cause is None:
            return self.code
        return getattr(self.cause, "code", None) or self.cause.__class__.__name__


class DeadlineExceeded(DomainError):
    """Raised when the run deadline expired before an item could be attempted."""

    def __init__(self, deadline_seconds: float) -> None:
        super().__init__(
            f"Run deadline of {deadline_seconds:.2f}s exceeded", code="DEADLINE_EXCEEDED"
        )
        self.deadline_seconds = deadline_seconds


class SystemicResolutionFailure(DomainError):
    """Raised when every recommendation failed for the same root cause."""

    def __init__(self, cause: str, report: ProcessingReport) -> None:
        super().__init__(
            f"All {len(report.unresolved)} recommendations failed with the same cause: {cause}",
            code="SYSTEMIC_RESOLUTION_FAILURE",
        )
        self.cause = cause
        self.report = report

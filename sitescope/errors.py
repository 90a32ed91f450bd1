"""Pipeline error taxonomy.

Every error raised past a pipeline stage is a :class:`ScrapeError`.  Each
subclass carries the HTTP status the API layer answers with and the stage
name used in log lines.  ``message`` is always safe to show to a user.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for errors that end a scrape request."""

    status_code: int = 400
    stage: str = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(ScrapeError):
    """Missing or invalid bearer identity."""

    status_code = 401
    stage = "auth"


class ValidationError(ScrapeError):
    """Missing or malformed URL."""

    status_code = 400
    stage = "validate"


class FetchError(ScrapeError):
    """The remote document could not be retrieved.

    ``status`` holds the HTTP status for non-2xx responses; ``transport`` is
    ``True`` for connection, TLS and timeout failures.
    """

    status_code = 502
    stage = "fetch"

    def __init__(
        self,
        message: str,
        status: int | None = None,
        transport: bool = False,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.transport = transport


class EnrichmentError(ScrapeError):
    """The summary service failed.

    Caught inside the enricher and recorded as a failed analysis status, so it
    never reaches the API layer and keeps the base ``status_code``.
    """

    stage = "enrich"


class PersistenceError(ScrapeError):
    """The record store rejected the write."""

    status_code = 500
    stage = "persist"

    def __init__(self, message: str = "Failed to save scraped result") -> None:
        super().__init__(message)


class RequestCancelled(ScrapeError):
    """The caller went away before the record was written."""

    status_code = 499
    stage = "persist"

    def __init__(self, message: str = "Request cancelled") -> None:
        super().__init__(message)

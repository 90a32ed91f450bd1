"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

# Analysis status values, in lifecycle order.
STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"

ANALYSIS_STATUSES = (STATUS_PENDING, STATUS_PROCESSING, STATUS_COMPLETED, STATUS_FAILED)


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class Link:
    """An outbound link: visible text plus an absolute target URL."""

    text: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "url": self.url}


@dataclass
class ScrapedDocument:
    """Structured fields extracted from a :class:`RawPage`."""

    source_url: str
    title: str
    headings: List[str] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    content: str = ""
    markdown_content: Optional[str] = None


@dataclass
class EnrichmentResult:
    """Outcome of the optional summary step.

    ``insights``, ``keywords`` and ``sentiment`` are reserved for richer
    enrichers; the summary enricher leaves them empty.
    """

    status: str = STATUS_PENDING
    summary: Optional[str] = None
    insights: dict[str, Any] = field(default_factory=dict)
    keywords: List[str] = field(default_factory=list)
    sentiment: Optional[str] = None

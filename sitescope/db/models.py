"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class ScrapedRecord:
    id: str
    user_id: str
    url: str
    title: str
    content: str
    headings: list[str]
    links: list[dict[str, str]]
    analysis_status: str
    created_at: int
    updated_at: int
    ai_summary: Optional[str] = None
    markdown_content: Optional[str] = None
    ai_insights: dict[str, Any] = field(default_factory=dict)
    keywords: list[str] = field(default_factory=list)
    sentiment: Optional[str] = None

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    @property
    def timestamp(self) -> str:
        """``created_at`` as an ISO-8601 UTC string."""
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc).isoformat()

    def to_public(self) -> dict[str, Any]:
        """The client-visible projection of this record."""
        data: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "headings": list(self.headings),
            "links": [dict(link) for link in self.links],
            "analysisStatus": self.analysis_status,
            "timestamp": self.timestamp,
        }
        if self.ai_summary is not None:
            data["aiSummary"] = self.ai_summary
        return data

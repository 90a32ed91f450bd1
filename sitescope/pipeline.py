"""Scrape pipeline: URL variant.

``scrape_url`` runs one request end to end:

    normalize → validate → fetch → extract → enrich → persist

Each stage either hands its output to the next or raises a
:class:`~sitescope.errors.ScrapeError`.  Enrichment is the exception: its
failures are folded into ``analysis_status`` and the run continues.  The
record is written exactly once, after the enrichment attempt.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlsplit

from sitescope.db.models import ScrapedRecord
from sitescope.db.results import insert_result
from sitescope.enrichment.summarizer import enrich_document
from sitescope.errors import RequestCancelled, ValidationError
from sitescope.scraper.extractor import extract_document
from sitescope.scraper.fetcher import fetch_url
from sitescope.scraper.models import EnrichmentResult, ScrapedDocument

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "https"
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_ALLOWED_SCHEMES = ("http", "https")


@dataclass
class PreparedScrape:
    """Everything the store write needs, held in memory until persisted."""

    url: str
    document: ScrapedDocument
    enrichment: EnrichmentResult


# ---------------------------------------------------------------------------
# 1 & 2: Normalize and validate
# ---------------------------------------------------------------------------

def normalize_url(raw_url: Optional[str]) -> str:
    """Trim *raw_url* and prepend ``https://`` when it has no scheme."""
    url = (raw_url or "").strip()
    if url and not _SCHEME_RE.match(url):
        url = f"{DEFAULT_SCHEME}://{url}"
    return url


def validate_url(url: str) -> str:
    """Return *url* unchanged if it is an absolute http(s) URL.

    Raises:
        ValidationError: On an empty, relative, or otherwise malformed URL.
    """
    if not url:
        raise ValidationError("URL is required")
    if any(ch.isspace() for ch in url):
        raise ValidationError("Invalid URL format")
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError as exc:
        raise ValidationError("Invalid URL format") from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise ValidationError("Only HTTP and HTTPS URLs are supported")
    if not parts.netloc or not parts.hostname:
        raise ValidationError("Invalid URL format")
    return url


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def prepare_scrape(raw_url: Optional[str]) -> PreparedScrape:
    """Run every stage up to, but not including, the store write.

    Raises:
        ValidationError: If the URL is missing or malformed (no network call).
        FetchError: If the page cannot be fetched.
    """
    url = validate_url(normalize_url(raw_url))

    logger.info("stage=fetch url=%s", url)
    raw = fetch_url(url)

    document = extract_document(raw)
    logger.info(
        "stage=extract url=%s headings=%d links=%d content_chars=%d",
        url, len(document.headings), len(document.links), len(document.content),
    )

    enrichment = enrich_document(document)
    return PreparedScrape(url=url, document=document, enrichment=enrichment)


def persist_scrape(
    conn: sqlite3.Connection, user_id: str, prepared: PreparedScrape
) -> ScrapedRecord:
    """Write *prepared* for *user_id*.

    Raises:
        PersistenceError: If the store rejects the write.
    """
    record = insert_result(conn, user_id, prepared.document, prepared.enrichment)
    logger.info(
        "stage=persist url=%s id=%s status=%s",
        prepared.url, record.id, record.analysis_status,
    )
    return record


def scrape_url(
    conn: sqlite3.Connection,
    raw_url: Optional[str],
    user_id: str,
    is_cancelled: Optional[Callable[[], bool]] = None,
) -> ScrapedRecord:
    """Scrape *raw_url* for *user_id* and return the persisted record.

    Args:
        conn: Open, initialised DB connection.
        raw_url: The URL as typed by the user; a missing scheme means https.
        user_id: Verified owner of the new record.
        is_cancelled: Polled once before the store write; when it returns
            ``True`` the run stops and nothing is written.

    Raises:
        ValidationError, FetchError, PersistenceError, RequestCancelled.
    """
    prepared = prepare_scrape(raw_url)
    if is_cancelled is not None and is_cancelled():
        logger.info("stage=persist url=%s skipped: request cancelled", prepared.url)
        raise RequestCancelled()
    return persist_scrape(conn, user_id, prepared)

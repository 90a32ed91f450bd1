"""Scraper package: web fetch & structured extraction."""

from sitescope.scraper.extractor import extract_document
from sitescope.scraper.fetcher import fetch_url
from sitescope.scraper.models import EnrichmentResult, Link, RawPage, ScrapedDocument

__all__ = [
    "fetch_url",
    "extract_document",
    "RawPage",
    "Link",
    "ScrapedDocument",
    "EnrichmentResult",
]

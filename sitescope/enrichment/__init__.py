"""Enrichment package: optional AI summary of extracted content."""

from sitescope.enrichment.summarizer import enrich_document, summary_prompt

__all__ = ["enrich_document", "summary_prompt"]

"""Best-effort AI summary of a scraped page.

Providers
---------
``openai``
    Uses ``langchain_openai.ChatOpenAI``.  Requires ``OPENAI_API_KEY``.

``ollama``
    Uses ``langchain_ollama.ChatOllama`` against ``OLLAMA_BASE_URL``.

When neither is configured the step is skipped and the status stays
``pending``.  :func:`enrich_document` never raises: call failures become
``status="failed"`` with no summary.
"""

from __future__ import annotations

import logging
from typing import Any

from sitescope.config import settings
from sitescope.errors import EnrichmentError
from sitescope.scraper.models import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    EnrichmentResult,
    ScrapedDocument,
)

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "Summary could not be generated."
TRUNCATION_MARKER = "..."

_SYSTEM_PROMPT = (
    "You summarize web pages. Write a concise, factual summary of the page "
    "content provided by the user. Do not invent details that are not in the text."
)


# ---------------------------------------------------------------------------
# LLM helper (mirrors the provider switch in settings)
# ---------------------------------------------------------------------------

def _get_llm(max_output_tokens: int) -> Any:
    """Return a LangChain chat model for ``settings.resolved_summary_provider``."""
    if settings.resolved_summary_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            api_key=settings.openai_api_key,
            temperature=0.3,
            max_tokens=max_output_tokens,
            timeout=settings.summary_timeout,
            max_retries=0,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=0.3,
        num_predict=max_output_tokens,
        client_kwargs={"timeout": settings.summary_timeout},
    )


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def summary_prompt(content: str, title: str, max_length: int, max_words: int) -> str:
    """Build the user prompt, capping *content* at *max_length* characters."""
    return (
        f"Summarize the following web page in at most {max_words} words.\n\n"
        f"Title: {title}\n\n"
        f"Content:\n{_truncate(content, max_length)}"
    )


def generate_summary(
    content: str,
    title: str,
    max_length: int,
    max_output_tokens: int,
) -> str:
    """Call the configured model and return its text (possibly empty).

    Raises:
        EnrichmentError: If the model call fails for any reason.
    """
    prompt = summary_prompt(content, title, max_length, settings.summary_max_words)
    try:
        llm = _get_llm(max_output_tokens)
        response = llm.invoke([("system", _SYSTEM_PROMPT), ("human", prompt)])
    except Exception as exc:  # noqa: BLE001
        raise EnrichmentError(f"Summary request failed: {exc}") from exc

    answer = response.content if hasattr(response, "content") else response
    if not isinstance(answer, str):
        raise EnrichmentError(f"Unusable summary response: {type(answer).__name__}")
    return answer


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def enrich_document(document: ScrapedDocument) -> EnrichmentResult:
    """Attempt a summary of *document* and report the outcome.

    * not configured, or blank content → ``pending``, no summary
    * model call error                 → ``failed``, no summary
    * blank model response             → ``completed``, :data:`EMPTY_SUMMARY`
    * otherwise                        → ``completed``, the summary text
    """
    result = EnrichmentResult()
    if not settings.summary_enabled:
        logger.debug("enrichment skipped url=%s: no summary provider", document.source_url)
        return result
    if not document.content.strip():
        logger.debug("enrichment skipped url=%s: empty content", document.source_url)
        return result

    result.status = STATUS_PROCESSING
    try:
        summary = generate_summary(
            document.content,
            document.title,
            max_length=settings.summary_max_input_chars,
            max_output_tokens=settings.summary_max_output_tokens,
        )
    except EnrichmentError as exc:
        logger.warning("stage=enrich url=%s failed: %s", document.source_url, exc.message)
        result.status = STATUS_FAILED
        return result

    result.summary = summary.strip() or EMPTY_SUMMARY
    result.status = STATUS_COMPLETED
    logger.info("stage=enrich url=%s completed (%d chars)", document.source_url, len(result.summary))
    return result

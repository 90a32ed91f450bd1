"""Content extraction: turns a :class:`RawPage` into a :class:`ScrapedDocument`.

Parsing is pattern-based and deliberately tolerant.  Malformed or partial
markup yields empty or default fields, never an exception.  Each field is
computed from the raw markup independently, so heading and link scans see
the tags that the content pass strips.
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import List, Optional
from urllib.parse import urljoin, urlsplit

import trafilatura

from sitescope.scraper.models import Link, RawPage, ScrapedDocument

logger = logging.getLogger(__name__)

MAX_HEADINGS = 20
MAX_LINKS = 50
MAX_CONTENT_CHARS = 15000
MAX_HTML_CHARS = 2_000_000
DEFAULT_TITLE = "Untitled"

# Element bodies stop at the next opening tag of the same kind and attribute
# runs stop at the next "<", so an unclosed element is abandoned at the next
# sibling instead of rescanning the rest of the document.
_TITLE_RE = re.compile(
    r"<title\b[^<>]*>((?:(?!<title\b).)*?)</title\s*>", re.IGNORECASE | re.DOTALL
)
_HEADING_RE = re.compile(
    r"<h([1-6])\b[^<>]*>((?:(?!<h[1-6]\b).)*?)</h\1\s*>", re.IGNORECASE | re.DOTALL
)
_LINK_RE = re.compile(
    r"<a\b[^<>]*?(?<![\w-])href\s*=\s*(?:\"([^\"<]*)\"|'([^'<]*)'|([^\s<>\"']+))[^<>]*>"
    r"((?:(?!<a\b).)*?)</a\s*>",
    re.IGNORECASE | re.DOTALL,
)
_BLOCK_RE = re.compile(
    r"<(script|style|noscript)\b[^<>]*>(?:(?!<\1\b).)*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_COMMENT_RE = re.compile(r"<!--(?:(?!<!--).)*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^<>]+>")
_WS_RE = re.compile(r"\s+")

# Navigation / boilerplate words dropped from the content blob.
_DENYLIST_RE = re.compile(
    r"\b(?:home|about|contact|privacy|terms|cookies?|login|register"
    r"|sign\s+up|sign\s+in|menu|navigation|footer|header)\b",
    re.IGNORECASE,
)

_BLOCKED_SCHEMES = frozenset({"javascript", "mailto"})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _inner_text(fragment: str) -> str:
    """Strip nested tags, decode entities and collapse whitespace."""
    text = _TAG_RE.sub(" ", fragment)
    text = html_lib.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def _extract_title(html: str) -> str:
    """Return the text of the first ``<title>`` element, or ``"Untitled"``."""
    match = _TITLE_RE.search(html)
    if match:
        title = _inner_text(match.group(1))
        if title:
            return title
    return DEFAULT_TITLE


def _extract_headings(html: str) -> List[str]:
    """Return non-empty ``h1``–``h6`` texts in document order (max 20)."""
    headings: List[str] = []
    for match in _HEADING_RE.finditer(html):
        text = _inner_text(match.group(2))
        if text:
            headings.append(text)
            if len(headings) == MAX_HEADINGS:
                break
    return headings


def _resolve_href(href: str, base_url: str) -> Optional[str]:
    """Return *href* in absolute form, or ``None`` when it cannot be resolved."""
    if href.startswith("//"):
        # Protocol-relative: inherit the base scheme only.
        return f"{urlsplit(base_url).scheme}:{href}"
    if href.startswith("/"):
        base = urlsplit(base_url)
        return f"{base.scheme}://{base.netloc}{href}"
    try:
        if urlsplit(href).scheme:
            return href
        return urljoin(base_url, href)
    except ValueError:
        return None


def _is_blocked(url: str) -> bool:
    scheme, sep, _ = url.partition(":")
    return bool(sep) and scheme.strip().lower() in _BLOCKED_SCHEMES


def _extract_links(html: str, base_url: str) -> List[Link]:
    """Return up to 50 resolved links in document order.

    Script and mail targets are dropped.  Duplicates are kept.
    """
    links: List[Link] = []
    for match in _LINK_RE.finditer(html):
        raw_href = next((g for g in match.group(1, 2, 3) if g is not None), "")
        href = html_lib.unescape(raw_href).strip()
        if not href:
            continue

        url = _resolve_href(href, base_url)
        if not url or _is_blocked(url):
            continue

        text = _inner_text(match.group(4)) or url
        links.append(Link(text=text, url=url))
        if len(links) == MAX_LINKS:
            break
    return links


def _extract_text(html: str) -> str:
    """Return the page as plain text with boilerplate words removed."""
    text = _BLOCK_RE.sub(" ", html)
    text = _COMMENT_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = html_lib.unescape(text)
    text = _WS_RE.sub(" ", text).strip()
    text = _DENYLIST_RE.sub(" ", text)
    text = _WS_RE.sub(" ", text).strip()
    return text[:MAX_CONTENT_CHARS].rstrip()


def _extract_markdown(html: str, url: str) -> Optional[str]:
    """Readability Markdown of the main content via ``trafilatura``.

    Returns ``None`` when trafilatura finds nothing or fails on the input.
    """
    try:
        markdown = trafilatura.extract(
            html,
            output_format="markdown",
            include_links=True,
            include_images=False,
            include_tables=True,
            url=url,
        )
    except Exception as exc:  # noqa: BLE001
        logger.debug("markdown extraction failed url=%s: %s", url, exc)
        return None
    return markdown or None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_document(raw: RawPage, include_markdown: bool = True) -> ScrapedDocument:
    """Extract title, headings, links and cleaned text from *raw*.

    Relative links are resolved against ``raw.url``.  No network access.
    Markup beyond :data:`MAX_HTML_CHARS` is ignored.

    Args:
        raw: The fetched page.
        include_markdown: Also render ``markdown_content`` with trafilatura.

    Returns:
        A :class:`ScrapedDocument` whose ``headings``, ``links`` and
        ``content`` respect the 20 / 50 / 15000 limits.
    """
    html = raw.html or ""
    if len(html) > MAX_HTML_CHARS:
        logger.info("markup truncated url=%s chars=%d", raw.url, len(html))
        html = html[:MAX_HTML_CHARS]
    return ScrapedDocument(
        source_url=raw.url,
        title=_extract_title(html),
        headings=_extract_headings(html),
        links=_extract_links(html, raw.url),
        content=_extract_text(html),
        markdown_content=_extract_markdown(html, raw.url) if include_markdown and html.strip() else None,
    )

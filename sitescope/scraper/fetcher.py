"""HTTP fetcher: one GET per pipeline run, no retries."""

from __future__ import annotations

import logging

import httpx

from sitescope.config import settings
from sitescope.errors import FetchError
from sitescope.scraper.models import RawPage

logger = logging.getLogger(__name__)


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def _read_limited(response: httpx.Response, limit: int) -> bytes:
    """Read at most *limit* bytes of a streamed body."""
    chunks: list[bytes] = []
    size = 0
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        size += len(chunk)
        if size >= limit:
            logger.info("body truncated url=%s limit=%d", response.url, limit)
            break
    return b"".join(chunks)[:limit]


def fetch_url(url: str, timeout: float | None = None) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    *url* must already be absolute; validation is the caller's job.
    Redirects are followed and the final 2xx body is returned, cut at
    ``settings.max_response_bytes``.

    Raises:
        FetchError: On connection/timeout failures (``transport=True``) or
            any non-2xx final response (``status`` set).
    """
    body = b""
    try:
        with httpx.Client(
            headers=_default_headers(),
            timeout=timeout if timeout is not None else settings.request_timeout,
            follow_redirects=True,
        ) as client:
            with client.stream("GET", url) as response:
                status_code = response.status_code
                encoding = response.encoding or "utf-8"
                if response.is_success:
                    body = _read_limited(response, settings.max_response_bytes)
    except httpx.TimeoutException as exc:
        logger.warning("fetch timed out url=%s: %s", url, exc)
        raise FetchError("Timed out fetching webpage", transport=True) from exc
    except httpx.HTTPError as exc:
        logger.warning("fetch transport error url=%s: %s", url, exc)
        raise FetchError("Could not connect to webpage", transport=True) from exc

    if not 200 <= status_code < 300:
        logger.warning("fetch failed url=%s status=%d", url, status_code)
        raise FetchError(f"Failed to fetch webpage: {status_code}", status=status_code)

    logger.debug("fetched url=%s status=%d bytes=%d", url, status_code, len(body))
    return RawPage(url=url, html=body.decode(encoding, errors="replace"), status_code=status_code)

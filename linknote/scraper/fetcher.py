"""HTTP fetcher for note source pages.

Static fetch only: the page is never rendered, so content built by JavaScript
is not seen by the extractor.
"""

from __future__ import annotations

import logging

import httpx

from linknote.config import settings
from linknote.errors import FetchError, NetworkError
from linknote.scraper.models import FetchedDocument

logger = logging.getLogger(__name__)


def browser_headers() -> dict[str, str]:
    """Request headers that identify us as a desktop browser.

    Many sites reject clients without a browser-like ``User-Agent``.
    """
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def fetch_page(url: str) -> FetchedDocument:
    """Fetch *url* and return a :class:`FetchedDocument`.

    No retries: a transient failure is surfaced to the caller immediately.

    Raises:
        FetchError: If the server answers with a non-2xx status code.
        NetworkError: On DNS failure, refused connection or timeout.
    """
    try:
        with httpx.Client(
            headers=browser_headers(),
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(exc.response.status_code, url) from exc
    except httpx.TransportError as exc:
        raise NetworkError(f"Could not reach {url}: {exc}") from exc

    logger.info("Fetched %s (%d bytes)", url, len(response.content))
    return FetchedDocument(
        url=url,
        base_url=str(response.url),
        content=response.content,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
    )

"""Inline ``<img>`` sources as base64 data URIs.

Each image is fetched independently; a failure only removes that one image.
Fetches run in a thread pool (``settings.image_fetch_concurrency`` workers)
that shares one ``httpx.Client``.  The tree itself is only touched from the
calling thread once results come back.
"""

from __future__ import annotations

import base64
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from urllib.parse import urljoin

import httpx

from linknote.config import settings
from linknote.errors import ImageFetchFailed
from linknote.scraper.fetcher import browser_headers
from linknote.scraper.loader import Document

logger = logging.getLogger(__name__)


def absolute_image_url(src: str, base_url: str) -> str:
    """Resolve an ``<img src>`` value to an absolute URL.

    ``http…`` URLs pass through, protocol-relative ``//host/path`` URLs gain
    the ``https:`` scheme, anything else is joined with *base_url*.
    """
    if src.startswith("http"):
        return src
    if src.startswith("//"):
        return "https:" + src
    return urljoin(base_url, src)


def fetch_image_data_uri(client: httpx.Client, url: str) -> str:
    """Download *url* and return it as a ``data:`` URI.

    Raises:
        ImageFetchFailed: On network errors, malformed URLs, non-2xx responses,
            a non-``image/*`` content type or a body above the configured cap.
    """
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ImageFetchFailed(url, f"HTTP error {exc.response.status_code}") from exc
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise ImageFetchFailed(url, str(exc) or type(exc).__name__) from exc

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    if not content_type.startswith("image/"):
        raise ImageFetchFailed(url, f"not an image ({content_type or 'no content type'})")

    body = response.content
    if settings.image_max_bytes and len(body) > settings.image_max_bytes:
        raise ImageFetchFailed(url, f"{len(body)} bytes exceeds {settings.image_max_bytes}")

    encoded = base64.b64encode(body).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def inline_images(document: Document, base_url: str) -> None:
    """Replace every ``<img src>`` in *document* with an embedded data URI.

    Images that cannot be fetched are removed from the document.  Images
    already carrying a ``data:`` URI are left as they are.  Nothing is raised
    for individual image failures.
    """
    pending = {}
    for img in document.find_all("img"):
        src = (img.get("src") or "").strip()
        if src.startswith("data:"):
            continue
        if not src:
            logger.warning("Dropping image without src")
            document.remove(img)
            continue
        try:
            url = absolute_image_url(src, base_url)
        except ValueError:
            logger.warning("Dropping image with unparseable src %r", src)
            document.remove(img)
            continue
        pending[id(img)] = (img, url)

    if not pending:
        return

    workers = max(1, min(settings.image_fetch_concurrency, len(pending)))
    with httpx.Client(
        headers=browser_headers(),
        timeout=settings.image_fetch_timeout,
        follow_redirects=True,
    ) as client, ThreadPoolExecutor(max_workers=workers) as pool:
        future_to_key = {
            pool.submit(fetch_image_data_uri, client, url): key
            for key, (_, url) in pending.items()
        }
        for future in as_completed(future_to_key):
            img, url = pending[future_to_key[future]]
            try:
                img["src"] = future.result()
            except ImageFetchFailed as exc:
                logger.warning("Failed to inline image %s: %s", url, exc.reason)
                document.remove(img)

    logger.info("Processed %d image(s)", len(pending))

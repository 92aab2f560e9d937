"""Link-to-note pipeline.

``process_link`` orchestrates the whole flow from a raw URL to note HTML:

    validate → fetch → parse → extract → mode branch

The mode branch is one of:

``formatted``
    Sanitize the article markup; when images are included, inline them as
    data URIs and sanitize once more to tidy up after removed images.
``plain``
    Paragraphs built from the article's plain text.
``summary``
    LLM summary of the plain text, falling back to ``plain`` on any
    summarizer failure.
"""

from __future__ import annotations

import logging
from typing import Any

from linknote.content.images import inline_images
from linknote.content.plain import format_plain
from linknote.content.sanitizer import sanitize
from linknote.content.summarizer import summarize
from linknote.errors import SummarizationFailed, UnknownMode
from linknote.models import LinkMetadata, LinkRequest, LinkResult, Mode
from linknote.scraper.extractor import extract
from linknote.scraper.fetcher import fetch_page
from linknote.scraper.loader import parse, parse_fragment
from linknote.scraper.models import ExtractedArticle

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


# ---------------------------------------------------------------------------
# Mode handlers
# ---------------------------------------------------------------------------

def render_formatted(article: ExtractedArticle, include_images: bool, base_url: str) -> str:
    html = sanitize(article.content, include_images)
    if not include_images:
        return html

    fragment = parse_fragment(html, base_url)
    inline_images(fragment, base_url)
    return sanitize(fragment.inner_html(), include_images)


def render_plain(article: ExtractedArticle) -> str:
    return format_plain(article.text_content)


def render_summary(article: ExtractedArticle) -> str:
    try:
        summary = summarize(article.text_content)
    except SummarizationFailed as exc:
        logger.warning("Summary unavailable, falling back to plain text: %s", exc)
        return render_plain(article)
    return format_plain(summary)


def render(request: LinkRequest, article: ExtractedArticle, base_url: str) -> str:
    """Produce the note HTML for *article* according to ``request.mode``.

    Raises:
        UnknownMode: If the mode is not one of :class:`Mode`.
    """
    if request.mode == Mode.FORMATTED:
        return render_formatted(article, request.include_images, base_url)
    if request.mode == Mode.PLAIN:
        return render_plain(article)
    if request.mode == Mode.SUMMARY:
        return render_summary(article)
    raise UnknownMode(f"Unknown mode: {request.mode!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def process_link(url: Any, mode: Any = "formatted", include_images: Any = False) -> LinkResult:
    """Turn the web page at *url* into note content.

    Pipeline:
        1. :meth:`~linknote.models.LinkRequest.build` — validate input before
           any network activity.
        2. :func:`~linknote.scraper.fetcher.fetch_page` — HTTP fetch.
        3. :func:`~linknote.scraper.loader.parse` — lenient HTML parse.
        4. :func:`~linknote.scraper.extractor.extract` — readability
           extraction.
        5. :func:`render` — mode-specific HTML.

    Args:
        url: Absolute ``http``/``https`` URL of the page.
        mode: ``"formatted"``, ``"summary"`` or ``"plain"``.
        include_images: Keep and inline images (``formatted`` mode only).

    Returns:
        A :class:`~linknote.models.LinkResult`.

    Raises:
        InvalidRequest: Bad URL or mode.
        NetworkError: The page could not be reached.
        FetchError: The page answered with a non-2xx status.
        ExtractionFailed: No article content was found.
    """
    request = LinkRequest.build(url, mode, include_images)
    logger.info("Processing %s (mode=%s, images=%s)", request.url, request.mode.value,
                request.include_images)

    fetched = fetch_page(request.url)
    document = parse(fetched.content, fetched.base_url)
    article = extract(document)

    html = render(request, article, fetched.base_url)

    return LinkResult(
        title=article.title or UNTITLED,
        html=html,
        metadata=LinkMetadata(
            url=request.url,
            mode=request.mode.value,
            include_images=request.include_images,
            original_title=article.title,
            excerpt=article.excerpt,
            length=article.length,
            site_name=article.site_name,
        ),
    )

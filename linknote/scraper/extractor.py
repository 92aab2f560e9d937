"""Readability extraction: turns a :class:`Document` into an :class:`ExtractedArticle`.

Locating the article is delegated to ``readability-lxml``, a port of the
arc90/Mozilla Readability scoring.  Around it this module:

1. Copies the page body and strips chrome (scripts, navigation, footers,
   elements with navigational ARIA roles) and promotes lazy image sources.
2. Hands the cleaned body to readability and takes its partial HTML.
3. Resolves links and images against the page URL and reads title, excerpt,
   site name and byline from the page's own metadata.

When no paragraph scores, readability falls back to the whole body, so a
short post still yields an article.  Only a page with no text left after the
chrome is stripped fails.
"""

from __future__ import annotations

import copy
import logging
import re

from bs4 import BeautifulSoup, Comment, Tag
from readability import Document as ReadabilityDocument
from readability.readability import Unparseable

from linknote.errors import ExtractionFailed
from linknote.scraper.loader import Document
from linknote.scraper.models import ExtractedArticle

logger = logging.getLogger(__name__)

_STRIP_TAGS = [
    "script", "style", "noscript", "template", "link", "meta", "head", "title",
    "nav", "footer", "aside",
]
_UNLIKELY_ROLES = {
    "menu", "menubar", "complementary", "navigation", "alert", "alertdialog", "dialog",
}

_TEXT_BLOCKS = [
    "address", "article", "blockquote", "dd", "div", "dl", "dt", "figcaption",
    "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li",
    "ol", "p", "pre", "section", "table", "tr", "ul",
]

_LAZY_SRC_ATTRS = ("data-src", "data-original", "data-lazy-src")
_TITLE_SEPARATOR = re.compile(r"\s[|\-–—\\/>»]\s")
_SCRIPT_SCHEMES = ("javascript:", "vbscript:")


def _inner_text(tag: Tag) -> str:
    return " ".join(tag.get_text().split())


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def _meta_content(soup: BeautifulSoup, *keys: str) -> str:
    for key in keys:
        tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
        if tag is not None:
            content = (tag.get("content") or "").strip()
            if content:
                return content
    return ""


def _article_title(document: Document) -> str:
    """og/twitter/dc title, else ``<title>`` minus a site suffix, else the first h1."""
    title = _meta_content(document.soup, "og:title", "twitter:title", "dc:title")
    if title:
        return title

    raw = " ".join(document.title.split())
    if raw:
        separators = list(_TITLE_SEPARATOR.finditer(raw))
        if separators:
            head = raw[: separators[-1].start()].strip()
            if len(head.split()) >= 3:
                return head
        return raw

    h1 = document.soup.find("h1")
    return _inner_text(h1) if h1 else ""


# ---------------------------------------------------------------------------
# Tree preparation
# ---------------------------------------------------------------------------

def _working_body(document: Document) -> BeautifulSoup:
    """Copy the document body into a fresh tree so extraction never mutates it."""
    container = document.soup.body or document.soup.find("html")
    inner = container.decode_contents() if container is not None else document.soup.decode()
    return BeautifulSoup(f"<body>{inner}</body>", "html.parser")


def _prepare(soup: BeautifulSoup) -> None:
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup.find_all(_STRIP_TAGS):
        if not tag.decomposed:
            tag.decompose()
    for tag in soup.find_all(attrs={"role": True}):
        if not tag.decomposed and tag.name != "body" and tag["role"] in _UNLIKELY_ROLES:
            tag.decompose()
    for img in soup.find_all("img"):
        if img.get("src"):
            continue
        for attr in _LAZY_SRC_ATTRS:
            if img.get(attr):
                img["src"] = img[attr]
                break


def _readable_fragment(soup: BeautifulSoup) -> Tag:
    """Run readability over the prepared body and wrap its output in a ``<div>``."""
    try:
        summary = ReadabilityDocument(soup.decode()).summary(html_partial=True)
    except Unparseable as exc:
        raise ExtractionFailed(f"Could not parse article content: {exc}") from exc

    fragment = BeautifulSoup(summary, "html.parser")
    # The body fallback comes back as a whole <body>.
    container = fragment.body or fragment
    article = fragment.new_tag("div")
    for child in list(container.contents):
        article.append(child.extract())
    return article


def _resolve_urls(article: Tag, document: Document) -> None:
    """Make links and images absolute; unparseable ones are dropped."""
    for link in article.find_all("a", href=True):
        href = link["href"].strip()
        if not href or href.lower().startswith(_SCRIPT_SCHEMES):
            link.unwrap()
            continue
        if href.startswith("#"):
            continue
        resolved = document.resolve(href)
        if resolved is None:
            logger.debug("Unwrapping link with unparseable href %r", href)
            link.unwrap()
        else:
            link["href"] = resolved

    for img in article.find_all("img", src=True):
        src = img["src"].strip()
        if not src or src.startswith("data:"):
            continue
        resolved = document.resolve(src)
        if resolved is None:
            logger.debug("Dropping image with unparseable src %r", src)
            img.decompose()
        else:
            img["src"] = resolved


def _text_content(article: Tag) -> str:
    """Article text with a blank line between block-level elements."""
    clone = copy.copy(article)
    for br in clone.find_all("br"):
        br.replace_with("\n")
    for block in clone.find_all(_TEXT_BLOCKS):
        block.insert_before("\n\n")
        block.insert_after("\n\n")
    lines = [" ".join(line.split()) for line in clone.get_text().split("\n")]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract(document: Document) -> ExtractedArticle:
    """Locate the main readable content of *document*.

    The document itself is left untouched; extraction works on a copy.

    Raises:
        ExtractionFailed: If nothing readable is left once navigation, footers
            and other page chrome are removed, or readability cannot parse
            the page.
    """
    soup = _working_body(document)
    _prepare(soup)
    if not soup.get_text().strip():
        raise ExtractionFailed("Could not parse article content")

    article = _readable_fragment(soup)
    _resolve_urls(article, document)

    text = _text_content(article)
    if not text:
        raise ExtractionFailed("Article content is empty")
    logger.debug("Extracted %d chars of article text", len(text))

    excerpt = _meta_content(document.soup, "description", "og:description", "twitter:description")
    if not excerpt:
        first = article.find("p")
        excerpt = _inner_text(first) if first else ""

    site_name = _meta_content(document.soup, "og:site_name", "application-name")
    byline = _meta_content(document.soup, "author", "article:author")

    return ExtractedArticle(
        title=_article_title(document),
        content=article.decode(),
        text_content=text,
        excerpt=excerpt,
        length=len(text),
        site_name=site_name or None,
        byline=byline or None,
    )

"""Sanitize extracted article markup into a Quill-compatible HTML fragment.

``sanitize`` runs an ordered sequence of tree passes.  Later passes rely on the
invariants established by earlier ones:

    strip disallowed → drop images (optional) → whitespace → <br> runs →
    prune empty p/div/span → flatten unsupported → attribute allow-list →
    tables → div/span resolution → prune empty p/h* → settle

The result never contains scripts, forms, tables, ``div``/``span`` wrappers,
attributes outside ``href, src, alt, title, target``, more than two
consecutive ``<br>`` or empty paragraphs/headings.  Running ``sanitize`` on its
own output returns the same string.
"""

from __future__ import annotations

import logging
import re
from typing import List

from bs4 import Tag
from bs4.element import PreformattedString

from linknote.scraper.loader import Document, is_text_node, parse_fragment

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Element / attribute tables
# ---------------------------------------------------------------------------

_DISALLOWED_TAGS = [
    "script", "style", "noscript", "form", "input", "button", "select", "textarea",
]
_AD_MARKERS = ("ad-", "ads", "advertisement")

_MEDIA_TAGS = ["img", "video", "audio", "iframe"]
_UNSUPPORTED_TAGS = [
    "figure", "figcaption", "aside", "nav", "footer", "header", "main", "section", "article",
]
_ALLOWED_ATTRS = frozenset({"href", "src", "alt", "title", "target"})
_SCRIPT_SCHEMES = ("javascript:", "vbscript:")

_HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_BLOCK_TAGS = ["p", *_HEADINGS, "ul", "ol", "blockquote", "pre", "div"]
# A text-only div/span inside one of these becomes part of that text block
# instead of a nested <p>.
_TEXT_CONTAINERS = [
    "p", *_HEADINGS, "li", "pre", "a", "strong", "em", "b", "i", "u", "s",
    "code", "sub", "sup",
]

_WHITESPACE_RUN = re.compile(r"\s{3,}")
# Characters the html.parser builder treats as blank when it collapses
# whitespace-only strings.
_ASCII_SPACES = " \t\n\r\f"
_MAX_CONSECUTIVE_BREAKS = 2


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------

def _has_ad_marker(tag: Tag) -> bool:
    for value in (" ".join(tag.get("class", [])), tag.get("id") or ""):
        if any(marker in value for marker in _AD_MARKERS):
            return True
    return False


def strip_disallowed(document: Document) -> None:
    """Remove scripts, styles, form controls, comments and ad containers."""
    root = document.root
    for node in root.find_all(string=lambda s: isinstance(s, PreformattedString)):
        node.extract()
    for tag in root.find_all(_DISALLOWED_TAGS):
        if not tag.decomposed:
            document.remove(tag)
    for tag in root.find_all(True):
        if not tag.decomposed and _has_ad_marker(tag):
            document.remove(tag)


def remove_images(document: Document) -> None:
    for img in document.root.find_all("img"):
        document.remove(img)


def normalize_whitespace(document: Document) -> None:
    """Collapse runs of 3+ whitespace characters in text nodes.

    The parser already shortens a whitespace-only string to one character, so
    every blank node is treated as a collapsed run and becomes a single space.
    Other nodes keep at most two consecutive whitespace characters; shorter
    runs are left alone.
    """
    for node in document.text_nodes():
        text = str(node)
        if not text:
            document.remove(node)
            continue
        cleaned = _WHITESPACE_RUN.sub("  ", text)
        if not cleaned.strip(_ASCII_SPACES):
            cleaned = " "
        if cleaned != text:
            document.replace(node, cleaned)


def _adjacent_breaks(first: Tag, second: Tag) -> bool:
    """True when only whitespace text or other <br> sit between two sibling breaks."""
    node = first.next_sibling
    while node is not None and node is not second:
        if isinstance(node, Tag):
            if node.name != "br":
                return False
        elif is_text_node(node) and node.strip():
            return False
        node = node.next_sibling
    return node is second


def collapse_line_breaks(document: Document) -> None:
    """Keep at most two consecutive ``<br>`` in every run."""
    doomed: List[Tag] = []
    run = 0
    previous = None
    for br in document.root.find_all("br"):
        if previous is not None and _adjacent_breaks(previous, br):
            run += 1
        else:
            run = 1
        if run > _MAX_CONSECUTIVE_BREAKS:
            doomed.append(br)
        previous = br
    for br in doomed:
        document.remove(br)


def _is_empty(tag: Tag, media: List[str]) -> bool:
    if tag.get_text().strip():
        return False
    if tag.find(media) is not None:
        return False
    return tag.find(True, recursive=False) is None


def prune_empty(document: Document, names: List[str], include_images: bool) -> None:
    """Remove elements in *names* with no text, no media and no child elements.

    Innermost elements are visited first so a parent emptied by the removal
    of its children is pruned in the same pass.
    """
    media = _MEDIA_TAGS + ["br"] if include_images else _MEDIA_TAGS
    for tag in reversed(document.root.find_all(names)):
        if _is_empty(tag, media):
            document.remove(tag)


def flatten_unsupported(document: Document) -> None:
    """Turn semantic sectioning elements the editor ignores into plain divs."""
    for tag in document.root.find_all(_UNSUPPORTED_TAGS):
        tag.name = "div"
        tag.attrs = {}


def allow_list_attributes(document: Document) -> None:
    for tag in document.root.find_all(True):
        kept = {}
        for name, value in tag.attrs.items():
            if name not in _ALLOWED_ATTRS:
                continue
            if name in ("href", "src") and str(value).strip().lower().startswith(_SCRIPT_SCHEMES):
                continue
            kept[name] = value
        tag.attrs = kept


def linearize_tables(document: Document) -> None:
    """Replace each table by one paragraph per non-empty row.

    Cells are joined with ``" | "``; a row made only of header cells is
    wrapped in ``<strong>``.
    """
    for table in document.root.find_all("table"):
        if table.decomposed:
            continue
        rows = [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]
        for row in rows:
            cells = row.find_all(["td", "th"], recursive=False)
            row_text = " | ".join(
                text for text in (cell.get_text().strip() for cell in cells) if text
            )
            if not row_text:
                continue
            paragraph = document.new_tag("p")
            if all(cell.name == "th" for cell in cells):
                strong = document.new_tag("strong")
                strong.string = row_text
                paragraph.append(strong)
            else:
                paragraph.string = row_text
            table.insert_before(paragraph)
        document.remove(table)


def resolve_containers(document: Document) -> None:
    """Remove, unwrap or paragraph-ize every ``div`` and ``span``.

    Visited outermost first: a wrapper holding block content or media is
    unwrapped; a text-only wrapper becomes a ``<p>`` unless it already sits in
    a text block, where it is unwrapped to avoid nested paragraphs.
    """
    for tag in document.root.find_all(["div", "span"]):
        if tag.decomposed:
            continue
        has_text = bool(tag.get_text().strip())
        has_media = tag.find(_MEDIA_TAGS) is not None
        if not has_text and not has_media:
            document.remove(tag)
        elif has_media or tag.find(_BLOCK_TAGS) is not None:
            tag.unwrap()
        elif tag.find_parent(_TEXT_CONTAINERS) is not None:
            tag.unwrap()
        else:
            tag.name = "p"
            tag.attrs = {}


def _settle(document: Document) -> None:
    # Removals and unwraps can leave <br> runs and text nodes side by side.
    collapse_line_breaks(document)
    document.root.smooth()
    normalize_whitespace(document)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize(markup: str, include_images: bool = False) -> str:
    """Return *markup* cleaned into a safe, editor-compatible HTML fragment.

    Args:
        markup: An HTML fragment, typically the extractor's article content.
        include_images: Keep ``<img>`` elements when ``True``; drop them all
            otherwise.

    Returns:
        The sanitized fragment as a string.  Idempotent:
        ``sanitize(sanitize(x, f), f) == sanitize(x, f)``.
    """
    document = parse_fragment(markup)

    strip_disallowed(document)
    if not include_images:
        remove_images(document)
    normalize_whitespace(document)
    collapse_line_breaks(document)
    prune_empty(document, ["p", "div", "span"], include_images)
    flatten_unsupported(document)
    allow_list_attributes(document)
    linearize_tables(document)
    resolve_containers(document)
    prune_empty(document, ["p", *_HEADINGS], include_images)
    _settle(document)

    html = document.inner_html()
    logger.debug("Sanitized %d chars of markup into %d chars", len(markup or ""), len(html))
    return html

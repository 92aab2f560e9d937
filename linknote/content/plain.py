"""Plain-text to paragraph HTML."""

from __future__ import annotations

import html

NO_CONTENT_HTML = "<p>No content available</p>"


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` the way a DOM text node serialises."""
    return html.escape(text, quote=False)


def format_plain(text: str) -> str:
    """Wrap each blank-line separated block of *text* in an escaped ``<p>``."""
    paragraphs = [
        f"<p>{escape_html(block.strip())}</p>"
        for block in (text or "").split("\n\n")
        if block.strip()
    ]
    return "".join(paragraphs) or NO_CONTENT_HTML

"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class FetchedDocument:
    """The raw HTTP response for a single page fetch."""

    url: str
    base_url: str
    content: bytes
    status_code: int
    content_type: str = ""


@dataclass(frozen=True)
class ExtractedArticle:
    """Readable content located by the extractor in a :class:`Document`."""

    title: str
    content: str
    text_content: str
    excerpt: str
    length: int
    site_name: Optional[str] = None
    byline: Optional[str] = None

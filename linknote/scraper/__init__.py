"""Scraper package — page fetch, HTML loading & readability extraction."""

from linknote.scraper.extractor import extract
from linknote.scraper.fetcher import fetch_page
from linknote.scraper.loader import Document, parse, parse_fragment
from linknote.scraper.models import ExtractedArticle, FetchedDocument

__all__ = [
    "fetch_page",
    "parse",
    "parse_fragment",
    "extract",
    "Document",
    "FetchedDocument",
    "ExtractedArticle",
]

"""LinkNote — turn web pages into rich-text note content."""

from linknote.pipeline import process_link

__all__ = ["process_link"]

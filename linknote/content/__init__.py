"""Content package — sanitizing, image inlining, summaries and plain text."""

from linknote.content.images import inline_images
from linknote.content.plain import format_plain
from linknote.content.sanitizer import sanitize
from linknote.content.summarizer import summarize

__all__ = ["sanitize", "inline_images", "summarize", "format_plain"]

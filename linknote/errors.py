"""Exception hierarchy for the link-to-note pipeline.

Terminal errors (``InvalidRequest``, ``NetworkError``, ``FetchError``,
``ExtractionFailed``, ``UnknownMode``) propagate out of
:func:`~linknote.pipeline.process_link`.  ``ImageFetchFailed`` and the
``SummarizationFailed`` family are recovered inside the pipeline and only
ever logged.
"""

from __future__ import annotations


class LinkNoteError(Exception):
    """Base class for every error raised by this package."""


class InvalidRequest(LinkNoteError):
    """The URL is missing/unparseable or the mode is not recognised."""


class NetworkError(LinkNoteError):
    """The page could not be reached (DNS, connection, timeout)."""


class FetchError(LinkNoteError):
    """The page responded with a non-success HTTP status."""

    def __init__(self, status: int, url: str = "") -> None:
        self.status = status
        self.url = url
        super().__init__(f"HTTP error {status} fetching {url or 'page'}")


class ExtractionFailed(LinkNoteError):
    """No article-like content could be located in the page."""


class ImageFetchFailed(LinkNoteError):
    """A single image could not be inlined."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class SummarizationFailed(LinkNoteError):
    """Common base for summarizer failures; callers fall back to plain text."""


class SummarizationUnavailable(SummarizationFailed):
    """No API credential is configured for the summarization endpoint."""


class SummarizationError(SummarizationFailed):
    """The summarization endpoint failed or answered with a non-success status."""

    def __init__(self, status: int | None, detail: str = "") -> None:
        self.status = status
        message = f"Summarization API error: {status}" if status else "Summarization API error"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnknownMode(LinkNoteError):
    """Dispatch reached a mode value it does not handle."""

"""Request and result types for :func:`linknote.pipeline.process_link`."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlparse

from linknote.errors import InvalidRequest


class Mode(str, Enum):
    FORMATTED = "formatted"
    SUMMARY = "summary"
    PLAIN = "plain"


@dataclass(frozen=True)
class LinkRequest:
    url: str
    mode: Mode
    include_images: bool = False

    @classmethod
    def build(cls, url: Any, mode: Any, include_images: Any = False) -> "LinkRequest":
        """Validate raw caller input and return a :class:`LinkRequest`.

        Raises:
            InvalidRequest: If *url* is not an absolute ``http``/``https`` URL
                or *mode* is not one of the :class:`Mode` values.
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidRequest("URL is required")
        url = url.strip()
        try:
            parsed = urlparse(url)
        except ValueError as exc:
            raise InvalidRequest(f"Unparseable URL: {url!r}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidRequest(f"URL must be absolute http(s): {url!r}")

        try:
            parsed_mode = Mode(mode)
        except ValueError as exc:
            allowed = ", ".join(m.value for m in Mode)
            raise InvalidRequest(f"Invalid mode {mode!r}; must be one of: {allowed}") from exc

        return cls(url=url, mode=parsed_mode, include_images=bool(include_images))


@dataclass
class LinkMetadata:
    url: str
    mode: str
    include_images: bool
    original_title: str
    excerpt: str
    length: int
    site_name: Optional[str] = None


@dataclass
class LinkResult:
    """The sole return value of ``process_link``; owned by the caller."""

    title: str
    html: str
    metadata: LinkMetadata

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

"""HTML document loader.

Wraps a BeautifulSoup tree built with the lenient ``html.parser`` builder.
Real-world pages are rarely well-formed; the builder recovers whatever tree it
can instead of failing, so :func:`parse` never raises on bad markup.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

_PARSER = "html.parser"


def is_text_node(node: PageElement) -> bool:
    """Return ``True`` for plain text nodes (not comments, doctypes, CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class Document:
    """A mutable, navigable HTML tree plus the URL it was loaded from."""

    def __init__(self, soup: BeautifulSoup, base_url: str = "") -> None:
        self.soup = soup
        self.base_url = base_url

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    @property
    def root(self) -> Union[BeautifulSoup, Tag]:
        """The ``<body>`` element when present, otherwise the whole tree."""
        return self.soup.body or self.soup

    @property
    def title(self) -> str:
        tag = self.soup.find("title")
        return tag.get_text().strip() if tag else ""

    def find_all(self, name, **kwargs) -> List[Tag]:
        return self.soup.find_all(name, **kwargs)

    def text_nodes(self) -> Iterator[NavigableString]:
        """Yield every text node under :attr:`root`, in document order.

        The nodes are collected up front so callers may replace them while
        iterating.
        """
        for node in list(self.root.descendants):
            if is_text_node(node):
                yield node

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def remove(self, node: PageElement) -> None:
        if isinstance(node, Tag):
            node.decompose()
        else:
            node.extract()

    def replace(self, node: PageElement, new: Union[PageElement, str]) -> None:
        node.replace_with(new)

    def new_tag(self, name: str, **attrs) -> Tag:
        return self.soup.new_tag(name, attrs=attrs)

    # ------------------------------------------------------------------
    # URLs / serialisation
    # ------------------------------------------------------------------

    def resolve(self, url: str) -> Optional[str]:
        """Resolve *url* against :attr:`base_url` (absolute URLs pass through).

        Returns ``None`` for a URL that cannot be parsed, e.g. a broken IPv6
        host such as ``http://[::1/a.png``.
        """
        if not self.base_url:
            return url
        try:
            return urljoin(self.base_url, url)
        except ValueError:
            return None

    def inner_html(self) -> str:
        root = self.root
        if isinstance(root, BeautifulSoup):
            return root.decode()
        return root.decode_contents()


def parse(html: Union[str, bytes], base_url: str = "") -> Document:
    """Parse a full page (text or raw bytes) into a :class:`Document`.

    Byte input has its encoding sniffed from the BOM, ``<meta charset>`` or
    content heuristics.
    """
    return Document(BeautifulSoup(html or "", _PARSER), base_url)


def parse_fragment(markup: str, base_url: Optional[str] = None) -> Document:
    """Parse an HTML body fragment (no ``<html>``/``<body>`` required)."""
    return Document(BeautifulSoup(markup or "", _PARSER), base_url or "")

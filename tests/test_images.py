"""Tests for the image inliner.

``respx`` mocks every image URL; no real network access happens.  The
thread-pool fetches go through the same patched ``httpx`` transport.
"""

from __future__ import annotations

import base64

import httpx
import respx

from linknote.content.images import absolute_image_url, inline_images
from linknote.scraper.loader import parse_fragment

_BASE_URL = "https://example.com/post/1"
_PNG = b"\x89PNG\r\n\x1a\nfake"


def _png_response() -> httpx.Response:
    return httpx.Response(200, content=_PNG, headers={"content-type": "image/png"})


def _srcs(document) -> list[str]:
    return [img.get("src") for img in document.find_all("img")]


# ---------------------------------------------------------------------------
# URL resolution
# ---------------------------------------------------------------------------

class TestAbsoluteImageUrl:
    def test_absolute_passes_through(self) -> None:
        assert absolute_image_url("http://cdn.example.com/a.png", _BASE_URL) == "http://cdn.example.com/a.png"

    def test_protocol_relative_gets_https(self) -> None:
        assert absolute_image_url("//cdn.example.com/a.png", _BASE_URL) == "https://cdn.example.com/a.png"

    def test_root_relative(self) -> None:
        assert absolute_image_url("/img/a.png", _BASE_URL) == "https://example.com/img/a.png"

    def test_path_relative(self) -> None:
        assert absolute_image_url("a.png", _BASE_URL) == "https://example.com/post/a.png"


# ---------------------------------------------------------------------------
# inline_images
# ---------------------------------------------------------------------------

class TestInlineImages:
    def test_image_becomes_data_uri(self) -> None:
        document = parse_fragment('<p><img src="/img/a.png" alt="a"></p>')
        with respx.mock:
            respx.get("https://example.com/img/a.png").mock(return_value=_png_response())
            inline_images(document, _BASE_URL)

        expected = "data:image/png;base64," + base64.b64encode(_PNG).decode("ascii")
        assert _srcs(document) == [expected]
        assert document.find_all("img")[0]["alt"] == "a"

    def test_content_type_parameters_dropped(self) -> None:
        document = parse_fragment('<img src="https://example.com/b.jpg">')
        with respx.mock:
            respx.get("https://example.com/b.jpg").mock(
                return_value=httpx.Response(
                    200, content=b"jpg", headers={"content-type": "image/jpeg; charset=binary"}
                )
            )
            inline_images(document, _BASE_URL)

        assert _srcs(document)[0].startswith("data:image/jpeg;base64,")

    def test_protocol_relative_fetched_over_https(self) -> None:
        document = parse_fragment('<img src="//cdn.example.com/c.png">')
        with respx.mock:
            route = respx.get("https://cdn.example.com/c.png").mock(return_value=_png_response())
            inline_images(document, _BASE_URL)

        assert route.called
        assert _srcs(document)[0].startswith("data:image/png;base64,")

    def test_404_image_removed(self) -> None:
        document = parse_fragment('<p>Text<img src="/missing.png"></p>')
        with respx.mock:
            respx.get("https://example.com/missing.png").mock(return_value=httpx.Response(404))
            inline_images(document, _BASE_URL)

        assert document.find_all("img") == []
        assert document.inner_html() == "<p>Text</p>"

    def test_non_image_content_type_removed(self) -> None:
        document = parse_fragment('<img src="/page.html">')
        with respx.mock:
            respx.get("https://example.com/page.html").mock(
                return_value=httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})
            )
            inline_images(document, _BASE_URL)

        assert document.find_all("img") == []

    def test_network_failure_removed(self) -> None:
        document = parse_fragment('<img src="https://down.example.com/x.png">')
        with respx.mock:
            respx.get("https://down.example.com/x.png").mock(side_effect=httpx.ConnectError("refused"))
            inline_images(document, _BASE_URL)

        assert document.find_all("img") == []

    def test_one_broken_image_does_not_affect_others(self) -> None:
        document = parse_fragment(
            '<img src="/ok1.png"><img src="/broken.png"><img src="/ok2.png">'
        )
        with respx.mock:
            respx.get("https://example.com/ok1.png").mock(return_value=_png_response())
            respx.get("https://example.com/ok2.png").mock(return_value=_png_response())
            respx.get("https://example.com/broken.png").mock(return_value=httpx.Response(500))
            inline_images(document, _BASE_URL)

        srcs = _srcs(document)
        assert len(srcs) == 2
        assert all(src.startswith("data:image/png;base64,") for src in srcs)

    def test_missing_src_removed(self) -> None:
        document = parse_fragment('<p>x<img alt="nothing"></p>')
        with respx.mock:
            inline_images(document, _BASE_URL)

        assert document.find_all("img") == []

    def test_data_uri_left_alone(self) -> None:
        document = parse_fragment('<img src="data:image/gif;base64,R0lGOD">')
        with respx.mock:
            inline_images(document, _BASE_URL)

        assert _srcs(document) == ["data:image/gif;base64,R0lGOD"]

    def test_byte_cap_removes_large_image(self, monkeypatch) -> None:
        monkeypatch.setattr("linknote.content.images.settings.image_max_bytes", 4)
        document = parse_fragment('<img src="/big.png">')
        with respx.mock:
            respx.get("https://example.com/big.png").mock(return_value=_png_response())
            inline_images(document, _BASE_URL)

        assert document.find_all("img") == []

    def test_concurrency_limit_of_one(self, monkeypatch) -> None:
        monkeypatch.setattr("linknote.content.images.settings.image_fetch_concurrency", 1)
        document = parse_fragment('<img src="/a.png"><img src="/b.png">')
        with respx.mock:
            respx.get("https://example.com/a.png").mock(return_value=_png_response())
            respx.get("https://example.com/b.png").mock(return_value=_png_response())
            inline_images(document, _BASE_URL)

        assert len(_srcs(document)) == 2

    def test_unparseable_src_removed(self) -> None:
        document = parse_fragment('<p>Text<img src="http://[::1/a.png"><img src="/ok.png"></p>')
        with respx.mock(assert_all_mocked=False) as router:
            router.get("https://example.com/ok.png").mock(return_value=_png_response())
            inline_images(document, _BASE_URL)

        srcs = _srcs(document)
        assert len(srcs) == 1
        assert srcs[0].startswith("data:image/png;base64,")

    def test_relative_src_against_broken_base_removed(self) -> None:
        document = parse_fragment('<img src="a.png">')
        with respx.mock:
            inline_images(document, "http://[::1/post")

        assert document.find_all("img") == []

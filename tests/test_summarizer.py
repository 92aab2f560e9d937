"""Tests for the chat-completions summarizer.

The endpoint is mocked with ``respx``; the API key is injected through
``monkeypatch`` on the module-level settings singleton.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from linknote.content.summarizer import SUMMARY_NOT_AVAILABLE, summarize
from linknote.errors import SummarizationError, SummarizationFailed, SummarizationUnavailable

_ENDPOINT = "https://llm.example.com/v1/chat/completions"


@pytest.fixture()
def configured(monkeypatch):
    monkeypatch.setattr("linknote.content.summarizer.settings.openai_api_key", "sk-test")
    monkeypatch.setattr("linknote.content.summarizer.settings.summary_endpoint", _ENDPOINT)
    monkeypatch.setattr("linknote.content.summarizer.settings.summary_model", "gpt-4")
    monkeypatch.setattr("linknote.content.summarizer.settings.summary_prompt", "Summarize this:")
    monkeypatch.setattr("linknote.content.summarizer.settings.summary_max_tokens", 500)
    monkeypatch.setattr("linknote.content.summarizer.settings.summary_temperature", 0.7)


def _completion(content) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestUnconfigured:
    def test_missing_key_raises_unavailable(self, monkeypatch) -> None:
        monkeypatch.setattr("linknote.content.summarizer.settings.openai_api_key", "")
        with respx.mock:
            route = respx.post(_ENDPOINT)
            with pytest.raises(SummarizationUnavailable):
                summarize("Some text")

        assert not route.called

    def test_unavailable_is_a_summarization_failure(self) -> None:
        assert issubclass(SummarizationUnavailable, SummarizationFailed)
        assert issubclass(SummarizationError, SummarizationFailed)


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class TestSummarize:
    def test_returns_completion_text(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=_completion("  A short summary.\n"))
            assert summarize("Long article text") == "A short summary."

    def test_request_payload_and_auth(self, configured) -> None:
        with respx.mock:
            route = respx.post(_ENDPOINT).mock(return_value=_completion("ok"))
            summarize("Long article text")

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        assert payload["model"] == "gpt-4"
        assert payload["max_tokens"] == 500
        assert payload["temperature"] == 0.7
        assert payload["messages"] == [
            {"role": "user", "content": "Summarize this:\n\nLong article text"}
        ]

    def test_empty_content_yields_placeholder(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=_completion(""))
            assert summarize("text") == SUMMARY_NOT_AVAILABLE

    def test_missing_choices_yields_placeholder(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(200, json={"choices": []}))
            assert summarize("text") == SUMMARY_NOT_AVAILABLE

    def test_http_error_carries_status(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(429, json={"error": "rate"}))
            with pytest.raises(SummarizationError) as excinfo:
                summarize("text")

        assert excinfo.value.status == 429
        assert "429" in str(excinfo.value)

    def test_transport_error(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(SummarizationError) as excinfo:
                summarize("text")

        assert excinfo.value.status is None

    def test_invalid_json(self, configured) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(200, text="not json"))
            with pytest.raises(SummarizationError) as excinfo:
                summarize("text")

        assert excinfo.value.status is None
        assert "JSON" in str(excinfo.value)

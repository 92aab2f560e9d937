"""Article summarizer backed by an OpenAI-compatible chat-completions endpoint.

Configure via ``OPENAI_API_KEY``, ``SUMMARY_ENDPOINT``, ``SUMMARY_MODEL``,
``SUMMARY_PROMPT``, ``SUMMARY_MAX_TOKENS`` and ``SUMMARY_TEMPERATURE``.

Summaries are best-effort: callers are expected to catch
:class:`~linknote.errors.SummarizationFailed` and fall back to plain text.
"""

from __future__ import annotations

import httpx

from linknote.config import settings
from linknote.errors import SummarizationError, SummarizationUnavailable

SUMMARY_NOT_AVAILABLE = "Summary not available"


def _build_payload(text: str) -> dict:
    return {
        "model": settings.summary_model,
        "messages": [
            {"role": "user", "content": f"{settings.summary_prompt}\n\n{text}"},
        ],
        "max_tokens": settings.summary_max_tokens,
        "temperature": settings.summary_temperature,
    }


def summarize(text: str) -> str:
    """Return a prose summary of *text*.

    Args:
        text: The article's extracted plain text.

    Returns:
        The completion text, or ``"Summary not available"`` when the endpoint
        answers without any content.

    Raises:
        SummarizationUnavailable: If no API key is configured.
        SummarizationError: On a non-2xx response, a transport failure or an
            unreadable response body.
    """
    api_key = settings.openai_api_key
    if not api_key:
        raise SummarizationUnavailable(
            "OPENAI_API_KEY is not set; summaries are unavailable."
        )

    try:
        with httpx.Client(timeout=settings.summary_timeout) as client:
            response = client.post(
                settings.summary_endpoint,
                headers={"Authorization": f"Bearer {api_key}"},
                json=_build_payload(text),
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as exc:
        raise SummarizationError(exc.response.status_code) from exc
    except httpx.HTTPError as exc:
        raise SummarizationError(None, str(exc) or type(exc).__name__) from exc
    except ValueError as exc:
        raise SummarizationError(None, "response is not valid JSON") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    return (content or "").strip() or SUMMARY_NOT_AVAILABLE

"""Centralised settings for the LinkNote backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_DEFAULT_SUMMARY_PROMPT = (
    "Summarize the following article in a few short paragraphs. "
    "Keep the key facts and leave out navigation text or advertising."
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Page fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _BROWSER_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Image inliner
    # ------------------------------------------------------------------
    image_fetch_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("IMAGE_FETCH_CONCURRENCY", "4"))
    )
    image_fetch_timeout: float = field(
        default_factory=lambda: float(
            os.environ.get("IMAGE_FETCH_TIMEOUT")
            or os.environ.get("REQUEST_TIMEOUT", "30.0")
        )
    )
    # 0 disables the cap.
    image_max_bytes: int = field(
        default_factory=lambda: int(os.environ.get("IMAGE_MAX_BYTES", "0"))
    )

    # ------------------------------------------------------------------
    # Summarizer (OpenAI-compatible chat completions)
    # ------------------------------------------------------------------
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    summary_endpoint: str = field(
        default_factory=lambda: os.environ.get(
            "SUMMARY_ENDPOINT", "https://api.openai.com/v1/chat/completions"
        )
    )
    summary_model: str = field(
        default_factory=lambda: os.environ.get("SUMMARY_MODEL", "gpt-4")
    )
    summary_prompt: str = field(
        default_factory=lambda: os.environ.get("SUMMARY_PROMPT", _DEFAULT_SUMMARY_PROMPT)
    )
    summary_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("SUMMARY_MAX_TOKENS", "500"))
    )
    summary_temperature: float = field(
        default_factory=lambda: float(os.environ.get("SUMMARY_TEMPERATURE", "0.7"))
    )
    summary_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SUMMARY_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton — import this everywhere:
#   from linknote.config import settings
settings = Settings()

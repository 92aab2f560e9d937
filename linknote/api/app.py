"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /notes     — note content built from web links

Authentication and note storage live in the surrounding service; this app
only exposes the link-to-note pipeline.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linknote.api.routers import notes as notes_router
from linknote.config import settings


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="LinkNote API",
        description=(
            "Turns arbitrary web pages into note content: readability "
            "extraction, editor-safe HTML sanitizing, optional inline images "
            "and LLM summaries."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(notes_router.router, prefix="/notes", tags=["notes"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn linknote.api.app:app --reload
app = create_app()

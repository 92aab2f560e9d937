"""Note-from-link endpoint.

Routes
------
POST /notes/from-link   Body: {"url": "https://...", "mode": "formatted", "include_images": false}
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from linknote.errors import (
    ExtractionFailed,
    FetchError,
    InvalidRequest,
    LinkNoteError,
    NetworkError,
)
from linknote.pipeline import process_link

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class FromLinkRequest(BaseModel):
    url: str
    mode: Literal["formatted", "summary", "plain"] = "formatted"
    include_images: bool = False


class LinkMetadataOut(BaseModel):
    url: str
    mode: str
    include_images: bool
    original_title: str
    excerpt: str
    length: int
    site_name: Optional[str] = None


class FromLinkResponse(BaseModel):
    success: bool
    title: str
    html: str
    metadata: LinkMetadataOut


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/from-link", response_model=FromLinkResponse)
def note_from_link(body: FromLinkRequest) -> dict[str, Any]:
    """Fetch a web page and return note-ready HTML for the requested mode."""
    try:
        result = process_link(body.url, body.mode, body.include_images)
    except InvalidRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (FetchError, NetworkError) as exc:
        raise HTTPException(status_code=502, detail=f"Fetching the page failed: {exc}") from exc
    except ExtractionFailed as exc:
        raise HTTPException(status_code=422, detail=f"No readable content: {exc}") from exc
    except LinkNoteError as exc:
        raise HTTPException(status_code=500, detail=f"Processing failed: {exc}") from exc

    return {"success": True, **result.to_dict()}

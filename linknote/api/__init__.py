"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from linknote.api import app

    uvicorn linknote.api:app --reload
"""

from linknote.api.app import app

__all__ = ["app"]

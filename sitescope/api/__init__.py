"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sitescope.api import app

    uvicorn sitescope.api:app --reload
"""

from sitescope.api.app import app

__all__ = ["app"]

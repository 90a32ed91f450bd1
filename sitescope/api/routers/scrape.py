"""Scrape endpoint.

Routes
------
POST /scrape    Body: {"url": "example.com"}    → run the pipeline once
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from sitescope.api.deps import get_current_user, get_db
from sitescope.errors import RequestCancelled
from sitescope.pipeline import persist_scrape, prepare_scrape

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    # Plain string: scheme normalisation and validation happen in the pipeline.
    url: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
async def scrape_endpoint(
    body: ScrapeRequest,
    request: Request,
    user_id: str = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Fetch, extract and summarise ``body.url``, then save it for the caller.

    The blocking stages run in the worker pool.  If the client disconnects
    before they finish, nothing is written.
    """
    prepared = await run_in_threadpool(prepare_scrape, body.url)
    if await request.is_disconnected():
        raise RequestCancelled()
    record = await run_in_threadpool(persist_scrape, conn, user_id, prepared)
    return {"success": True, "data": record.to_public()}

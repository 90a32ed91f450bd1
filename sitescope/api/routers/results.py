"""Saved-result endpoints, scoped to the authenticated caller.

Routes
------
GET    /results          → newest first
GET    /results/{id}     → one result
DELETE /results/{id}     → delete one result
DELETE /results          → delete all of the caller's results
"""

from __future__ import annotations

import sqlite3
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sitescope.api.deps import get_current_user, get_db
from sitescope.db.results import (
    delete_all_results,
    delete_result,
    get_result,
    list_results,
)

router = APIRouter()


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "error": "Result not found"})


@router.get("")
def list_results_endpoint(
    limit: int = Query(50, ge=1, le=200),
    user_id: str = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Return the caller's saved results, newest first."""
    records = list_results(conn, user_id, limit=limit)
    return {"success": True, "data": [r.to_public() for r in records]}


@router.get("/{result_id}", response_model=None)
def get_result_endpoint(
    result_id: str,
    user_id: str = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any] | JSONResponse:
    record = get_result(conn, user_id, result_id)
    if record is None:
        return _not_found()
    return {"success": True, "data": record.to_public()}


@router.delete("/{result_id}", response_model=None)
def delete_result_endpoint(
    result_id: str,
    user_id: str = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any] | JSONResponse:
    if not delete_result(conn, user_id, result_id):
        return _not_found()
    return {"success": True, "data": {"id": result_id}}


@router.delete("")
def clear_results_endpoint(
    user_id: str = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Delete every saved result belonging to the caller."""
    deleted = delete_all_results(conn, user_id)
    return {"success": True, "data": {"deleted": deleted}}

"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

import sqlite3
from typing import Optional

from fastapi import Header, Request

from sitescope.auth import verify_token


def get_db(request: Request) -> sqlite3.Connection:
    return request.app.state.db


def get_current_user(authorization: Optional[str] = Header(default=None)) -> str:
    """Resolve the bearer token to a user id (raises ``AuthError``)."""
    return verify_token(authorization)

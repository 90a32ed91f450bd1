"""Shared fixtures.

Every test runs with summaries disabled, no API tokens, and the workspace
pointed at a temporary directory, regardless of the developer's ``.env``.
Tests that need a summary model or tokens patch ``settings`` themselves.
"""

from __future__ import annotations

import sqlite3
from typing import Generator

import pytest

from sitescope.config import settings
from sitescope.db.connection import get_connection
from sitescope.db.migrations import init_db


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "workspace_dir", tmp_path)
    monkeypatch.setattr(settings, "summary_provider", "none")
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "api_tokens", {})


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory connection with the schema initialised."""
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()

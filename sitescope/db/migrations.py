"""Schema setup for the scraped-results store.

``init_db`` loads ``schema.sql`` (the ``scraped_results`` table and its
owner/recency indexes) and then brings the file up to the newest entry in
:data:`MIGRATIONS`.  Applied versions are recorded in ``schema_version``.
"""

from __future__ import annotations

import sqlite3

from sitescope.config import settings

# Ordered ``(version, statement)`` pairs; append new column or index changes
# for ``scraped_results`` here rather than editing ``schema.sql`` in place.
MIGRATIONS: list[tuple[int, str]] = []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def init_db(conn: sqlite3.Connection) -> None:
    """Prepare *conn* to hold scraped results.

    Re-running on a database that already has the table is a no-op apart
    from applying any migrations added since the last run.
    """
    conn.executescript(settings.schema_path.read_text(encoding="utf-8"))
    _ensure_version_table(conn)
    migrate(conn)


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version  INTEGER PRIMARY KEY,
                applied_at INTEGER DEFAULT (CAST(strftime('%s', 'now') AS INTEGER))
            )
            """
        )


def current_version(conn: sqlite3.Connection) -> int:
    """Newest recorded migration version, or 0 for a fresh store."""
    row = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return row[0] if row else 0


def migrate(conn: sqlite3.Connection, migrations: list[tuple[int, str]] | None = None) -> None:
    """Apply each entry of *migrations* (default :data:`MIGRATIONS`) newer than
    :func:`current_version`, one transaction per version.
    """
    applied = current_version(conn)
    for version, sql in sorted(migrations if migrations is not None else MIGRATIONS):
        if version <= applied:
            continue
        with conn:
            conn.execute(sql)
            conn.execute("INSERT INTO schema_version(version) VALUES (?)", (version,))

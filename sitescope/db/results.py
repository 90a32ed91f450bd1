"""Owner-scoped CRUD for the ``scraped_results`` table.

Every query filters on ``user_id``; a record owned by another user is
indistinguishable from a missing one.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from time import time
from typing import Optional

from sitescope.db.models import ScrapedRecord
from sitescope.errors import PersistenceError
from sitescope.scraper.models import EnrichmentResult, ScrapedDocument

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_record(row: sqlite3.Row) -> ScrapedRecord:
    return ScrapedRecord(
        id=row["id"],
        user_id=row["user_id"],
        url=row["url"],
        title=row["title"] or "",
        content=row["content"] or "",
        headings=json.loads(row["headings"] or "[]"),
        links=json.loads(row["links"] or "[]"),
        analysis_status=row["analysis_status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        ai_summary=row["ai_summary"],
        markdown_content=row["markdown_content"],
        ai_insights=json.loads(row["ai_insights"] or "{}"),
        keywords=json.loads(row["keywords"] or "[]"),
        sentiment=row["sentiment"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def insert_result(
    conn: sqlite3.Connection,
    user_id: str,
    document: ScrapedDocument,
    enrichment: EnrichmentResult,
) -> ScrapedRecord:
    """Write one scraped page for *user_id* and return the stored record.

    ``id``, ``created_at`` and ``updated_at`` are assigned here.

    Raises:
        PersistenceError: If SQLite rejects the insert.
    """
    rid = str(uuid.uuid4())
    now = int(time())

    try:
        with conn:
            conn.execute(
                """
                INSERT INTO scraped_results (
                    id, user_id, url, title, content, markdown_content,
                    ai_summary, ai_insights, keywords, sentiment, analysis_status,
                    headings, links, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    rid,
                    user_id,
                    document.source_url,
                    document.title,
                    document.content,
                    document.markdown_content,
                    enrichment.summary,
                    json.dumps(enrichment.insights),
                    json.dumps(enrichment.keywords),
                    enrichment.sentiment,
                    enrichment.status,
                    json.dumps(document.headings),
                    json.dumps([link.to_dict() for link in document.links]),
                    now,
                    now,
                ),
            )
    except sqlite3.Error as exc:
        logger.exception("stage=persist url=%s insert failed", document.source_url)
        raise PersistenceError() from exc

    record = get_result(conn, user_id, rid)
    if record is None:
        raise PersistenceError()
    return record


def get_result(
    conn: sqlite3.Connection, user_id: str, result_id: str
) -> Optional[ScrapedRecord]:
    """Fetch one of *user_id*'s records.  Returns ``None`` if not found."""
    row = conn.execute(
        "SELECT * FROM scraped_results WHERE id = ? AND user_id = ?",
        (result_id, user_id),
    ).fetchone()
    return _row_to_record(row) if row else None


def list_results(
    conn: sqlite3.Connection, user_id: str, limit: int = 50
) -> list[ScrapedRecord]:
    """Return *user_id*'s records, newest first."""
    rows = conn.execute(
        """
        SELECT * FROM scraped_results
        WHERE user_id = ?
        ORDER BY created_at DESC, rowid DESC
        LIMIT ?
        """,
        (user_id, limit),
    ).fetchall()
    return [_row_to_record(r) for r in rows]


def delete_result(conn: sqlite3.Connection, user_id: str, result_id: str) -> bool:
    """Delete one record.  Returns ``False`` if nothing matched."""
    with conn:
        cur = conn.execute(
            "DELETE FROM scraped_results WHERE id = ? AND user_id = ?",
            (result_id, user_id),
        )
    return cur.rowcount > 0


def delete_all_results(conn: sqlite3.Connection, user_id: str) -> int:
    """Delete every record owned by *user_id*; return how many were removed."""
    with conn:
        cur = conn.execute(
            "DELETE FROM scraped_results WHERE user_id = ?", (user_id,)
        )
    return cur.rowcount

"""Tests for the sitescope CLI.

The workspace is redirected to ``tmp_path`` by ``conftest.py``, so every
command opens a fresh on-disk database.  The pipeline entry point is patched
where a test is about CLI behaviour rather than scraping.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import respx
from typer.testing import CliRunner

from cli.main import app
from sitescope.config import settings
from sitescope.db import get_connection, init_db
from sitescope.db.results import insert_result, list_results
from sitescope.errors import FetchError
from sitescope.scraper.models import EnrichmentResult, ScrapedDocument

runner = CliRunner()

_PAGE = "<html><title>CLI Page</title><h1>Intro</h1><a href='/next'>Next</a><p>Body words.</p></html>"


def _seed(user: str = "alice", title: str = "Seeded") -> str:
    conn = get_connection()
    init_db(conn)
    record = insert_result(
        conn,
        user,
        ScrapedDocument(source_url="https://site.test/", title=title, content="x"),
        EnrichmentResult(),
    )
    conn.close()
    return record.id


class TestDbInit:
    def test_creates_database(self) -> None:
        result = runner.invoke(app, ["db", "init"])
        assert result.exit_code == 0
        assert settings.db_path.exists()


class TestScrapeCommand:
    def test_scrape_saves_result(self) -> None:
        with patch("sitescope.scraper.extractor.trafilatura.extract", return_value=None):
            with respx.mock:
                respx.get("https://site.test/page").mock(
                    return_value=httpx.Response(200, text=_PAGE)
                )
                result = runner.invoke(app, ["scrape", "site.test/page", "--user", "alice"])

        assert result.exit_code == 0, result.output
        assert "CLI Page" in result.output
        assert "Status   : pending" in result.output

        conn = get_connection()
        try:
            records = list_results(conn, "alice")
        finally:
            conn.close()
        assert [r.url for r in records] == ["https://site.test/page"]

    def test_scrape_json_output(self) -> None:
        with patch("sitescope.scraper.extractor.trafilatura.extract", return_value=None):
            with respx.mock:
                respx.get("https://site.test/page").mock(
                    return_value=httpx.Response(200, text=_PAGE)
                )
                result = runner.invoke(
                    app, ["scrape", "https://site.test/page", "--user", "alice", "--json"]
                )

        data = json.loads(result.stdout)
        assert data["headings"] == ["Intro"]
        assert data["links"] == [{"text": "Next", "url": "https://site.test/next"}]

    def test_scrape_error_exits_nonzero(self) -> None:
        with patch(
            "sitescope.pipeline.fetch_url", side_effect=FetchError("Failed to fetch webpage: 404", status=404)
        ):
            result = runner.invoke(app, ["scrape", "https://site.test/gone", "--user", "alice"])

        assert result.exit_code == 1
        assert "Failed to fetch webpage: 404" in result.output


class TestExtractCommand:
    def test_prints_structure_without_saving(self) -> None:
        with respx.mock:
            respx.get("https://site.test/page").mock(return_value=httpx.Response(200, text=_PAGE))
            result = runner.invoke(app, ["extract", "https://site.test/page"])

        assert result.exit_code == 0, result.output
        assert "# Intro" in result.output
        assert "Next <https://site.test/next>" in result.output
        assert not settings.db_path.exists()

    def test_invalid_url(self) -> None:
        result = runner.invoke(app, ["extract", "https://"])
        assert result.exit_code == 1
        assert "Invalid URL format" in result.output


class TestResultsCommands:
    def test_list_empty(self) -> None:
        result = runner.invoke(app, ["results", "list", "--user", "alice"])
        assert result.exit_code == 0
        assert "No saved results." in result.output

    def test_list_and_show(self) -> None:
        rid = _seed()
        listed = runner.invoke(app, ["results", "list", "--user", "alice"])
        assert rid in listed.output

        shown = runner.invoke(app, ["results", "show", rid, "--user", "alice"])
        assert shown.exit_code == 0
        assert json.loads(shown.stdout)["title"] == "Seeded"

    def test_show_other_users_fails(self) -> None:
        rid = _seed(user="alice")
        result = runner.invoke(app, ["results", "show", rid, "--user", "bob"])
        assert result.exit_code == 1

    def test_delete(self) -> None:
        rid = _seed()
        result = runner.invoke(app, ["results", "delete", rid, "--user", "alice"])
        assert result.exit_code == 0
        again = runner.invoke(app, ["results", "delete", rid, "--user", "alice"])
        assert again.exit_code == 1

    def test_clear_with_yes(self) -> None:
        _seed()
        _seed()
        result = runner.invoke(app, ["results", "clear", "--user", "alice", "--yes"])
        assert result.exit_code == 0
        assert "Deleted 2 result(s)." in result.output

    def test_clear_aborts_without_confirmation(self) -> None:
        _seed()
        result = runner.invoke(app, ["results", "clear", "--user", "alice"], input="n\n")
        assert result.exit_code != 0
        conn = get_connection()
        try:
            assert len(list_results(conn, "alice")) == 1
        finally:
            conn.close()

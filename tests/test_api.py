"""Tests for the /scrape and /results API endpoints.

All tests use an in-memory SQLite database via the FastAPI TestClient.
HTTP fetches are mocked with ``respx``; no summary model is configured
unless a test patches one in.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from sitescope.api.app import create_app
from sitescope.config import settings
from sitescope.db.connection import get_connection
from sitescope.db.migrations import init_db

_PAGE = '<html><head><title>Site Test</title></head><body><h1>A</h1><a href="/x">Go</a></body></html>'
_AUTH = {"Authorization": "Bearer tok-alice"}
_AUTH_BOB = {"Authorization": "Bearer tok-bob"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client(monkeypatch):
    """Return a TestClient backed by an isolated in-memory DB."""
    monkeypatch.setattr(settings, "api_tokens", {"tok-alice": "alice", "tok-bob": "bob"})
    conn = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(conn)
    app = create_app()

    with patch("sitescope.scraper.extractor.trafilatura.extract", return_value=None):
        with TestClient(app, raise_server_exceptions=True) as c:
            # Lifespan has run by this point; override its db with our in-memory one.
            c.app.state.db = conn
            yield c

    conn.close()


def _scrape(client, url: str = "https://site.test/page", headers=_AUTH):
    return client.post("/scrape", json={"url": url}, headers=headers)


# ---------------------------------------------------------------------------
# POST /scrape
# ---------------------------------------------------------------------------

class TestScrape:
    def test_success_shape(self, client) -> None:
        with respx.mock:
            respx.get("https://site.test/page").mock(return_value=httpx.Response(200, text=_PAGE))
            resp = _scrape(client)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["url"] == "https://site.test/page"
        assert data["title"] == "Site Test"
        assert data["headings"] == ["A"]
        assert data["links"] == [{"text": "Go", "url": "https://site.test/x"}]
        assert data["analysisStatus"] == "pending"
        assert "aiSummary" not in data
        assert {"id", "content", "timestamp"} <= set(data)

    def test_summary_included_when_model_configured(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "summary_provider", "ollama")
        mock_llm = MagicMock()
        mock_llm.invoke.return_value = SimpleNamespace(content="About A.")
        with respx.mock:
            respx.get("https://site.test/page").mock(
                return_value=httpx.Response(200, text=_PAGE + "<p>Some body text.</p>")
            )
            with patch("sitescope.enrichment.summarizer._get_llm", return_value=mock_llm):
                resp = _scrape(client)

        data = resp.json()["data"]
        assert data["analysisStatus"] == "completed"
        assert data["aiSummary"] == "About A."

    def test_enrichment_error_still_succeeds(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "summary_provider", "ollama")
        with respx.mock:
            respx.get("https://site.test/page").mock(
                return_value=httpx.Response(200, text=_PAGE + "<p>Some body text.</p>")
            )
            with patch(
                "sitescope.enrichment.summarizer._get_llm", side_effect=RuntimeError("down")
            ):
                resp = _scrape(client)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["analysisStatus"] == "failed"
        assert "aiSummary" not in body["data"]

    def test_bare_host_normalised(self, client) -> None:
        with respx.mock:
            respx.get("https://example.com/").mock(return_value=httpx.Response(200, text=_PAGE))
            resp = _scrape(client, url="example.com")

        assert resp.json()["data"]["url"] == "https://example.com"

    def test_missing_auth_is_401(self, client) -> None:
        resp = client.post("/scrape", json={"url": "https://site.test/page"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "No authorization header"}

    def test_bad_token_is_401(self, client) -> None:
        resp = _scrape(client, headers={"Authorization": "Bearer wrong"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid authentication"

    def test_missing_url_is_400(self, client) -> None:
        resp = client.post("/scrape", json={}, headers=_AUTH)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "URL is required"}

    def test_invalid_url_is_400(self, client) -> None:
        resp = _scrape(client, url="https://exa mple.com")
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_malformed_body_is_400(self, client) -> None:
        resp = client.post(
            "/scrape",
            content=b"not json",
            headers={**_AUTH, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_fetch_404_is_reported_and_nothing_saved(self, client) -> None:
        with respx.mock:
            respx.get("https://site.test/gone").mock(return_value=httpx.Response(404))
            resp = _scrape(client, url="https://site.test/gone")

        assert resp.status_code == 502
        assert resp.json() == {"success": False, "error": "Failed to fetch webpage: 404"}
        assert client.get("/results", headers=_AUTH).json()["data"] == []

    def test_client_disconnect_skips_write(self, client) -> None:
        with respx.mock:
            respx.get("https://site.test/page").mock(return_value=httpx.Response(200, text=_PAGE))
            with patch(
                "starlette.requests.Request.is_disconnected",
                new=AsyncMock(return_value=True),
            ):
                resp = _scrape(client)

        assert resp.status_code == 499
        assert resp.json() == {"success": False, "error": "Request cancelled"}
        assert client.get("/results", headers=_AUTH).json()["data"] == []


# ---------------------------------------------------------------------------
# /results
# ---------------------------------------------------------------------------

class TestResults:
    def _create(self, client) -> str:
        with respx.mock:
            respx.get("https://site.test/page").mock(return_value=httpx.Response(200, text=_PAGE))
            return _scrape(client).json()["data"]["id"]

    def test_list_is_owner_scoped(self, client) -> None:
        rid = self._create(client)
        mine = client.get("/results", headers=_AUTH).json()["data"]
        theirs = client.get("/results", headers=_AUTH_BOB).json()["data"]
        assert [r["id"] for r in mine] == [rid]
        assert theirs == []

    def test_list_requires_auth(self, client) -> None:
        assert client.get("/results").status_code == 401

    def test_get_one(self, client) -> None:
        rid = self._create(client)
        resp = client.get(f"/results/{rid}", headers=_AUTH)
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == rid

    def test_get_other_users_is_404(self, client) -> None:
        rid = self._create(client)
        resp = client.get(f"/results/{rid}", headers=_AUTH_BOB)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Result not found"}

    def test_delete_one(self, client) -> None:
        rid = self._create(client)
        assert client.delete(f"/results/{rid}", headers=_AUTH_BOB).status_code == 404
        assert client.delete(f"/results/{rid}", headers=_AUTH).status_code == 200
        assert client.get(f"/results/{rid}", headers=_AUTH).status_code == 404

    def test_clear_all(self, client) -> None:
        self._create(client)
        self._create(client)
        resp = client.delete("/results", headers=_AUTH)
        assert resp.json() == {"success": True, "data": {"deleted": 2}}
        assert client.get("/results", headers=_AUTH).json()["data"] == []

"""Tests for bearer-token identity and token-table parsing."""

from __future__ import annotations

import pytest

from sitescope.auth import verify_token
from sitescope.config import _parse_tokens, settings
from sitescope.errors import AuthError


@pytest.fixture(autouse=True)
def _tokens(monkeypatch) -> None:
    monkeypatch.setattr(settings, "api_tokens", {"tok-a": "alice", "tok-b": "bob"})


class TestParseTokens:
    def test_pairs_parsed(self) -> None:
        assert _parse_tokens("t1:u1, t2:u2") == {"t1": "u1", "t2": "u2"}

    def test_malformed_pairs_ignored(self) -> None:
        assert _parse_tokens("nocolon,:nouser,notoken:,ok:me") == {"ok": "me"}

    def test_empty(self) -> None:
        assert _parse_tokens("") == {}


class TestVerifyToken:
    def test_known_token(self) -> None:
        assert verify_token("Bearer tok-a") == "alice"
        assert verify_token("bearer   tok-b ") == "bob"

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_missing_header(self, header) -> None:
        with pytest.raises(AuthError, match="No authorization header"):
            verify_token(header)

    @pytest.mark.parametrize("header", ["Bearer nope", "Basic tok-a", "Bearer", "tok-a"])
    def test_invalid(self, header: str) -> None:
        with pytest.raises(AuthError, match="Invalid authentication"):
            verify_token(header)

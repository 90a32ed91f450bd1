"""Centralised settings for the SiteScope backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _parse_tokens(raw: str) -> dict[str, str]:
    """Parse ``"token:user_id,token2:user_id2"`` into a lookup table.

    Malformed pairs (no colon, empty token or user id) are ignored.
    """
    tokens: dict[str, str] = {}
    for pair in raw.split(","):
        token, sep, user_id = pair.strip().partition(":")
        if sep and token.strip() and user_id.strip():
            tokens[token.strip()] = user_id.strip()
    return tokens


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SITESCOPE_WORKSPACE", Path.home() / ".sitescope_data")
        ).expanduser()
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "sitescope.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SCRAPER_USER_AGENT", "Mozilla/5.0 (compatible; WebScraper/1.0)"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_response_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_RESPONSE_BYTES", "5000000"))
    )

    # ------------------------------------------------------------------
    # Summary (enrichment) model
    # ------------------------------------------------------------------
    summary_provider: str = field(
        default_factory=lambda: os.environ.get("SUMMARY_PROVIDER", "").strip().lower()
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    summary_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SUMMARY_TIMEOUT", "60.0"))
    )
    summary_max_input_chars: int = field(
        default_factory=lambda: int(os.environ.get("SUMMARY_MAX_INPUT_CHARS", "12000"))
    )
    summary_max_words: int = field(
        default_factory=lambda: int(os.environ.get("SUMMARY_MAX_WORDS", "250"))
    )
    summary_max_output_tokens: int = field(
        default_factory=lambda: int(os.environ.get("SUMMARY_MAX_OUTPUT_TOKENS", "500"))
    )

    @property
    def resolved_summary_provider(self) -> str | None:
        """The summary backend to use, or ``None`` when enrichment is off.

        An empty ``SUMMARY_PROVIDER`` means "OpenAI if a key is present".
        """
        provider = self.summary_provider
        if provider in ("none", "off", "disabled"):
            return None
        if not provider:
            return "openai" if self.openai_api_key else None
        return provider

    @property
    def summary_enabled(self) -> bool:
        provider = self.resolved_summary_provider
        if provider == "openai":
            return bool(self.openai_api_key)
        return provider == "ollama"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    api_tokens: dict[str, str] = field(
        default_factory=lambda: _parse_tokens(os.environ.get("SITESCOPE_API_TOKENS", ""))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from sitescope.config import settings
settings = Settings()

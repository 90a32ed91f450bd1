"""Process-wide logging configuration.

Modules log through ``logging.getLogger(__name__)``; entry points (the API
app factory and the CLI) call :func:`configure_logging` once.
"""

from __future__ import annotations

import logging

from sitescope.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler at ``settings.log_level`` (or *level*)."""
    logging.basicConfig(level=(level or settings.log_level), format=LOG_FORMAT)

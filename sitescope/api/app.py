"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``) and initialises the schema.  On
shutdown it closes the connection cleanly.

Routers
-------
    /scrape  : run the scrape pipeline for one URL
    /results : list, read and delete the caller's saved results

Errors
------
Every failure is answered as ``{"success": false, "error": "<message>"}``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitescope import __version__
from sitescope.db import get_connection, init_db
from sitescope.errors import ScrapeError
from sitescope.logging_setup import configure_logging

from sitescope.api.routers import results as results_router
from sitescope.api.routers import scrape as scrape_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    try:
        yield
    finally:
        conn.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _scrape_error_handler(request: Request, exc: ScrapeError) -> JSONResponse:
    logger.warning(
        "%s %s failed stage=%s status=%d: %s",
        request.method, request.url.path, exc.stage, exc.status_code, exc.message,
    )
    return _error(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s rejected body: %s", request.method, request.url.path, exc.errors())
    return _error(400, "Invalid request")


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s unexpected error", request.method, request.url.path)
    return _error(500, "An unexpected error occurred")


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()

    app = FastAPI(
        title="SiteScope API",
        description=(
            "Submit a URL and receive its title, headings, links and cleaned "
            "text, plus an optional AI summary, saved per user."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    app.add_exception_handler(ScrapeError, _scrape_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])
    app.include_router(results_router.router, prefix="/results", tags=["results"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn sitescope.api.app:app --reload
app = create_app()

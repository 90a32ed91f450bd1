"""SiteScope CLI: entry-point for all backend operations.

Usage:
    sitescope --help

Commands:
    db init   → create the database
    scrape    → run the full pipeline for one URL and save the result
    extract   → fetch + extract only, nothing saved
    results   → browse / delete saved results
    serve     → run the HTTP API
"""

from __future__ import annotations

import json
from typing import Optional

import typer

from sitescope.config import settings
from sitescope.db import get_connection, init_db
from sitescope.errors import ScrapeError
from sitescope.logging_setup import configure_logging

from cli.commands.results import results_app

app = typer.Typer(
    name="sitescope",
    help="SiteScope backend CLI.",
    no_args_is_help=True,
)
app.add_typer(results_app, name="results")

db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level.upper() if log_level else None)


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


@app.command("scrape")
def scrape(
    url: str = typer.Argument(..., help="URL to scrape (scheme optional)."),
    user: str = typer.Option(..., "--user", "-u", help="Owner user id for the saved result."),
    as_json: bool = typer.Option(False, "--json", help="Print the saved result as JSON."),
) -> None:
    """Scrape a URL, summarise it if a model is configured, and save it."""
    from sitescope.pipeline import scrape_url

    conn = get_connection()
    init_db(conn)
    try:
        record = scrape_url(conn, url, user)
    except ScrapeError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        conn.close()

    if as_json:
        typer.echo(json.dumps(record.to_public(), indent=2))
        return

    typer.echo(f"[scrape] Saved    : {record.id}")
    typer.echo(f"[scrape] Title    : {record.title}")
    typer.echo(f"[scrape] Headings : {len(record.headings)}")
    typer.echo(f"[scrape] Links    : {len(record.links)}")
    typer.echo(f"[scrape] Status   : {record.analysis_status}")
    if record.ai_summary:
        typer.echo("")
        typer.echo(record.ai_summary)


@app.command("extract")
def extract(
    url: str = typer.Argument(..., help="URL to fetch (scheme optional)."),
) -> None:
    """Fetch and extract a URL without summarising or saving it."""
    from sitescope.pipeline import normalize_url, validate_url
    from sitescope.scraper import extract_document, fetch_url

    try:
        target = validate_url(normalize_url(url))
        raw = fetch_url(target)
    except ScrapeError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)

    doc = extract_document(raw, include_markdown=False)
    typer.echo(f"[extract] Title    : {doc.title}")
    for heading in doc.headings:
        typer.echo(f"  # {heading}")
    for link in doc.links:
        typer.echo(f"  - {link.text} <{link.url}>")
    typer.echo("")
    typer.echo(doc.content)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("sitescope.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()

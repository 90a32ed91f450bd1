"""Saved-result commands: list, show, delete and clear a user's results."""

from __future__ import annotations

import json

import typer

from sitescope.db import get_connection, init_db
from sitescope.db.results import (
    delete_all_results,
    delete_result,
    get_result,
    list_results,
)

results_app = typer.Typer(help="Browse and delete saved scrape results.", no_args_is_help=True)

_USER_OPTION = typer.Option(..., "--user", "-u", help="Owner user id.")


@results_app.command("list")
def results_list(
    user: str = _USER_OPTION,
    limit: int = typer.Option(50, min=1, max=200, help="Maximum results to show."),
) -> None:
    """List saved results, newest first."""
    conn = get_connection()
    init_db(conn)
    try:
        records = list_results(conn, user, limit=limit)
    finally:
        conn.close()

    if not records:
        typer.echo("No saved results.")
        return
    for r in records:
        typer.echo(f"  {r.id}  [{r.analysis_status}]  {r.title!r}  {r.url}")


@results_app.command("show")
def results_show(
    result_id: str = typer.Argument(..., help="Result id."),
    user: str = _USER_OPTION,
) -> None:
    """Print one saved result as JSON."""
    conn = get_connection()
    init_db(conn)
    try:
        record = get_result(conn, user, result_id)
    finally:
        conn.close()

    if record is None:
        typer.echo(f"Error: result {result_id!r} not found.", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(record.to_public(), indent=2))


@results_app.command("delete")
def results_delete(
    result_id: str = typer.Argument(..., help="Result id."),
    user: str = _USER_OPTION,
) -> None:
    """Delete one saved result."""
    conn = get_connection()
    init_db(conn)
    try:
        deleted = delete_result(conn, user, result_id)
    finally:
        conn.close()

    if not deleted:
        typer.echo(f"Error: result {result_id!r} not found.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {result_id}")


@results_app.command("clear")
def results_clear(
    user: str = _USER_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every saved result for a user."""
    if not yes:
        typer.confirm(f"Delete all saved results for {user!r}?", abort=True)
    conn = get_connection()
    init_db(conn)
    try:
        count = delete_all_results(conn, user)
    finally:
        conn.close()
    typer.echo(f"Deleted {count} result(s).")

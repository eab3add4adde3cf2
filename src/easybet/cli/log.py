"""Log subcommand: export, stats."""

from __future__ import annotations

import typer

from easybet.storage.db import get_connection, init_schema
from easybet.storage.event_log import log_stats
from easybet.storage.export import export_events_to_parquet

app = typer.Typer(help="Event log export and statistics")


@app.command("export")
def export(
    ctx: typer.Context,
    activity: int | None = typer.Option(None, "--activity", "-a", help="Filter by activity ID"),
    output: str = typer.Option("events.parquet", "--output", "-o", help="Output path"),
) -> None:
    """Export events to Parquet."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        count = export_events_to_parquet(conn, output, activity_id=activity)
        typer.echo(f"Exported {count} events to {output}")
    finally:
        conn.close()


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Show event log statistics (counts, time range, by event type)."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        s = log_stats(conn)
        typer.echo(f"Total events: {s['total_events']}")
        typer.echo(f"Activities: {s['activities']}")
        typer.echo(f"Min ts: {s.get('min_ts')}")
        typer.echo(f"Max ts: {s.get('max_ts')}")
        if s.get("by_type"):
            typer.echo("By event type:")
            for row in s["by_type"]:
                typer.echo(f"  {row['event_type']}  {row['count']}")
    finally:
        conn.close()

"""Replay subcommand: pools, series."""

import typer

from easybet.replay.engine import replay_activity_pools, replay_pool_series
from easybet.storage.db import get_connection, init_schema

app = typer.Typer(help="Deterministic replay of the event log")


@app.command("pools")
def pools(
    ctx: typer.Context,
    activity: int | None = typer.Option(None, "--activity", "-a", help="Activity ID (default: all)"),
) -> None:
    """Rebuild pool totals per activity from the event log."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        summaries = replay_activity_pools(conn, activity_id=activity)
        if not summaries:
            typer.echo("No activities in the event log.")
            return
        for s in summaries.values():
            status = f"settled (winner: {s.choices[s.winning_choice]})" if s.settled else "open"
            typer.echo(f"#{s.activity_id} {s.name}  pool={s.total_pool}  {status}")
            for label, amount, count in zip(s.choices, s.choice_amounts, s.ticket_counts):
                typer.echo(f"  {label}: {amount} over {count} ticket(s)")
            if s.settled:
                typer.echo(f"  distributed: {s.total_distributed}")
    finally:
        conn.close()


@app.command("series")
def series(
    ctx: typer.Context,
    activity: int = typer.Option(..., "--activity", "-a", help="Activity ID"),
) -> None:
    """Print the pool size after every event on an activity."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        points = replay_pool_series(conn, activity)
        typer.echo(f"Replayed {len(points)} events")
        for ts, pool in points[:20]:
            typer.echo(f"  {ts}  {pool}")
        if len(points) > 20:
            typer.echo(f"  ... and {len(points) - 20} more")
    finally:
        conn.close()

"""Sim subcommand: run, list."""

from __future__ import annotations

import typer

from easybet.simulation.runner import run_scenario
from easybet.simulation.scenarios import SCENARIOS
from easybet.storage.recorder import EventRecorder

app = typer.Typer(help="Scripted sessions against in-memory collaborators")


@app.command("run")
def run_sim(
    ctx: typer.Context,
    scenario: str = typer.Option(..., "--scenario", "-s", help="Scenario name (e.g. proportional)"),
    record: bool = typer.Option(True, "--record/--no-record", help="Append emitted events to the event log"),
) -> None:
    """Run a scripted session and print final balances."""
    if scenario not in SCENARIOS:
        typer.echo(f"Unknown scenario: {scenario}. Choose from: {list(SCENARIOS)}")
        raise typer.Exit(1)
    settings = ctx.obj["settings"]
    recorder = None
    if record and settings.record_events:
        recorder = EventRecorder(settings.db_path, settings.event_batch_size)
    try:
        result = run_scenario(scenario, recorder=recorder, escrow_account=settings.escrow_account)
    finally:
        if recorder is not None:
            recorder.close()
    typer.echo(f"Run id: {result.run_id}")
    typer.echo(f"Scenario: {result.scenario}  Activity: {result.activity_id}")
    typer.echo(f"Events: {result.events_emitted}  Settled: {result.settled}")
    typer.echo(f"Pool left: {result.total_pool}  Escrow balance: {result.escrow_balance}")
    for account, balance in result.balances.items():
        typer.echo(f"  {account}: {balance}")


@app.command("list")
def list_scenarios() -> None:
    """List available scenarios."""
    for name, fn in SCENARIOS.items():
        typer.echo(f"{name}  {(fn.__doc__ or '').strip()}")

"""Session runner: in-memory collaborators + scenario + optional event recording."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from easybet.adapters.clock import ManualClock
from easybet.adapters.registry import InMemoryTicketRegistry
from easybet.adapters.token import InMemoryToken
from easybet.events import EventBus
from easybet.exchange import DEFAULT_ESCROW_ACCOUNT, EasyBet
from easybet.simulation.scenarios import SCENARIOS
from easybet.storage.recorder import EventRecorder


@dataclass
class SessionResult:
    """Result of a scripted session."""

    run_id: str
    scenario: str
    activity_id: int
    total_pool: int
    settled: bool
    escrow_balance: int
    events_emitted: int
    balances: dict[str, int] = field(default_factory=dict)


def run_scenario(
    name: str,
    recorder: EventRecorder | None = None,
    escrow_account: str = DEFAULT_ESCROW_ACCOUNT,
    start_ts: int = 1_700_000_000,
) -> SessionResult:
    """Run a named scenario end to end and report final balances."""
    if name not in SCENARIOS:
        raise KeyError(f"unknown scenario {name!r}; choose from {sorted(SCENARIOS)}")
    token = InMemoryToken()
    clock = ManualClock(start_ts)
    engine = EasyBet(
        token,
        InMemoryTicketRegistry(),
        clock,
        escrow_account=escrow_account,
        events=EventBus(keep_history=True),
    )
    if recorder is not None:
        recorder.attach(engine.events)

    activity_id = SCENARIOS[name](engine, token, clock)
    if recorder is not None:
        recorder.flush()

    activity = engine.get_activity(activity_id)
    players = sorted(
        {e.buyer for e in engine.events.of_type("ticket_purchased")}
        | {e.buyer for e in engine.events.of_type("order_filled")}
    )
    return SessionResult(
        run_id=str(uuid.uuid4())[:8],
        scenario=name,
        activity_id=activity_id,
        total_pool=activity.total_pool,
        settled=activity.settled,
        escrow_balance=token.balance_of(escrow_account),
        events_emitted=len(engine.events.history),
        balances={p: token.balance_of(p) for p in players},
    )

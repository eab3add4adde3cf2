"""Deterministic replay from the event log - rebuild pool state without the live engine."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator

from easybet.models.events import (
    ActivityCreated,
    ActivitySettled,
    Event,
    TicketPurchased,
    parse_event,
)


@dataclass
class PoolSummary:
    """Pool state of one activity as reconstructed from events."""

    activity_id: int
    name: str
    choices: list[str]
    total_pool: int = 0
    choice_amounts: list[int] = field(default_factory=list)
    ticket_counts: list[int] = field(default_factory=list)
    settled: bool = False
    winning_choice: int | None = None
    total_distributed: int = 0

    @classmethod
    def from_created(cls, event: ActivityCreated) -> PoolSummary:
        return cls(
            activity_id=event.activity_id,
            name=event.name,
            choices=list(event.choices),
            choice_amounts=[0] * len(event.choices),
            ticket_counts=[0] * len(event.choices),
        )

    def apply(self, event: Event) -> None:
        if isinstance(event, TicketPurchased):
            self.total_pool += event.stake
            self.choice_amounts[event.choice] += event.stake
            self.ticket_counts[event.choice] += 1
        elif isinstance(event, ActivitySettled):
            self.total_pool -= event.total_distributed
            self.total_distributed = event.total_distributed
            self.winning_choice = event.winning_choice
            self.settled = True


def stream_events(
    conn: Any,
    activity_id: int | None = None,
    event_type: str | None = None,
    start_ts: int | None = None,
    end_ts: int | None = None,
) -> Iterator[Event]:
    """Yield decoded events in append order, optionally filtered."""
    conditions = []
    params: list[Any] = []
    if activity_id is not None:
        conditions.append("activity_id = ?")
        params.append(activity_id)
    if event_type:
        conditions.append("event_type = ?")
        params.append(event_type)
    if start_ts is not None:
        conditions.append("ts >= ?")
        params.append(start_ts)
    if end_ts is not None:
        conditions.append("ts <= ?")
        params.append(end_ts)
    where = " AND ".join(conditions) if conditions else "1=1"
    sql = f"SELECT payload FROM events WHERE {where} ORDER BY id ASC"
    for (payload_json,) in conn.execute(sql, params).fetchall():
        payload = json.loads(payload_json) if isinstance(payload_json, str) else payload_json
        yield parse_event(payload)


def replay_activity_pools(conn: Any, activity_id: int | None = None) -> dict[int, PoolSummary]:
    """Replay the log into one PoolSummary per activity. Same log -> same result."""
    pools: dict[int, PoolSummary] = {}
    for event in stream_events(conn, activity_id=activity_id):
        if isinstance(event, ActivityCreated):
            pools[event.activity_id] = PoolSummary.from_created(event)
            continue
        summary = pools.get(getattr(event, "activity_id", -1))
        if summary is not None:
            summary.apply(event)
    return pools


def replay_pool_series(conn: Any, activity_id: int) -> list[tuple[int, int]]:
    """Return [(ts, total_pool), ...] after each event touching the activity."""
    summary: PoolSummary | None = None
    out: list[tuple[int, int]] = []
    for event in stream_events(conn, activity_id=activity_id):
        if isinstance(event, ActivityCreated):
            summary = PoolSummary.from_created(event)
        elif summary is not None:
            summary.apply(event)
        if summary is not None:
            out.append((event.timestamp, summary.total_pool))
    return out

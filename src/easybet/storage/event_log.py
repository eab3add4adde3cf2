"""Event append and query - the indexer-facing log of committed operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from easybet.models.events import Event

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

EventRow = tuple[str, int | None, int | None, int | None, int, str]

_INSERT_SQL = """
    INSERT INTO events (event_type, activity_id, ticket_id, order_id, ts, payload)
    VALUES (?, ?, ?, ?, ?, ?)
"""


def prepare_event_row(event: Event) -> EventRow:
    """Build an events row: (event_type, activity_id, ticket_id, order_id, ts, payload_json)."""
    return (
        event.event_type,
        getattr(event, "activity_id", None),
        getattr(event, "ticket_id", None),
        getattr(event, "order_id", None),
        event.timestamp,
        event.model_dump_json(),
    )


def append_event(conn: DuckDBPyConnection, event: Event) -> None:
    """Append a single event. Prefer append_events_batch for throughput."""
    conn.execute(_INSERT_SQL, list(prepare_event_row(event)))


def append_events_batch(conn: DuckDBPyConnection, rows: list[EventRow]) -> None:
    """Append multiple prepared rows in one call."""
    if not rows:
        return
    conn.executemany(_INSERT_SQL, rows)


def log_stats(conn: DuckDBPyConnection) -> dict[str, Any]:
    """Return event log statistics: total count, min/max ts, count by event_type."""
    total = conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]
    range_row = conn.execute("SELECT MIN(ts), MAX(ts) FROM events").fetchone()
    min_ts, max_ts = range_row[0], range_row[1]
    by_type = conn.execute(
        "SELECT event_type, COUNT(*) AS cnt FROM events GROUP BY event_type ORDER BY cnt DESC, event_type"
    ).fetchall()
    activities = conn.execute(
        "SELECT COUNT(DISTINCT activity_id) FROM events WHERE activity_id IS NOT NULL"
    ).fetchone()[0]
    return {
        "total_events": total,
        "min_ts": min_ts,
        "max_ts": max_ts,
        "activities": activities,
        "by_type": [{"event_type": r[0], "count": r[1]} for r in by_type],
    }

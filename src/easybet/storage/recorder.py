"""Event recorder - subscribes to the event bus and persists events to DuckDB in batches."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from easybet.events import EventBus
from easybet.models.events import Event
from easybet.storage.db import get_connection, init_schema
from easybet.storage.event_log import EventRow, append_events_batch, prepare_event_row

log = structlog.get_logger(__name__)


class EventRecorder:
    """Buffers committed events and appends them to the events table."""

    def __init__(self, db_path: str | Path, event_batch_size: int = 100, conn: Any = None):
        self.db_path = Path(db_path)
        self.event_batch_size = max(1, event_batch_size)
        self._conn = conn
        self._owns_conn = conn is None
        self._batch: list[EventRow] = []
        self._event_count = 0

    def _get_conn(self):
        if self._conn is None:
            self._conn = get_connection(self.db_path)
            init_schema(self._conn)
        return self._conn

    def attach(self, bus: EventBus) -> EventRecorder:
        bus.subscribe(self.on_event)
        return self

    def on_event(self, event: Event) -> None:
        self._event_count += 1
        self._batch.append(prepare_event_row(event))
        if len(self._batch) >= self.event_batch_size:
            self.flush()

    def flush(self) -> None:
        if not self._batch:
            return
        append_events_batch(self._get_conn(), self._batch)
        log.debug("events_flushed", count=len(self._batch))
        self._batch = []

    @property
    def event_count(self) -> int:
        return self._event_count

    def close(self) -> None:
        self.flush()
        if self._conn is not None and self._owns_conn:
            self._conn.close()
            self._conn = None
        log.info("recorder_closed", total_events=self._event_count)

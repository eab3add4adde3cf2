"""In-process event bus - fans committed events out to observers (loggers, indexers, recorders)."""

from __future__ import annotations

from typing import Callable

import structlog

from easybet.models.events import Event

log = structlog.get_logger(__name__)

EventHandler = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe. Handlers run in subscription order.

    Events are published after the emitting operation has committed, so a
    failing handler is logged and skipped; it never fails the operation.
    """

    def __init__(self, keep_history: bool = False) -> None:
        self._handlers: list[EventHandler] = []
        self.keep_history = keep_history
        self._history: list[Event] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event: Event) -> None:
        """Deliver the event to every handler, recording it if history is kept."""
        if self.keep_history:
            self._history.append(event)
        log.debug("event_published", event_type=event.event_type)
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                log.exception(
                    "event_handler_failed",
                    event_type=event.event_type,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )

    @property
    def history(self) -> list[Event]:
        """Events published so far, oldest first. Empty unless keep_history is set."""
        return list(self._history)

    def of_type(self, event_type: str) -> list[Event]:
        return [e for e in self._history if e.event_type == event_type]

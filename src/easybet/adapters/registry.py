"""In-memory non-fungible custody registry for tickets."""

from __future__ import annotations

from typing import Any

from easybet.errors import NotOwner, TicketNotFound


class InMemoryTicketRegistry:
    """Tracks which account holds each ticket id."""

    def __init__(self) -> None:
        self._owners: dict[int, str] = {}
        self._metadata: dict[int, dict[str, Any]] = {}

    def mint(self, owner: str, ticket_id: int, metadata: dict[str, Any]) -> None:
        if ticket_id in self._owners:
            raise ValueError(f"ticket {ticket_id} already minted")
        self._owners[ticket_id] = owner
        self._metadata[ticket_id] = dict(metadata)

    def owner_of(self, ticket_id: int) -> str:
        try:
            return self._owners[ticket_id]
        except KeyError:
            raise TicketNotFound(ticket_id) from None

    def transfer(self, ticket_id: int, source: str, dest: str) -> None:
        if self.owner_of(ticket_id) != source:
            raise NotOwner(f"{source} does not hold ticket {ticket_id}")
        self._owners[ticket_id] = dest

    def tokens_of(self, owner: str) -> list[int]:
        return sorted(tid for tid, who in self._owners.items() if who == owner)

    def metadata(self, ticket_id: int) -> dict[str, Any]:
        self.owner_of(ticket_id)
        return dict(self._metadata[ticket_id])

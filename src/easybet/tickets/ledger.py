"""Ticket ledger - immutable stake/odds records; custody is delegated to the ownership registry."""

from __future__ import annotations

from collections import defaultdict

import structlog

from easybet.activity.registry import ActivityRegistry
from easybet.errors import InvalidStake, TicketNotFound
from easybet.escrow.ledger import EscrowLedger
from easybet.events import EventBus
from easybet.interfaces import OwnershipRegistry
from easybet.models.events import TicketPurchased
from easybet.models.ticket import Ticket

log = structlog.get_logger(__name__)


class TicketLedger:
    """Issues tickets. Escrow of the stake and the mint commit together or not at all."""

    def __init__(
        self,
        activities: ActivityRegistry,
        escrow: EscrowLedger,
        registry: OwnershipRegistry,
        events: EventBus | None = None,
    ) -> None:
        self.activities = activities
        self.escrow = escrow
        self.registry = registry
        self.events = events or activities.events
        self._tickets: list[Ticket] = []
        # activity_id -> choice -> ticket ids
        self._index: dict[int, dict[int, list[int]]] = defaultdict(lambda: defaultdict(list))

    def issue_ticket(self, activity_id: int, choice: int, stake: int, buyer: str) -> Ticket:
        """Escrow `stake` from buyer, mint a ticket with the outcome's current odds."""
        now = self.activities.clock.now()
        activity = self.activities.require_open(activity_id, choice, now)
        if stake <= 0:
            raise InvalidStake(f"stake must be positive, got {stake}")

        ticket = Ticket(
            id=len(self._tickets),
            activity_id=activity_id,
            choice=choice,
            stake=stake,
            locked_odds=activity.odds[choice],
        )
        # Funds first: a failed pull leaves nothing to undo
        self.escrow.deposit(activity_id, buyer, stake)
        try:
            self.registry.mint(buyer, ticket.id, ticket.model_dump())
        except Exception:
            self.escrow.refund(activity_id, buyer, stake)
            raise
        self.activities.record_stake(activity_id, choice, stake, now)
        self._tickets.append(ticket)
        self._index[activity_id][choice].append(ticket.id)

        log.info(
            "ticket_issued",
            ticket_id=ticket.id,
            activity_id=activity_id,
            choice=choice,
            stake=stake,
            locked_odds=ticket.locked_odds,
        )
        self.events.publish(
            TicketPurchased(
                timestamp=now,
                ticket_id=ticket.id,
                activity_id=activity_id,
                buyer=buyer,
                choice=choice,
                stake=stake,
                locked_odds=ticket.locked_odds,
            )
        )
        return ticket

    def get_ticket(self, ticket_id: int) -> Ticket:
        if not 0 <= ticket_id < len(self._tickets):
            raise TicketNotFound(ticket_id)
        return self._tickets[ticket_id]

    def owner_of(self, ticket_id: int) -> str:
        self.get_ticket(ticket_id)
        return self.registry.owner_of(ticket_id)

    def tickets_for(self, activity_id: int, choice: int | None = None) -> list[Ticket]:
        """Tickets on an activity, optionally one outcome only, in issue order."""
        by_choice = self._index.get(activity_id, {})
        if choice is not None:
            ids = list(by_choice.get(choice, []))
        else:
            ids = sorted(tid for tids in by_choice.values() for tid in tids)
        return [self._tickets[tid] for tid in ids]

    def choice_count(self, activity_id: int, choice: int) -> int:
        return len(self._index.get(activity_id, {}).get(choice, []))

    def ticket_count(self) -> int:
        return len(self._tickets)

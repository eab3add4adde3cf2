"""EasyBet - wires the components together and serializes every state-mutating call."""

from __future__ import annotations

from threading import RLock
from typing import Sequence

from easybet.activity.registry import ActivityRegistry
from easybet.errors import InvalidChoice
from easybet.escrow.ledger import EscrowLedger
from easybet.events import EventBus
from easybet.interfaces import Clock, OwnershipRegistry, ValueTransfer
from easybet.models.activity import Activity, ActivityState
from easybet.models.order import Order
from easybet.models.settlement import SettlementResult
from easybet.models.ticket import Ticket
from easybet.orderbook.engine import OrderBook, OrderBookView
from easybet.settlement.engine import SettlementEngine
from easybet.tickets.ledger import TicketLedger

DEFAULT_ESCROW_ACCOUNT = "easybet-escrow"


class EasyBet:
    """Public entry point. Collaborators are injected; nothing is looked up globally.

    Mutations run one at a time under a re-entrant lock so pool totals and
    settlement flags are never observed mid-update. Reads return copies.
    """

    def __init__(
        self,
        token: ValueTransfer,
        registry: OwnershipRegistry,
        clock: Clock,
        escrow_account: str = DEFAULT_ESCROW_ACCOUNT,
        events: EventBus | None = None,
    ) -> None:
        self.events = events or EventBus()
        self.clock = clock
        self.escrow = EscrowLedger(token, escrow_account)
        self.activities = ActivityRegistry(clock, self.events)
        self.tickets = TicketLedger(self.activities, self.escrow, registry, self.events)
        self.orders = OrderBook(self.tickets, registry, self.escrow, clock, self.events)
        self.settlement = SettlementEngine(
            self.activities,
            self.tickets,
            self.escrow,
            self.events,
            beneficiary=self.orders.beneficial_owner,
        )
        self._lock = RLock()

    @property
    def escrow_account(self) -> str:
        return self.escrow.account

    # Mutations

    def create_activity(
        self,
        creator: str,
        name: str,
        choices: Sequence[str],
        odds: Sequence[int],
        duration: int,
    ) -> int:
        with self._lock:
            return self.activities.create_activity(creator, name, choices, odds, duration).id

    def buy_ticket(self, buyer: str, activity_id: int, choice: int, amount: int) -> int:
        with self._lock:
            return self.tickets.issue_ticket(activity_id, choice, amount, buyer).id

    def settle_activity(self, caller: str, activity_id: int, winning_choice: int) -> SettlementResult:
        with self._lock:
            return self.settlement.settle(activity_id, winning_choice, caller)

    def create_order(self, seller: str, ticket_id: int, price: int) -> int:
        with self._lock:
            return self.orders.create_order(ticket_id, price, seller).id

    def fill_order(self, buyer: str, order_id: int) -> Order:
        with self._lock:
            return self.orders.fill_order(order_id, buyer)

    def cancel_order(self, caller: str, order_id: int) -> Order:
        with self._lock:
            return self.orders.cancel_order(order_id, caller)

    # Reads

    def get_activity(self, activity_id: int) -> Activity:
        with self._lock:
            return self.activities.get_activity(activity_id)

    def get_activity_state(self, activity_id: int) -> ActivityState:
        with self._lock:
            return self.activities.state_of(activity_id)

    def get_activity_count(self) -> int:
        with self._lock:
            return self.activities.activity_count()

    def get_choice_amount(self, activity_id: int, choice: int) -> int:
        with self._lock:
            return self.activities.get_choice_amount(activity_id, choice)

    def get_choice_count(self, activity_id: int, choice: int) -> int:
        with self._lock:
            activity = self.activities.get_activity(activity_id)
            if not activity.has_choice(choice):
                raise InvalidChoice(f"activity {activity_id} has no choice {choice}")
            return self.tickets.choice_count(activity_id, choice)

    def get_ticket(self, ticket_id: int) -> Ticket:
        with self._lock:
            return self.tickets.get_ticket(ticket_id)

    def get_tickets(self, activity_id: int, choice: int | None = None) -> list[int]:
        with self._lock:
            self.activities.get_activity(activity_id)
            return [t.id for t in self.tickets.tickets_for(activity_id, choice)]

    def owner_of(self, ticket_id: int) -> str:
        with self._lock:
            return self.tickets.owner_of(ticket_id)

    def get_order(self, order_id: int) -> Order:
        with self._lock:
            return self.orders.get_order(order_id)

    def get_order_book(self, activity_id: int) -> OrderBookView:
        with self._lock:
            self.activities.get_activity(activity_id)
            return self.orders.order_book(activity_id)

    def best_ask(self, activity_id: int, choice: int) -> int | None:
        with self._lock:
            return self.orders.best_ask(activity_id, choice)

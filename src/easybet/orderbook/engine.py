"""Resale order book - list, fill or cancel escrowed tickets. Never touches odds or pools."""

from __future__ import annotations

from typing import NamedTuple

import structlog

from easybet.errors import (
    InvalidPrice,
    NotOwner,
    OrderInactive,
    OrderNotFound,
    Unauthorized,
)
from easybet.escrow.ledger import EscrowLedger
from easybet.events import EventBus
from easybet.interfaces import Clock, OwnershipRegistry
from easybet.models.events import OrderCancelled, OrderCreated, OrderFilled
from easybet.models.order import Order
from easybet.tickets.ledger import TicketLedger

log = structlog.get_logger(__name__)


class OrderBookView(NamedTuple):
    """Active asks for one activity, cheapest first, as parallel lists."""

    order_ids: list[int]
    ticket_ids: list[int]
    prices: list[int]


class OrderBook:
    """Orders in an append-only list keyed by index. A listed ticket sits with the escrow custodian."""

    def __init__(
        self,
        tickets: TicketLedger,
        registry: OwnershipRegistry,
        escrow: EscrowLedger,
        clock: Clock,
        events: EventBus | None = None,
    ) -> None:
        self.tickets = tickets
        self.registry = registry
        self.escrow = escrow
        self.clock = clock
        self.events = events or tickets.events
        self._orders: list[Order] = []
        # ticket_id -> id of the active order holding it
        self._listed: dict[int, int] = {}

    def create_order(self, ticket_id: int, price: int, seller: str) -> Order:
        """Escrow the seller's ticket and open an ask at `price`."""
        self.tickets.get_ticket(ticket_id)
        if self.registry.owner_of(ticket_id) != seller:
            raise NotOwner(f"{seller} does not hold ticket {ticket_id}")
        if price <= 0:
            raise InvalidPrice(f"price must be positive, got {price}")

        self.registry.transfer(ticket_id, seller, self.escrow.account)
        order = Order(id=len(self._orders), ticket_id=ticket_id, seller=seller, price=price)
        self._orders.append(order)
        self._listed[ticket_id] = order.id
        log.info("order_created", order_id=order.id, ticket_id=ticket_id, seller=seller, price=price)
        self.events.publish(
            OrderCreated(
                timestamp=self.clock.now(),
                order_id=order.id,
                ticket_id=ticket_id,
                seller=seller,
                price=price,
            )
        )
        return order.model_copy()

    def fill_order(self, order_id: int, buyer: str) -> Order:
        """Buyer pays the seller and receives the escrowed ticket."""
        order = self._active(order_id)
        self.escrow.collect(buyer, order.price)
        try:
            self.registry.transfer(order.ticket_id, self.escrow.account, buyer)
        except Exception:
            self.escrow.disburse(buyer, order.price)
            raise
        self.escrow.disburse(order.seller, order.price)
        order.active = False
        order.buyer = buyer
        self._listed.pop(order.ticket_id, None)
        log.info(
            "order_filled",
            order_id=order_id,
            ticket_id=order.ticket_id,
            buyer=buyer,
            seller=order.seller,
            price=order.price,
        )
        self.events.publish(
            OrderFilled(
                timestamp=self.clock.now(),
                order_id=order_id,
                ticket_id=order.ticket_id,
                buyer=buyer,
                seller=order.seller,
                price=order.price,
            )
        )
        return order.model_copy()

    def cancel_order(self, order_id: int, caller: str) -> Order:
        """Seller withdraws the ask and gets the ticket back."""
        order = self._active(order_id)
        if caller != order.seller:
            raise Unauthorized(f"only the seller can cancel order {order_id}")
        self.registry.transfer(order.ticket_id, self.escrow.account, order.seller)
        order.active = False
        self._listed.pop(order.ticket_id, None)
        log.info("order_cancelled", order_id=order_id, ticket_id=order.ticket_id)
        self.events.publish(
            OrderCancelled(
                timestamp=self.clock.now(),
                order_id=order_id,
                ticket_id=order.ticket_id,
                seller=order.seller,
            )
        )
        return order.model_copy()

    def get_order(self, order_id: int) -> Order:
        return self._get(order_id).model_copy()

    def order_count(self) -> int:
        return len(self._orders)

    def beneficial_owner(self, ticket_id: int) -> str:
        """Registry owner, or the seller while the ticket is held by an active order."""
        order_id = self._listed.get(ticket_id)
        if order_id is not None:
            return self._orders[order_id].seller
        return self.tickets.owner_of(ticket_id)

    def active_orders(self, activity_id: int | None = None, choice: int | None = None) -> list[Order]:
        """Active orders, cheapest first (ties by order id)."""
        out = []
        for order in self._orders:
            if not order.active:
                continue
            ticket = self.tickets.get_ticket(order.ticket_id)
            if activity_id is not None and ticket.activity_id != activity_id:
                continue
            if choice is not None and ticket.choice != choice:
                continue
            out.append(order.model_copy())
        out.sort(key=lambda o: (o.price, o.id))
        return out

    def order_book(self, activity_id: int) -> OrderBookView:
        orders = self.active_orders(activity_id)
        return OrderBookView(
            order_ids=[o.id for o in orders],
            ticket_ids=[o.ticket_id for o in orders],
            prices=[o.price for o in orders],
        )

    def best_ask(self, activity_id: int, choice: int) -> int | None:
        orders = self.active_orders(activity_id, choice)
        return orders[0].price if orders else None

    def _get(self, order_id: int) -> Order:
        if not 0 <= order_id < len(self._orders):
            raise OrderNotFound(order_id)
        return self._orders[order_id]

    def _active(self, order_id: int) -> Order:
        order = self._get(order_id)
        if not order.active:
            raise OrderInactive(f"order {order_id} is no longer active")
        return order

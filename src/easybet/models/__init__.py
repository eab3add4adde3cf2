"""Canonical schema (Pydantic) - Activity, Ticket, Order, settlement results and events."""

from easybet.models.activity import ODDS_SCALE, Activity, ActivityState
from easybet.models.events import (
    ActivityCreated,
    ActivitySettled,
    Event,
    OrderCancelled,
    OrderCreated,
    OrderFilled,
    TicketPurchased,
    parse_event,
)
from easybet.models.order import Order
from easybet.models.settlement import Payout, SettlementResult
from easybet.models.ticket import Ticket

__all__ = [
    "ODDS_SCALE",
    "Activity",
    "ActivityState",
    "Ticket",
    "Order",
    "Payout",
    "SettlementResult",
    "Event",
    "ActivityCreated",
    "TicketPurchased",
    "OrderCreated",
    "OrderFilled",
    "OrderCancelled",
    "ActivitySettled",
    "parse_event",
]

"""Outward events for observers and indexers."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class _Event(BaseModel):
    timestamp: int


class ActivityCreated(_Event):
    event_type: Literal["activity_created"] = "activity_created"
    activity_id: int
    creator: str
    name: str
    choices: list[str]
    odds: list[int]
    deadline: int


class TicketPurchased(_Event):
    event_type: Literal["ticket_purchased"] = "ticket_purchased"
    ticket_id: int
    activity_id: int
    buyer: str
    choice: int
    stake: int
    locked_odds: int


class OrderCreated(_Event):
    event_type: Literal["order_created"] = "order_created"
    order_id: int
    ticket_id: int
    seller: str
    price: int


class OrderFilled(_Event):
    event_type: Literal["order_filled"] = "order_filled"
    order_id: int
    ticket_id: int
    buyer: str
    seller: str
    price: int


class OrderCancelled(_Event):
    event_type: Literal["order_cancelled"] = "order_cancelled"
    order_id: int
    ticket_id: int
    seller: str


class ActivitySettled(_Event):
    event_type: Literal["activity_settled"] = "activity_settled"
    activity_id: int
    winning_choice: int
    total_distributed: int
    winner_count: int = Field(0, ge=0)


Event = Union[
    ActivityCreated,
    TicketPurchased,
    OrderCreated,
    OrderFilled,
    OrderCancelled,
    ActivitySettled,
]


_event_adapter: TypeAdapter[Event] = TypeAdapter(Annotated[Event, Field(discriminator="event_type")])


def parse_event(payload: dict[str, Any]) -> Event:
    """Decode a stored event payload back into its model."""
    return _event_adapter.validate_python(payload)

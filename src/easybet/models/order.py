"""Order - a resale listing for an escrowed ticket."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Order(BaseModel):
    """Sell order. `active` flips to False exactly once (fill or cancel)."""

    id: int = Field(..., ge=0)
    ticket_id: int = Field(..., ge=0)
    seller: str
    price: int = Field(..., gt=0)
    active: bool = True
    buyer: str | None = None

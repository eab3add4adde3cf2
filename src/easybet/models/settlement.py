"""Settlement results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Payout(BaseModel):
    """Amount paid for one winning ticket."""

    ticket_id: int
    beneficiary: str
    claim: int = Field(..., ge=0)
    amount: int = Field(..., ge=0)


class SettlementResult(BaseModel):
    """Outcome of settling an activity."""

    activity_id: int
    winning_choice: int
    pool: int
    total_claims: int
    total_distributed: int
    payouts: list[Payout] = Field(default_factory=list)

    @property
    def proportional(self) -> bool:
        """True when claims exceeded the pool and payouts were scaled down."""
        return self.total_claims > self.pool

    @property
    def retained(self) -> int:
        """Pool left in escrow after payouts."""
        return self.pool - self.total_distributed

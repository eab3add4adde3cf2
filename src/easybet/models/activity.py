"""Activity - a wagering event with named outcomes and locked payout multipliers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# Odds are fixed-point multipliers: 100 == 1.0x
ODDS_SCALE = 100


class ActivityState(str, Enum):
    """Lifecycle state derived from (now, deadline, settled)."""

    OPEN = "open"
    EXPIRED = "expired"
    SETTLED = "settled"


class Activity(BaseModel):
    """Activity record. Only the registry mutates pool totals and settlement fields."""

    id: int = Field(..., ge=0)
    creator: str
    name: str
    choices: list[str]
    odds: list[int]
    deadline: int
    total_pool: int = Field(0, ge=0)
    choice_amounts: list[int] = Field(default_factory=list)
    settled: bool = False
    winning_choice: int | None = None

    def state_at(self, now: int) -> ActivityState:
        if self.settled:
            return ActivityState.SETTLED
        if now >= self.deadline:
            return ActivityState.EXPIRED
        return ActivityState.OPEN

    def has_choice(self, choice: int) -> bool:
        return 0 <= choice < len(self.choices)

"""Ticket - immutable record of a stake and the odds locked in at purchase."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from easybet.models.activity import ODDS_SCALE


class Ticket(BaseModel):
    """Ticket metadata. Custody lives in the ownership registry, never here."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0)
    activity_id: int = Field(..., ge=0)
    choice: int = Field(..., ge=0)
    stake: int = Field(..., gt=0)
    locked_odds: int = Field(..., ge=ODDS_SCALE)

    @property
    def claim(self) -> int:
        """Full payout owed if this ticket's outcome wins (truncating)."""
        return self.stake * self.locked_odds // ODDS_SCALE

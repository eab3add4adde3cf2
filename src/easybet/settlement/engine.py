"""Settlement engine - resolves an activity and pays winning tickets out of its pool.

Payout rule, in integer arithmetic only:

    claim_i = stake_i * locked_odds_i // 100
    C       = sum(claim_i)

    if C == 0:      nothing is paid; the pool stays in escrow
    if pool >= C:   payout_i = claim_i
    if pool <  C:   payout_i = pool * claim_i // C

The proportional branch never pays a ticket more than its claim and never
pays more than the pool in total. Truncation can leave up to (winners - 1)
minor units unassigned; they stay in escrow with any surplus.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Sequence

import structlog

from easybet.activity.registry import ActivityRegistry
from easybet.errors import Unauthorized
from easybet.escrow.ledger import EscrowLedger
from easybet.events import EventBus
from easybet.models.events import ActivitySettled
from easybet.models.settlement import Payout, SettlementResult
from easybet.tickets.ledger import TicketLedger

log = structlog.get_logger(__name__)


def compute_payouts(pool: int, claims: Sequence[int]) -> list[int]:
    """Return the payout for each claim, in the same order (capped-proportional)."""
    if pool < 0:
        raise ValueError(f"pool must be non-negative, got {pool}")
    total = sum(claims)
    if total == 0:
        return [0] * len(claims)
    if pool >= total:
        return list(claims)
    return [pool * c // total for c in claims]


class SettlementEngine:
    """Single-pass, deterministic settlement over the activity's winning tickets."""

    def __init__(
        self,
        activities: ActivityRegistry,
        tickets: TicketLedger,
        escrow: EscrowLedger,
        events: EventBus | None = None,
        beneficiary: Callable[[int], str] | None = None,
    ) -> None:
        self.activities = activities
        self.tickets = tickets
        self.escrow = escrow
        self.events = events or activities.events
        # ticket_id -> account that receives the payout
        self.beneficiary = beneficiary or tickets.owner_of

    def settle(self, activity_id: int, winning_choice: int, caller: str) -> SettlementResult:
        now = self.activities.clock.now()
        activity = self.activities.get_activity(activity_id)
        if caller != activity.creator:
            raise Unauthorized(f"only the creator of activity {activity_id} can settle it")
        self.activities.require_settleable(activity_id, winning_choice, now)

        pool = activity.total_pool
        winners = self.tickets.tickets_for(activity_id, winning_choice)
        claims = [t.claim for t in winners]
        amounts = compute_payouts(pool, claims)
        payouts = [
            Payout(ticket_id=t.id, beneficiary=self.beneficiary(t.id), claim=c, amount=a)
            for t, c, a in zip(winners, claims, amounts)
        ]

        # One leg per beneficiary; the batch is all-or-nothing
        legs: dict[str, int] = defaultdict(int)
        for p in payouts:
            legs[p.beneficiary] += p.amount
        self.escrow.check_solvency()
        distributed = self.escrow.release(activity_id, sorted(legs.items()))
        self.activities.mark_settled(activity_id, winning_choice, distributed)

        result = SettlementResult(
            activity_id=activity_id,
            winning_choice=winning_choice,
            pool=pool,
            total_claims=sum(claims),
            total_distributed=distributed,
            payouts=payouts,
        )
        log.info(
            "activity_settled",
            activity_id=activity_id,
            winning_choice=winning_choice,
            pool=pool,
            total_claims=result.total_claims,
            distributed=distributed,
            winners=len(payouts),
            proportional=result.proportional,
        )
        self.events.publish(
            ActivitySettled(
                timestamp=now,
                activity_id=activity_id,
                winning_choice=winning_choice,
                total_distributed=distributed,
                winner_count=len(payouts),
            )
        )
        return result

"""Escrow ledger - the only component that moves value in or out of custody."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

import structlog

from easybet.errors import EscrowShortfall, InsufficientBalance
from easybet.interfaces import Move, ValueTransfer

log = structlog.get_logger(__name__)


class EscrowLedger:
    """Holds stakes for every open activity under a single custodian account.

    Per-activity holdings are tracked so a release can never pay out more
    than the activity itself brought in.
    """

    def __init__(self, token: ValueTransfer, account: str) -> None:
        self.token = token
        self.account = account
        self._held: dict[int, int] = defaultdict(int)

    def held(self, activity_id: int) -> int:
        return self._held.get(activity_id, 0)

    @property
    def total_held(self) -> int:
        return sum(self._held.values())

    def deposit(self, activity_id: int, payer: str, amount: int) -> None:
        """Pull amount from payer into custody. Uses payer's allowance to the custodian."""
        self.token.transfer_from(self.account, payer, self.account, amount)
        self._held[activity_id] += amount
        log.debug("escrow_deposit", activity_id=activity_id, payer=payer, amount=amount)

    def refund(self, activity_id: int, payee: str, amount: int) -> None:
        """Return a deposit that could not be committed."""
        self._check_available(activity_id, amount)
        self.token.transfer_from(self.account, self.account, payee, amount)
        self._held[activity_id] -= amount
        log.info("escrow_refund", activity_id=activity_id, payee=payee, amount=amount)

    def release(self, activity_id: int, payouts: Sequence[tuple[str, int]]) -> int:
        """Pay (beneficiary, amount) pairs out of an activity's holdings as one atomic batch.

        Returns the total released. Nothing moves if any leg fails.
        """
        total = sum(amount for _, amount in payouts)
        self._check_available(activity_id, total)
        moves = [Move(self.account, beneficiary, amount) for beneficiary, amount in payouts if amount > 0]
        if moves:
            self.token.transfer_batch(self.account, moves)
        self._held[activity_id] -= total
        log.debug("escrow_release", activity_id=activity_id, legs=len(moves), total=total)
        return total

    def collect(self, payer: str, amount: int) -> None:
        """Take a sale price into custody. Activity holdings are untouched."""
        self.token.transfer_from(self.account, payer, self.account, amount)

    def disburse(self, payee: str, amount: int) -> None:
        """Pay a collected sale price out of custody."""
        self.token.transfer_from(self.account, self.account, payee, amount)

    def check_solvency(self) -> None:
        """Raise InsufficientBalance if the custodian holds less than everything escrowed."""
        balance = self.token.balance_of(self.account)
        if balance < self.total_held:
            raise InsufficientBalance(
                f"custodian {self.account} holds {balance}, escrow owes {self.total_held}"
            )

    def _check_available(self, activity_id: int, amount: int) -> None:
        if amount > self.held(activity_id):
            raise EscrowShortfall(
                f"activity {activity_id} holds {self.held(activity_id)}, cannot release {amount}"
            )

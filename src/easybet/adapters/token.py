"""In-memory fungible token with allowances and atomic batch transfers."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from easybet.errors import InsufficientAllowance, InsufficientBalance
from easybet.interfaces import Move


class InMemoryToken:
    """Balances and spender allowances held in dicts.

    A spender moving its own funds needs no allowance; moving anyone
    else's consumes the allowance that account granted it.
    """

    def __init__(self, symbol: str = "BET") -> None:
        self.symbol = symbol
        self._balances: dict[str, int] = defaultdict(int)
        # (owner, spender) -> remaining allowance
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        self._balances[account] += amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return sum(self._balances.values())

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("allowance must be non-negative")
        self._allowances[(owner, spender)] = amount

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def transfer(self, source: str, dest: str, amount: int) -> None:
        self.transfer_from(source, source, dest, amount)

    def transfer_from(self, spender: str, source: str, dest: str, amount: int) -> None:
        self.transfer_batch(spender, [Move(source, dest, amount)])

    def transfer_batch(self, spender: str, moves: Sequence[Move]) -> None:
        """Validate every move against projected balances, then apply them all."""
        balances: dict[str, int] = {}
        allowances: dict[tuple[str, str], int] = {}
        for move in moves:
            if move.amount < 0:
                raise ValueError(f"negative transfer amount: {move.amount}")
            if move.source != spender:
                key = (move.source, spender)
                remaining = allowances.get(key, self.allowance(*key))
                if remaining < move.amount:
                    raise InsufficientAllowance(
                        f"{spender} may move {remaining} {self.symbol} from {move.source}, needs {move.amount}"
                    )
                allowances[key] = remaining - move.amount
            available = balances.get(move.source, self.balance_of(move.source))
            if available < move.amount:
                raise InsufficientBalance(
                    f"{move.source} holds {available} {self.symbol}, needs {move.amount}"
                )
            balances[move.source] = available - move.amount
            balances[move.dest] = balances.get(move.dest, self.balance_of(move.dest)) + move.amount
        self._balances.update(balances)
        self._allowances.update(allowances)

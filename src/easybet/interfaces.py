"""Capability contracts consumed from the environment: value transfer, ticket custody, clock."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class Move:
    """A single movement of fungible value from one account to another."""

    source: str
    dest: str
    amount: int


@runtime_checkable
class ValueTransfer(Protocol):
    """Fungible-token transfer/approval primitive.

    `spender` is the identity initiating the transfer. When it differs from
    the account being debited the transfer consumes a pre-authorized
    allowance, raising InsufficientAllowance if none is left.
    """

    def balance_of(self, account: str) -> int:
        ...

    def transfer_from(self, spender: str, source: str, dest: str, amount: int) -> None:
        """Move amount or raise InsufficientBalance / InsufficientAllowance."""
        ...

    def transfer_batch(self, spender: str, moves: Sequence[Move]) -> None:
        """Apply every move or none of them."""
        ...


@runtime_checkable
class OwnershipRegistry(Protocol):
    """Non-fungible custody registry for tickets."""

    def mint(self, owner: str, ticket_id: int, metadata: dict[str, Any]) -> None:
        ...

    def transfer(self, ticket_id: int, source: str, dest: str) -> None:
        """Move custody or raise NotOwner if source does not hold the ticket."""
        ...

    def owner_of(self, ticket_id: int) -> str:
        ...


@runtime_checkable
class Clock(Protocol):
    """Monotonically non-decreasing time source (seconds)."""

    def now(self) -> int:
        ...

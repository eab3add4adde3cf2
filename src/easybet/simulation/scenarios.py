"""Scripted wagering sessions against in-memory collaborators."""

from __future__ import annotations

from typing import Callable

from easybet.adapters.clock import ManualClock
from easybet.adapters.token import InMemoryToken
from easybet.exchange import EasyBet

HOUR = 3600
FAUCET_AMOUNT = 1000


def fund(token: InMemoryToken, engine: EasyBet, players: list[str], amount: int = FAUCET_AMOUNT) -> None:
    """Give each player a balance and an unlimited-enough allowance to the escrow custodian."""
    for p in players:
        token.mint(p, amount)
        token.approve(p, engine.escrow_account, amount)


def full_payout(engine: EasyBet, token: InMemoryToken, clock: ManualClock) -> int:
    """Pool covers every claim: the winner is paid stake * odds."""
    fund(token, engine, ["player1", "player2"])
    aid = engine.create_activity("organizer", "Final", ["A", "B"], [150, 200], HOUR)
    engine.buy_ticket("player1", aid, 0, 100)
    engine.buy_ticket("player2", aid, 1, 200)
    clock.advance(HOUR + 1)
    engine.settle_activity("organizer", aid, 0)
    return aid


def proportional(engine: EasyBet, token: InMemoryToken, clock: ManualClock) -> int:
    """Claims exceed the pool: winners share it pro rata."""
    fund(token, engine, ["player1", "player2", "player3"])
    aid = engine.create_activity("organizer", "Derby", ["A", "B"], [300, 150], HOUR)
    engine.buy_ticket("player1", aid, 0, 100)
    engine.buy_ticket("player2", aid, 0, 100)
    engine.buy_ticket("player3", aid, 1, 100)
    clock.advance(HOUR + 1)
    engine.settle_activity("organizer", aid, 0)
    return aid


def resale(engine: EasyBet, token: InMemoryToken, clock: ManualClock) -> int:
    """A winning ticket changes hands before settlement; the new holder is paid."""
    fund(token, engine, ["player1", "player2", "player3"])
    aid = engine.create_activity("organizer", "Cup", ["A", "B"], [150, 200], HOUR)
    tid = engine.buy_ticket("player1", aid, 0, 100)
    engine.buy_ticket("player3", aid, 1, 200)
    order_id = engine.create_order("player1", tid, 120)
    engine.fill_order("player2", order_id)
    clock.advance(HOUR + 1)
    engine.settle_activity("organizer", aid, 0)
    return aid


SCENARIOS: dict[str, Callable[[EasyBet, InMemoryToken, ManualClock], int]] = {
    "full_payout": full_payout,
    "proportional": proportional,
    "resale": resale,
}

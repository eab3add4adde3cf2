"""Shared fixtures: in-memory collaborators and a wired engine."""

import pytest
import structlog

from easybet.adapters.clock import ManualClock
from easybet.adapters.registry import InMemoryTicketRegistry
from easybet.adapters.token import InMemoryToken
from easybet.events import EventBus
from easybet.exchange import EasyBet
from easybet.simulation.scenarios import fund as fund_players

START = 1_700_000_000
HOUR = 3600
ESCROW = "escrow"


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def token():
    return InMemoryToken()


@pytest.fixture
def registry():
    return InMemoryTicketRegistry()


@pytest.fixture
def engine(token, registry, clock):
    return EasyBet(token, registry, clock, escrow_account=ESCROW, events=EventBus(keep_history=True))


@pytest.fixture
def fund(token, engine):
    """fund("player1", "player2", amount=1000) - balance plus allowance to the escrow custodian."""

    def _fund(*players, amount=1000):
        fund_players(token, engine, list(players), amount)

    return _fund


@pytest.fixture
def two_way(engine, fund):
    """Activity 0: choices A/B at odds 150/200; player1 staked 100 on A, player2 200 on B."""
    fund("player1", "player2", "player3")
    aid = engine.create_activity("organizer", "World Cup Final", ["A", "B"], [150, 200], HOUR)
    engine.buy_ticket("player1", aid, 0, 100)
    engine.buy_ticket("player2", aid, 1, 200)
    return aid

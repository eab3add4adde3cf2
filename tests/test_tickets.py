"""Ticket ledger: escrow-then-mint, locked odds, all-or-nothing purchase."""

import pytest
from pydantic import ValidationError

from easybet.adapters.registry import InMemoryTicketRegistry
from easybet.errors import (
    ActivityNotFound,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidChoice,
    InvalidStake,
    TicketNotFound,
)
from easybet.events import EventBus
from easybet.exchange import EasyBet

from conftest import ESCROW, HOUR


def test_buy_ticket_any_amount(engine, fund, token):
    fund("player1")
    aid = engine.create_activity("organizer", "Match", ["Team A", "Team B"], [150, 200], HOUR)
    tid = engine.buy_ticket("player1", aid, 0, 100)

    ticket = engine.get_ticket(tid)
    assert ticket.activity_id == aid
    assert ticket.choice == 0
    assert ticket.stake == 100
    assert ticket.locked_odds == 150
    assert ticket.claim == 150
    assert engine.owner_of(tid) == "player1"
    assert token.balance_of("player1") == 900
    assert token.balance_of(ESCROW) == 100
    assert engine.escrow.held(aid) == 100


def test_multiple_players_different_amounts(engine, fund):
    fund("player1", "player2", "player3")
    aid = engine.create_activity("organizer", "Match", ["Team A", "Team B"], [150, 200], HOUR)
    engine.buy_ticket("player1", aid, 0, 100)
    engine.buy_ticket("player2", aid, 1, 200)
    engine.buy_ticket("player3", aid, 0, 50)

    assert engine.get_activity(aid).total_pool == 350
    assert engine.get_choice_count(aid, 0) == 2
    assert engine.get_choice_count(aid, 1) == 1
    assert engine.get_tickets(aid) == [0, 1, 2]
    assert engine.get_tickets(aid, 0) == [0, 2]


def test_purchase_event(engine, two_way):
    events = engine.events.of_type("ticket_purchased")
    assert [(e.ticket_id, e.buyer, e.choice, e.stake, e.locked_odds) for e in events] == [
        (0, "player1", 0, 100, 150),
        (1, "player2", 1, 200, 200),
    ]


def test_ticket_metadata_is_frozen(engine, two_way):
    ticket = engine.get_ticket(0)
    with pytest.raises(ValidationError):
        ticket.locked_odds = 900
    assert engine.get_ticket(0).locked_odds == 150


def test_missing_allowance_leaves_no_trace(engine, token, registry):
    token.mint("player1", 1000)
    aid = engine.create_activity("organizer", "Match", ["A", "B"], [150, 200], HOUR)
    with pytest.raises(InsufficientAllowance):
        engine.buy_ticket("player1", aid, 0, 100)
    assert engine.get_activity(aid).total_pool == 0
    assert engine.tickets.ticket_count() == 0
    assert token.balance_of("player1") == 1000
    with pytest.raises(TicketNotFound):
        registry.owner_of(0)


def test_insufficient_balance(engine, token):
    token.approve("player1", ESCROW, 500)
    token.mint("player1", 50)
    aid = engine.create_activity("organizer", "Match", ["A", "B"], [150, 200], HOUR)
    with pytest.raises(InsufficientBalance):
        engine.buy_ticket("player1", aid, 0, 100)
    assert engine.get_activity(aid).total_pool == 0
    assert token.allowance("player1", ESCROW) == 500


@pytest.mark.parametrize("stake", [0, -5])
def test_non_positive_stake_rejected(engine, fund, token, stake):
    fund("player1")
    aid = engine.create_activity("organizer", "Match", ["A", "B"], [150, 200], HOUR)
    with pytest.raises(InvalidStake):
        engine.buy_ticket("player1", aid, 0, stake)
    assert token.balance_of("player1") == 1000


def test_invalid_choice_rejected_before_funds_move(engine, fund, token):
    fund("player1")
    aid = engine.create_activity("organizer", "Match", ["A", "B"], [150, 200], HOUR)
    with pytest.raises(InvalidChoice):
        engine.buy_ticket("player1", aid, 2, 100)
    assert token.balance_of("player1") == 1000


def test_unknown_activity(engine, fund):
    fund("player1")
    with pytest.raises(ActivityNotFound):
        engine.buy_ticket("player1", 3, 0, 100)


def test_unknown_ticket(engine):
    with pytest.raises(TicketNotFound):
        engine.get_ticket(0)


class _RejectingRegistry(InMemoryTicketRegistry):
    def mint(self, owner, ticket_id, metadata):
        raise RuntimeError("registry unavailable")


def test_failed_mint_refunds_stake(token, clock):
    engine = EasyBet(
        token, _RejectingRegistry(), clock, escrow_account=ESCROW, events=EventBus(keep_history=True)
    )
    token.mint("player1", 1000)
    token.approve("player1", ESCROW, 1000)
    aid = engine.create_activity("organizer", "Match", ["A", "B"], [150, 200], HOUR)

    with pytest.raises(RuntimeError):
        engine.buy_ticket("player1", aid, 0, 100)

    assert token.balance_of("player1") == 1000
    assert token.balance_of(ESCROW) == 0
    assert engine.escrow.held(aid) == 0
    assert engine.get_activity(aid).total_pool == 0
    assert engine.tickets.ticket_count() == 0
    assert engine.events.of_type("ticket_purchased") == []


def test_odds_are_locked_per_ticket(engine, fund):
    fund("player1")
    aid = engine.create_activity("organizer", "Match", ["A", "B", "C"], [110, 250, 900], HOUR)
    ids = [engine.buy_ticket("player1", aid, c, 10) for c in (2, 0, 1)]
    assert [engine.get_ticket(t).locked_odds for t in ids] == [900, 110, 250]

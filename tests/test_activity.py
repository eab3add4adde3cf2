"""Activity registry: configuration checks, lifecycle state and pool accounting."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from easybet.adapters.clock import ManualClock
from easybet.adapters.registry import InMemoryTicketRegistry
from easybet.adapters.token import InMemoryToken
from easybet.errors import (
    ActivityExpired,
    ActivityNotFound,
    AlreadySettled,
    InvalidChoice,
    InvalidConfiguration,
    InvalidDuration,
    InvalidInput,
)
from easybet.exchange import EasyBet
from easybet.models.activity import ActivityState

from conftest import HOUR, START


def test_create_activity_with_odds(engine):
    aid = engine.create_activity("organizer", "World Cup Final", ["Argentina", "France"], [150, 200], HOUR)
    assert aid == 0
    activity = engine.get_activity(aid)
    assert activity.creator == "organizer"
    assert activity.choices == ["Argentina", "France"]
    assert activity.odds == [150, 200]
    assert activity.total_pool == 0
    assert activity.choice_amounts == [0, 0]
    assert activity.deadline == START + HOUR
    assert not activity.settled
    assert activity.winning_choice is None


def test_ids_are_sequential(engine):
    assert engine.get_activity_count() == 0
    for i in range(3):
        assert engine.create_activity("organizer", f"a{i}", ["A", "B"], [100, 100], HOUR) == i
    assert engine.get_activity_count() == 3


def test_odds_length_mismatch_rejected(engine):
    with pytest.raises(InvalidConfiguration, match="mismatch"):
        engine.create_activity("organizer", "x", ["A", "B"], [150], HOUR)


def test_single_choice_rejected(engine):
    with pytest.raises(InvalidConfiguration):
        engine.create_activity("organizer", "x", ["A"], [150], HOUR)


def test_odds_boundary(engine):
    engine.create_activity("organizer", "even", ["A", "B"], [100, 100], HOUR)
    with pytest.raises(InvalidConfiguration):
        engine.create_activity("organizer", "low", ["A", "B"], [99, 150], HOUR)
    assert engine.get_activity_count() == 1


@pytest.mark.parametrize("duration", [0, -1])
def test_non_positive_duration_rejected(engine, duration):
    with pytest.raises(InvalidDuration):
        engine.create_activity("organizer", "x", ["A", "B"], [150, 200], duration)
    assert engine.get_activity_count() == 0


def test_invalid_input_is_one_kind(engine):
    with pytest.raises(InvalidInput):
        engine.create_activity("organizer", "x", ["A", "B"], [150, 200], 0)


def test_creation_event_carries_configuration(engine):
    engine.create_activity("organizer", "x", ["A", "B", "Draw"], [150, 200, 300], HOUR)
    (event,) = engine.events.of_type("activity_created")
    assert event.choices == ["A", "B", "Draw"]
    assert event.odds == [150, 200, 300]
    assert event.deadline == START + HOUR
    assert event.creator == "organizer"


def test_scenario_a_pool_and_locked_odds(engine, two_way):
    activity = engine.get_activity(two_way)
    assert activity.total_pool == 300
    assert activity.choice_amounts == [100, 200]
    assert engine.get_choice_amount(two_way, 0) == 100
    assert engine.get_choice_amount(two_way, 1) == 200
    assert engine.get_ticket(0).locked_odds == 150
    assert engine.get_ticket(1).locked_odds == 200


def test_state_transitions(engine, two_way, clock):
    assert engine.get_activity_state(two_way) is ActivityState.OPEN
    clock.advance(HOUR - 1)
    assert engine.get_activity_state(two_way) is ActivityState.OPEN
    clock.advance(1)
    assert engine.get_activity_state(two_way) is ActivityState.EXPIRED
    engine.settle_activity("organizer", two_way, 0)
    assert engine.get_activity_state(two_way) is ActivityState.SETTLED


def test_stake_rejected_at_deadline(engine, two_way, clock):
    clock.advance(HOUR)
    with pytest.raises(ActivityExpired):
        engine.buy_ticket("player3", two_way, 0, 50)
    assert engine.get_activity(two_way).total_pool == 300


def test_stake_rejected_after_settlement(engine, two_way, clock):
    clock.advance(HOUR)
    engine.settle_activity("organizer", two_way, 0)
    with pytest.raises(AlreadySettled):
        engine.activities.record_stake(two_way, 0, 10)


def test_reads_of_missing_activity(engine):
    with pytest.raises(ActivityNotFound):
        engine.get_activity(0)
    with pytest.raises(ActivityNotFound):
        engine.get_choice_amount(5, 0)


def test_choice_amount_out_of_range(engine, two_way):
    with pytest.raises(InvalidChoice):
        engine.get_choice_amount(two_way, 2)


def test_get_activity_returns_snapshot(engine, two_way):
    snapshot = engine.get_activity(two_way)
    snapshot.choice_amounts[0] = 10_000
    assert engine.get_activity(two_way).choice_amounts[0] == 100


@settings(max_examples=50, deadline=None)
@given(st.lists(st.tuples(st.integers(0, 2), st.integers(1, 500)), max_size=30))
def test_pool_matches_choice_amounts_after_every_stake(stakes):
    token = InMemoryToken()
    clock = ManualClock(START)
    engine = EasyBet(token, InMemoryTicketRegistry(), clock, escrow_account="escrow")
    token.mint("bettor", 10**9)
    token.approve("bettor", "escrow", 10**9)
    aid = engine.create_activity("organizer", "x", ["A", "B", "C"], [120, 250, 400], HOUR)
    for choice, amount in stakes:
        engine.buy_ticket("bettor", aid, choice, amount)
        activity = engine.get_activity(aid)
        assert sum(activity.choice_amounts) == activity.total_pool
    assert engine.escrow.held(aid) == engine.get_activity(aid).total_pool
    assert token.balance_of("escrow") == sum(a for _, a in stakes)

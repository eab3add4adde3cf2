"""Event bus: delivery order, handler isolation, optional history."""

from easybet.adapters import InMemoryTicketRegistry, InMemoryToken, ManualClock
from easybet.events import EventBus
from easybet.exchange import EasyBet
from easybet.models.events import ActivityCreated

from conftest import HOUR, START


def _created(activity_id=0):
    return ActivityCreated(
        timestamp=START,
        activity_id=activity_id,
        creator="organizer",
        name="x",
        choices=["A", "B"],
        odds=[150, 200],
        deadline=START + HOUR,
    )


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    seen = []
    bus.subscribe(lambda e: seen.append(("first", e.activity_id)))
    bus.subscribe(lambda e: seen.append(("second", e.activity_id)))
    bus.publish(_created(3))
    assert seen == [("first", 3), ("second", 3)]


def test_failing_handler_does_not_fail_committed_stake(engine, fund):
    received = []

    def broken(event):
        raise RuntimeError("indexer down")

    engine.events.subscribe(broken)
    engine.events.subscribe(received.append)
    fund("player1")
    aid = engine.create_activity("organizer", "x", ["A", "B"], [150, 200], HOUR)

    tid = engine.buy_ticket("player1", aid, 0, 100)

    assert tid == 0
    activity = engine.get_activity(aid)
    assert activity.total_pool == 100
    assert activity.choice_amounts == [100, 0]
    assert [e.event_type for e in received] == ["activity_created", "ticket_purchased"]


def test_history_is_off_by_default():
    bus = EventBus()
    bus.publish(_created())
    assert bus.history == []
    assert bus.of_type("activity_created") == []

    kept = EventBus(keep_history=True)
    kept.publish(_created())
    assert [e.event_type for e in kept.history] == ["activity_created"]


def test_engine_bus_keeps_no_history_unless_asked():
    token = InMemoryToken()
    engine = EasyBet(token, InMemoryTicketRegistry(), ManualClock(START))
    engine.create_activity("organizer", "x", ["A", "B"], [150, 200], HOUR)
    assert engine.events.history == []

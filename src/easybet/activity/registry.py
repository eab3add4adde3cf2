"""Activity registry - owns activity records, lifecycle state and per-outcome stake totals."""

from __future__ import annotations

from typing import Sequence

import structlog

from easybet.errors import (
    ActivityExpired,
    ActivityNotFound,
    AlreadySettled,
    InvalidChoice,
    InvalidConfiguration,
    InvalidDuration,
    InvalidStake,
    NotYetExpired,
)
from easybet.events import EventBus
from easybet.interfaces import Clock
from easybet.models.activity import ODDS_SCALE, Activity, ActivityState
from easybet.models.events import ActivityCreated

log = structlog.get_logger(__name__)

MIN_CHOICES = 2


class ActivityRegistry:
    """Activities stored in an append-only list; the activity id is its index."""

    def __init__(self, clock: Clock, events: EventBus | None = None) -> None:
        self.clock = clock
        self.events = events or EventBus()
        self._activities: list[Activity] = []

    def create_activity(
        self,
        creator: str,
        name: str,
        choices: Sequence[str],
        odds: Sequence[int],
        duration: int,
    ) -> Activity:
        """Validate the configuration and open a new activity. Returns a snapshot."""
        if len(choices) != len(odds):
            raise InvalidConfiguration(
                f"choices and odds length mismatch ({len(choices)} != {len(odds)})"
            )
        if len(choices) < MIN_CHOICES:
            raise InvalidConfiguration(f"an activity needs at least {MIN_CHOICES} choices")
        for i, o in enumerate(odds):
            if o < ODDS_SCALE:
                raise InvalidConfiguration(
                    f"odds[{i}]={o} below {ODDS_SCALE} (1.0x)"
                )
        if duration <= 0:
            raise InvalidDuration(f"duration must be positive, got {duration}")

        now = self.clock.now()
        activity = Activity(
            id=len(self._activities),
            creator=creator,
            name=name,
            choices=list(choices),
            odds=list(odds),
            deadline=now + duration,
            choice_amounts=[0] * len(choices),
        )
        self._activities.append(activity)
        log.info(
            "activity_created",
            activity_id=activity.id,
            creator=creator,
            choices=len(choices),
            deadline=activity.deadline,
        )
        self.events.publish(
            ActivityCreated(
                timestamp=now,
                activity_id=activity.id,
                creator=creator,
                name=name,
                choices=list(activity.choices),
                odds=list(activity.odds),
                deadline=activity.deadline,
            )
        )
        return activity.model_copy(deep=True)

    def state_of(self, activity_id: int, now: int | None = None) -> ActivityState:
        activity = self._get(activity_id)
        return activity.state_at(self.clock.now() if now is None else now)

    def require_open(self, activity_id: int, choice: int, now: int | None = None) -> Activity:
        """Single dispatch check for stake acceptance. Returns the live record."""
        activity = self._get(activity_id)
        state = activity.state_at(self.clock.now() if now is None else now)
        if state is ActivityState.SETTLED:
            raise AlreadySettled(f"activity {activity_id} is settled")
        if state is ActivityState.EXPIRED:
            raise ActivityExpired(f"activity {activity_id} closed at {activity.deadline}")
        if not activity.has_choice(choice):
            raise InvalidChoice(f"activity {activity_id} has no choice {choice}")
        return activity

    def require_settleable(self, activity_id: int, choice: int, now: int | None = None) -> Activity:
        activity = self._get(activity_id)
        state = activity.state_at(self.clock.now() if now is None else now)
        if state is ActivityState.SETTLED:
            raise AlreadySettled(f"activity {activity_id} is already settled")
        if state is ActivityState.OPEN:
            raise NotYetExpired(f"activity {activity_id} closes at {activity.deadline}")
        if not activity.has_choice(choice):
            raise InvalidChoice(f"activity {activity_id} has no choice {choice}")
        return activity

    def record_stake(self, activity_id: int, choice: int, amount: int, now: int | None = None) -> None:
        """Add an escrowed stake to the pool and its outcome total."""
        activity = self.require_open(activity_id, choice, now)
        if amount <= 0:
            raise InvalidStake(f"stake must be positive, got {amount}")
        # Both totals move together; nothing runs between these two lines
        activity.choice_amounts[choice] += amount
        activity.total_pool += amount

    def mark_settled(self, activity_id: int, winning_choice: int, distributed: int) -> None:
        """Terminal transition. Reduces the pool by what was paid out."""
        activity = self._get(activity_id)
        if activity.settled:
            raise AlreadySettled(f"activity {activity_id} is already settled")
        activity.total_pool -= distributed
        activity.winning_choice = winning_choice
        activity.settled = True

    def get_activity(self, activity_id: int) -> Activity:
        return self._get(activity_id).model_copy(deep=True)

    def get_choice_amount(self, activity_id: int, choice: int) -> int:
        activity = self._get(activity_id)
        if not activity.has_choice(choice):
            raise InvalidChoice(f"activity {activity_id} has no choice {choice}")
        return activity.choice_amounts[choice]

    def activity_count(self) -> int:
        return len(self._activities)

    def activities(self) -> list[Activity]:
        return [a.model_copy(deep=True) for a in self._activities]

    def _get(self, activity_id: int) -> Activity:
        if not 0 <= activity_id < len(self._activities):
            raise ActivityNotFound(activity_id)
        return self._activities[activity_id]

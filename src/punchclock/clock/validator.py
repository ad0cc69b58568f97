from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_utc, to_utc
from ..core.constants import (
    DUPLICATE_PUNCH_WINDOW_SECONDS,
    MAX_BACKDATE_DAYS,
    MAX_DESCRIPTION_LENGTH,
    MAX_FUTURE_SKEW_MINUTES,
)
from ..core.enums import PunchType
from ..core.exceptions import ValidationError
from .model import ClockEvent, NewClockEvent
from .repository import ClockEventRepository


@dataclass(frozen=True)
class TransitionRule:
    allowed: Callable[[Optional[PunchType]], bool]
    message: str


# Keyed by the new punch type; receives the type of the day's last punch (None if no punch yet).
TRANSITIONS: dict[PunchType, TransitionRule] = {
    PunchType.CLOCK_IN: TransitionRule(
        allowed=lambda last: last != PunchType.CLOCK_IN,
        message="Cannot clock in: already clocked in",
    ),
    PunchType.CLOCK_OUT: TransitionRule(
        allowed=lambda last: last == PunchType.CLOCK_IN,
        message="Cannot clock out: must clock in first",
    ),
    PunchType.BREAK_START: TransitionRule(
        allowed=lambda last: last == PunchType.CLOCK_IN,
        message="Cannot start break: must be clocked in to start break",
    ),
    PunchType.BREAK_END: TransitionRule(
        allowed=lambda last: last == PunchType.BREAK_START,
        message="Cannot end break: must start break first",
    ),
}

DUPLICATE_MESSAGE = "Duplicate punch: another punch exists within 60 seconds of this one"


def check_transition(day_events: Sequence[ClockEvent], new_type: PunchType) -> None:
    """Raise unless new_type may follow the last punch of the (ascending) day sequence."""

    last_type = day_events[-1].type if day_events else None
    rule = TRANSITIONS[new_type]
    if not rule.allowed(last_type):
        raise ValidationError(rule.message)


def check_duplicate(events: Sequence[ClockEvent], timestamp: datetime) -> None:
    window = timedelta(seconds=DUPLICATE_PUNCH_WINDOW_SECONDS)
    for e in events:
        if abs(e.timestamp - timestamp) < window:
            raise ValidationError(DUPLICATE_MESSAGE)


def check_client_timestamp(timestamp: datetime, *, now: datetime) -> None:
    earliest = now - timedelta(days=MAX_BACKDATE_DAYS)
    latest = now + timedelta(minutes=MAX_FUTURE_SKEW_MINUTES)
    if timestamp < earliest or timestamp > latest:
        raise ValidationError(
            f"Punch timestamp must be between {MAX_BACKDATE_DAYS} days ago and "
            f"{MAX_FUTURE_SKEW_MINUTES} minutes from now"
        )


def check_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    return description.strip() or None


class PunchValidator:
    """Decide whether a new punch is legal before it is persisted.

    Reads only. Callers hold the user's punch lock around validate() + create().
    """

    def __init__(self, events: ClockEventRepository):
        self._events = events

    def validate(
        self,
        *,
        user_id: int,
        type: PunchType,
        timestamp: Optional[datetime] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> NewClockEvent:
        now = to_utc(now or now_utc())
        description = check_description(description)

        if timestamp is None:
            ts = now
        else:
            ts = to_utc(timestamp)
            check_client_timestamp(ts, now=now)

        # Sequence and duplicate checks both see only the punch's own UTC day.
        day_start, day_end = day_bounds(ts.date())
        day_events = self._events.list_between(user_id, start=day_start, end=day_end)
        check_transition(day_events, type)
        check_duplicate(day_events, ts)

        return NewClockEvent(user_id=int(user_id), timestamp=ts, type=type, description=description)

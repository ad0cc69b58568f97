"""Worked-time aggregation over a user's punches.

Everything here is a pure function of an event sequence. Day summaries are
recomputed on every query and never stored.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from itertools import groupby
from typing import Iterable, Optional, Sequence

from ..core.enums import PunchType
from .model import ClockEvent, DaySummary

WORK_RESUMES = frozenset({PunchType.CLOCK_IN, PunchType.BREAK_END})
WORK_PAUSES = frozenset({PunchType.CLOCK_OUT, PunchType.BREAK_START})


def _chronological(events: Iterable[ClockEvent]) -> list[ClockEvent]:
    return sorted(events, key=lambda e: (e.timestamp, e.event_id))


def total_worked_time(events: Sequence[ClockEvent]) -> Optional[timedelta]:
    """Sum of closed work segments; None when the day has fewer than two punches.

    A segment opens on ClockIn/BreakEnd and closes on ClockOut/BreakStart.
    A segment still open at the end of the sequence adds nothing.
    """

    if len(events) < 2:
        return None

    total = timedelta()
    segment_start: Optional[datetime] = None

    for e in _chronological(events):
        if e.type in WORK_RESUMES:
            segment_start = e.timestamp
        elif e.type in WORK_PAUSES and segment_start is not None:
            total += e.timestamp - segment_start
            segment_start = None

    return total


def is_day_complete(events: Sequence[ClockEvent]) -> bool:
    if not events:
        return False
    return _chronological(events)[-1].type == PunchType.CLOCK_OUT


def summarize_day(day: date, events: Sequence[ClockEvent]) -> DaySummary:
    ordered = _chronological(events)
    return DaySummary(
        date=day,
        records=ordered,
        total_worked_time=total_worked_time(ordered),
        is_complete=is_day_complete(ordered),
    )


def summarize_by_day(events: Iterable[ClockEvent]) -> list[DaySummary]:
    """Group by UTC calendar date; newest day first."""

    ordered = _chronological(events)
    summaries = [summarize_day(day, list(group)) for day, group in groupby(ordered, key=lambda e: e.day)]
    summaries.sort(key=lambda s: s.date, reverse=True)
    return summaries

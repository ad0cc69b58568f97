from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import day_bounds, today_utc
from ..common.pagination import Page, offset_for
from ..core.enums import PunchType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .aggregator import summarize_by_day
from .filters import summary_range, validate_filter
from .locks import InProcessUserLocks
from .model import ClockEvent, DaySummary, PunchFilter
from .repository import ClockEventRepository, UserLocks
from .validator import PunchValidator

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Time record not found"


class ClockService:
    """Use cases around punches: create, read, list, summarize, delete.

    Every operation is scoped to the caller's user id. Expected failures raise
    ValidationError / NotFoundError; the HTTP layer turns them into envelopes.
    """

    def __init__(
        self,
        events: ClockEventRepository,
        users: UserRepository,
        *,
        locks: Optional[UserLocks] = None,
        validator: Optional[PunchValidator] = None,
    ):
        self._events = events
        self._users = users
        self._locks = locks or InProcessUserLocks()
        self._validator = validator or PunchValidator(events)

    def create_punch(
        self,
        user_id: int,
        *,
        type: PunchType,
        timestamp: Optional[datetime] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ClockEvent:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise ValidationError("User not found or inactive")

        with self._locks.hold(int(user_id)):
            new_event = self._validator.validate(
                user_id=int(user_id),
                type=type,
                timestamp=timestamp,
                description=description,
                now=now,
            )
            event = self._events.create(new_event)

        logger.info(
            "Punch created: user_id=%s type=%s timestamp=%s id=%s",
            user_id, event.type.value, event.timestamp.isoformat(), event.event_id,
        )
        return event

    def get_punch(self, event_id: int, user_id: int) -> ClockEvent:
        event = self._events.get_by_id(int(event_id), int(user_id))
        if not event:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return event

    def list_punches(self, user_id: int, f: PunchFilter, *, now: Optional[datetime] = None) -> Page[ClockEvent]:
        validate_filter(f, today=today_utc(now))

        query = dict(start_date=f.start_date, end_date=f.end_date, type=f.type)
        total = self._events.count_by_user(int(user_id), **query)
        items = self._events.list_by_user(
            int(user_id),
            **query,
            offset=offset_for(f.page, f.page_size),
            limit=f.page_size,
        )
        return Page(items=list(items), total_count=total, page=f.page, page_size=f.page_size)

    def list_summary(self, user_id: int, f: PunchFilter, *, now: Optional[datetime] = None) -> Page[DaySummary]:
        today = today_utc(now)
        validate_filter(f, today=today)

        start, end = summary_range(f, today=today)
        events = self._events.list_for_range(int(user_id), start_date=start, end_date=end)
        # Pagination applies to day groups, not to raw punches.
        return Page.slice(summarize_by_day(events), f.page, f.page_size)

    def list_today(self, user_id: int, *, now: Optional[datetime] = None) -> list[ClockEvent]:
        start, end = day_bounds(today_utc(now))
        return list(self._events.list_between(int(user_id), start=start, end=end))

    def delete_punch(self, event_id: int, user_id: int) -> bool:
        if not self._events.delete(int(event_id), int(user_id)):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Punch deleted: user_id=%s id=%s", user_id, event_id)
        return True

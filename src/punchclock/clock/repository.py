from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import ClockEvent, NewClockEvent


class ClockEventRepository(Protocol):
    """Storage contract for punches.

    Every read is scoped by user_id. Ordering is part of the contract:
    list_by_user is newest-first, the window/range reads are oldest-first.
    """

    def create(self, event: NewClockEvent) -> ClockEvent:
        raise NotImplementedError

    def get_by_id(self, event_id: int, user_id: int) -> Optional[ClockEvent]:
        raise NotImplementedError

    def list_by_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[PunchType] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[ClockEvent]:
        raise NotImplementedError

    def count_by_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[PunchType] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[ClockEvent]:
        """All punches whose UTC date lies in [start_date, end_date], ascending."""

        raise NotImplementedError

    def list_between(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        """Punches with start <= timestamp < end, ascending."""

        raise NotImplementedError

    def delete(self, event_id: int, user_id: int) -> bool:
        raise NotImplementedError


class UserLocks(Protocol):
    """Mutual exclusion keyed by user id for read-validate-write sequences."""

    def hold(self, user_id: int) -> AbstractContextManager[None]:
        raise NotImplementedError

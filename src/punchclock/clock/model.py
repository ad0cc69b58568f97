from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import format_duration, isoformat_utc
from ..core.enums import PunchType


@dataclass(frozen=True)
class ClockEvent:
    """Domain entity: one punch. Timestamps are aware UTC datetimes."""

    event_id: int
    user_id: int
    timestamp: datetime
    type: PunchType
    description: Optional[str]
    created_at: datetime

    @property
    def day(self) -> date:
        return self.timestamp.date()

    def to_dict(self, *, include_created_at: bool = True) -> dict:
        out = {
            "id": self.event_id,
            "timestamp": isoformat_utc(self.timestamp),
            "type": self.type.value,
            "typeCode": self.type.code,
            "typeDescription": self.type.label,
            "description": self.description,
        }
        if include_created_at:
            out["createdAt"] = isoformat_utc(self.created_at)
        return out


@dataclass(frozen=True)
class NewClockEvent:
    """A validated punch waiting for the store to assign id/created_at."""

    user_id: int
    timestamp: datetime
    type: PunchType
    description: Optional[str] = None


@dataclass(frozen=True)
class DaySummary:
    """Read-model: one UTC day of punches. Derived on demand, never stored."""

    date: date
    records: list[ClockEvent]
    total_worked_time: Optional[timedelta]
    is_complete: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "records": [r.to_dict(include_created_at=False) for r in self.records],
            "totalWorkedTime": format_duration(self.total_worked_time),
            "totalWorkedSeconds": (
                int(self.total_worked_time.total_seconds()) if self.total_worked_time is not None else None
            ),
            "isComplete": self.is_complete,
        }


@dataclass(frozen=True)
class PunchFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[PunchType] = None
    page: int = 1
    page_size: int = 10

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from ..core.exceptions import ValidationError


def now_utc() -> datetime:
    """Current instant as an aware UTC datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def today_utc(now: Optional[datetime] = None) -> date:
    return to_utc(now or now_utc()).date()


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [00:00, next 00:00) UTC window of a calendar day."""
    start = start_of_day(day)
    return start, start + timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or the date part of an ISO date-time) into a date."""
    v = (value or "").strip()
    try:
        if len(v) == 10:
            return datetime.strptime(v, "%Y-%m-%d").date()
        return to_utc(parse_iso_datetime(v)).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    v = (value or "").strip()
    if v.endswith("Z") or v.endswith("z"):
        v = v[:-1] + "+00:00"
    return datetime.fromisoformat(v)


def format_duration(value: Optional[timedelta]) -> Optional[str]:
    """Render a duration as HH:MM:SS (hours may exceed 24)."""
    if value is None:
        return None
    seconds = int(value.total_seconds())
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return to_utc(value).isoformat().replace("+00:00", "Z")

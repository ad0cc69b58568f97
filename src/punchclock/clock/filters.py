from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.pagination import validate_page
from ..common.validators import require_int
from ..core.constants import DEFAULT_PAGE_SIZE, DEFAULT_SUMMARY_DAYS
from ..core.enums import PunchType
from ..core.exceptions import ValidationError
from .model import PunchFilter


def parse_filter(args: Mapping[str, str], *, allow_type: bool = True) -> PunchFilter:
    """Build a PunchFilter from query-string style arguments (camelCase or snake_case keys)."""

    def pick(*keys: str) -> Optional[str]:
        for k in keys:
            v = args.get(k)
            if v is not None and str(v).strip() != "":
                return str(v)
        return None

    start_s = pick("startDate", "start_date", "start")
    end_s = pick("endDate", "end_date", "end")
    type_s = pick("type") if allow_type else None

    punch_type = None
    if type_s is not None:
        try:
            punch_type = PunchType.parse(type_s)
        except ValueError:
            raise ValidationError("Invalid punch type", [f"Unknown punch type: {type_s}"])

    return PunchFilter(
        start_date=parse_iso_date(start_s) if start_s else None,
        end_date=parse_iso_date(end_s) if end_s else None,
        type=punch_type,
        page=require_int(pick("page"), "Page", default=1),
        page_size=require_int(pick("pageSize", "page_size"), "Page size", default=DEFAULT_PAGE_SIZE),
    )


def validate_filter(f: PunchFilter, *, today: date) -> None:
    """Reject bad pagination and date ranges before any store query runs."""

    errors: list[str] = []
    try:
        validate_page(f.page, f.page_size)
    except ValidationError as e:
        errors.extend(e.errors)

    if f.start_date and f.end_date and f.start_date > f.end_date:
        errors.append("Start date must be on or before end date")
    if f.start_date and f.start_date > today:
        errors.append("Start date cannot be in the future")
    if f.end_date and f.end_date > today:
        errors.append("End date cannot be in the future")

    if errors:
        raise ValidationError("Invalid filter parameters", errors)


def summary_range(f: PunchFilter, *, today: date) -> tuple[date, date]:
    """Missing bounds default to the last DEFAULT_SUMMARY_DAYS days (UTC)."""

    start = f.start_date or (today - timedelta(days=DEFAULT_SUMMARY_DAYS))
    end = f.end_date or today
    return start, end

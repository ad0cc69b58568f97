from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import ClockEvent, NewClockEvent
from .repository import ClockEventRepository

_COLUMNS = "record_id, user_id, `timestamp`, `type`, description, created_at"


def _row_to_event(r: dict) -> ClockEvent:
    return ClockEvent(
        event_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        timestamp=from_db_datetime(r["timestamp"]),
        type=PunchType(r["type"]),
        description=r.get("description"),
        created_at=from_db_datetime(r["created_at"]),
    )


def _filter_clauses(
    user_id: int,
    start_date: Optional[date],
    end_date: Optional[date],
    type: Optional[PunchType],
) -> tuple[str, list[object]]:
    clauses = ["user_id=%s"]
    params: list[object] = [int(user_id)]

    if start_date is not None:
        clauses.append("DATE(`timestamp`) >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("DATE(`timestamp`) <= %s")
        params.append(end_date)
    if type is not None:
        clauses.append("`type`=%s")
        params.append(type.value)

    return " AND ".join(clauses), params


class MySQLClockEventRepository(ClockEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, event: NewClockEvent) -> ClockEvent:
        created_at = datetime.now(timezone.utc).replace(microsecond=0)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(user_id, `timestamp`, `type`, description, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(event.user_id),
                    to_db_datetime(event.timestamp),
                    event.type.value,
                    event.description,
                    to_db_datetime(created_at),
                ),
            )
            event_id = int(cur.lastrowid)

        return ClockEvent(
            event_id=event_id,
            user_id=int(event.user_id),
            timestamp=event.timestamp,
            type=event.type,
            description=event.description,
            created_at=created_at,
        )

    def get_by_id(self, event_id: int, user_id: int) -> Optional[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_records WHERE record_id=%s AND user_id=%s",
                (int(event_id), int(user_id)),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

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
        where, params = _filter_clauses(user_id, start_date, end_date, type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE {where}
                ORDER BY `timestamp` DESC, record_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def count_by_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[PunchType] = None,
    ) -> int:
        where, params = _filter_clauses(user_id, start_date, end_date, type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM time_records WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_range(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[ClockEvent]:
        where, params = _filter_clauses(user_id, start_date, end_date, None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_records WHERE {where} ORDER BY `timestamp` ASC, record_id ASC",
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_between(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s AND `timestamp` >= %s AND `timestamp` < %s
                ORDER BY `timestamp` ASC, record_id ASC
                """,
                (int(user_id), to_db_datetime(start), to_db_datetime(end)),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def delete(self, event_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_records WHERE record_id=%s AND user_id=%s",
                (int(event_id), int(user_id)),
            )
            return cur.rowcount > 0

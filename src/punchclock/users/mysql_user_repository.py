from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, employee_code, password_hash, role, is_active, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_code=row.get("employee_code"),
        created_at=from_db_datetime(row["created_at"]),
        is_active=bool(row.get("is_active", True)),
    )


def _search_clause(search: Optional[str]) -> tuple[str, tuple]:
    term = (search or "").strip()
    if not term:
        return "", ()
    like = f"%{term}%"
    return " WHERE full_name LIKE %s OR email LIKE %s OR employee_code LIKE %s", (like, like, like)


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email.lower(),))

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        return self._get_one("employee_code=%s", (employee_code,))

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        employee_code: Optional[str] = None,
    ) -> int:
        created_at = to_db_datetime(datetime.now(timezone.utc))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, email, employee_code, password_hash, role, is_active, created_at)
                VALUES(%s,%s,%s,%s,%s,1,%s)
                """,
                (full_name, email.lower(), employee_code, password_hash, role.value, created_at),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, full_name: str, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET full_name=%s, email=%s WHERE user_id=%s",
                (full_name, email.lower(), int(user_id)),
            )
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def list_users(self, *, search: Optional[str] = None, offset: int = 0, limit: int = 10) -> Sequence[User]:
        where, params = _search_clause(search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users{where} ORDER BY full_name ASC, user_id ASC LIMIT %s OFFSET %s",
                params + (int(limit), int(offset)),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def count_users(self, *, search: Optional[str] = None) -> int:
        where, params = _search_clause(search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM users{where}", params)
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def ping(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1")
            cur.fetchall()

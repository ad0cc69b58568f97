from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Split on ';' outside of quoted strings.
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    """Apply schema.sql. Statements are CREATE ... IF NOT EXISTS, so this is idempotent."""

    ensure_database_exists(conn_factory)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to database %s", conn_factory.database)


def ensure_demo_users(conn_factory: DatabaseConnection, *, admin_email: str, admin_password: str) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        now = datetime.now(timezone.utc).replace(tzinfo=None)

        def upsert_user(full_name: str, email: str, password: str, role: Role, employee_code: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, employee_code=%s, is_active=1
                    WHERE email=%s
                    """,
                    (full_name, password_hash, role.value, employee_code, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, email, employee_code, password_hash, role, is_active, created_at)
                    VALUES (%s, %s, %s, %s, %s, 1, %s)
                    """,
                    (full_name, email, employee_code, password_hash, role.value, now),
                )

        upsert_user("Admin Demo", admin_email.lower(), admin_password, Role.ADMIN, "ADM001")
        upsert_user("Employee Demo", "employee@punchclock.local", "Employee123", Role.EMPLOYEE, "EMP001")

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ensured (admin=%s)", admin_email)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

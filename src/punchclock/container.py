from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clock.locks import MySQLUserLocks
from .clock.mysql_clock_repository import MySQLClockEventRepository
from .clock.repository import ClockEventRepository, UserLocks
from .clock.service import ClockService
from .core.constants import (
    DEFAULT_PUNCH_LOCK_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_EXPIRATION_MINUTES,
    DEFAULT_TOKEN_REFRESH_MAX_AGE_DAYS,
)
from .database.connection import DBConfig, DatabaseConnection
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    clock_repo: ClockEventRepository
    locks: UserLocks
    tokens: TokenService

    auth_service: AuthService
    user_service: UserService
    clock_service: ClockService


def wire(
    *,
    users_repo: UserRepository,
    clock_repo: ClockEventRepository,
    locks: UserLocks,
    tokens: TokenService,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over already-built repositories (MySQL or in-memory)."""

    return Container(
        conn=conn,
        users_repo=users_repo,
        clock_repo=clock_repo,
        locks=locks,
        tokens=tokens,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        clock_service=ClockService(clock_repo, users_repo, locks=locks),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_expiration_minutes: int = DEFAULT_TOKEN_EXPIRATION_MINUTES,
    token_refresh_max_age_days: int = DEFAULT_TOKEN_REFRESH_MAX_AGE_DAYS,
    punch_lock_timeout_seconds: int = DEFAULT_PUNCH_LOCK_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        clock_repo=MySQLClockEventRepository(conn),
        locks=MySQLUserLocks(conn, timeout_seconds=punch_lock_timeout_seconds),
        tokens=TokenService(
            secret_key,
            expiration_minutes=token_expiration_minutes,
            refresh_max_age_days=token_refresh_max_age_days,
        ),
    )

from __future__ import annotations

import hashlib
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from ..database.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class LockTimeoutError(RuntimeError):
    """The per-user punch lock could not be acquired in time."""


class InProcessUserLocks:
    """One threading.Lock per user id. Only serializes within a single process.

    A user's lock is dropped once nobody holds or waits for it, so the map stays
    bounded by the number of users punching concurrently.
    """

    def __init__(self, *, timeout_seconds: float = 5):
        self._timeout = float(timeout_seconds)
        self._guard = threading.Lock()
        # user_id -> (lock, number of holders and waiters)
        self._locks: dict[int, tuple[threading.Lock, int]] = {}

    def _checkout(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock, users = self._locks.get(user_id, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[user_id] = (lock, users + 1)
            return lock

    def _checkin(self, user_id: int) -> None:
        with self._guard:
            lock, users = self._locks[user_id]
            if users <= 1:
                del self._locks[user_id]
            else:
                self._locks[user_id] = (lock, users - 1)

    def active_users(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        user_id = int(user_id)
        lock = self._checkout(user_id)
        try:
            if not lock.acquire(timeout=self._timeout):
                logger.warning("Punch lock timeout for user %s", user_id)
                raise LockTimeoutError(f"Timed out waiting for punch lock of user {user_id}")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(user_id)


class MySQLUserLocks:
    """Named advisory lock (GET_LOCK) per user, shared by every app process.

    The lock lives on its own connection, which stays open until release.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, timeout_seconds: int = 5):
        self._conn_factory = conn_factory
        self._timeout = int(timeout_seconds)

    def _name(self, user_id: int) -> str:
        # GET_LOCK names are capped at 64 chars; the database name only contributes a short digest.
        db_digest = hashlib.sha1(self._conn_factory.database.encode("utf-8")).hexdigest()[:12]
        return f"punchclock.{db_digest}.punch.{int(user_id)}"

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        name = self._name(user_id)
        conn = self._conn_factory.connect()
        try:
            cur = conn.cursor()
            cur.execute("SELECT GET_LOCK(%s, %s)", (name, self._timeout))
            row = cur.fetchone()
            if not row or row[0] != 1:
                logger.warning("Advisory lock timeout for %s", name)
                raise LockTimeoutError(f"Timed out waiting for punch lock {name}")
            try:
                yield
            finally:
                cur.execute("SELECT RELEASE_LOCK(%s)", (name,))
                cur.fetchone()
                cur.close()
        finally:
            conn.close()

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from punchclock.clock.locks import InProcessUserLocks
from punchclock.clock.model import ClockEvent, NewClockEvent
from punchclock.container import wire
from punchclock.core.enums import PunchType, Role
from punchclock.main import create_app
from punchclock.users.model import User
from punchclock.users.tokens import TokenService

EMPLOYEE_PASSWORD = "Secret123"
ADMIN_PASSWORD = "Admin123"


class InMemoryUsers:
    def __init__(self, users: Optional[list[User]] = None):
        self._by_id: dict[int, User] = {}
        self._next_id = 1
        for u in users or []:
            self._by_id[u.user_id] = u
            self._next_id = max(self._next_id, u.user_id + 1)

    def _replace(self, user_id: int, **changes) -> bool:
        user = self._by_id.get(int(user_id))
        if not user:
            return False
        self._by_id[user.user_id] = replace(user, **changes)
        return True

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.employee_code == employee_code), None)

    def create_user(self, *, full_name, email, password_hash, role, employee_code=None) -> int:
        uid = self._next_id
        self._next_id += 1
        self._by_id[uid] = User(
            user_id=uid,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            employee_code=employee_code,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        return uid

    def update_profile(self, user_id: int, *, full_name: str, email: str) -> bool:
        return self._replace(user_id, full_name=full_name, email=email)

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        return self._replace(user_id, password_hash=password_hash)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        return self._replace(user_id, is_active=is_active)

    def _matching(self, search):
        items = sorted(self._by_id.values(), key=lambda u: u.full_name)
        if not search:
            return items
        s = search.lower()
        return [
            u for u in items
            if s in u.full_name.lower() or s in u.email.lower() or s in (u.employee_code or "").lower()
        ]

    def list_users(self, *, search=None, offset=0, limit=10):
        return self._matching(search)[offset:offset + limit]

    def count_users(self, *, search=None) -> int:
        return len(self._matching(search))

    def ping(self) -> None:
        return None


class InMemoryClockEvents:
    """Protocol-compatible fake; `calls` records which read methods ran."""

    def __init__(self):
        self._events: dict[int, ClockEvent] = {}
        self._next_id = 1
        self.calls: list[str] = []

    def add(self, user_id: int, timestamp: datetime, type: PunchType, description=None) -> ClockEvent:
        return self.create(NewClockEvent(user_id=user_id, timestamp=timestamp, type=type, description=description))

    def create(self, event: NewClockEvent) -> ClockEvent:
        eid = self._next_id
        self._next_id += 1
        saved = ClockEvent(
            event_id=eid,
            user_id=event.user_id,
            timestamp=event.timestamp,
            type=event.type,
            description=event.description,
            created_at=event.timestamp,
        )
        self._events[eid] = saved
        return saved

    def get_by_id(self, event_id: int, user_id: int) -> Optional[ClockEvent]:
        self.calls.append("get_by_id")
        e = self._events.get(int(event_id))
        return e if e and e.user_id == int(user_id) else None

    def _filtered(self, user_id, start_date, end_date, type):
        out = [e for e in self._events.values() if e.user_id == int(user_id)]
        if start_date:
            out = [e for e in out if e.day >= start_date]
        if end_date:
            out = [e for e in out if e.day <= end_date]
        if type:
            out = [e for e in out if e.type == type]
        return out

    def list_by_user(self, user_id, *, start_date=None, end_date=None, type=None, offset=0, limit=10):
        self.calls.append("list_by_user")
        items = sorted(self._filtered(user_id, start_date, end_date, type), key=lambda e: (e.timestamp, e.event_id), reverse=True)
        return items[offset:offset + limit]

    def count_by_user(self, user_id, *, start_date=None, end_date=None, type=None) -> int:
        self.calls.append("count_by_user")
        return len(self._filtered(user_id, start_date, end_date, type))

    def list_for_range(self, user_id, *, start_date: date, end_date: date):
        self.calls.append("list_for_range")
        return sorted(self._filtered(user_id, start_date, end_date, None), key=lambda e: (e.timestamp, e.event_id))

    def list_between(self, user_id, *, start: datetime, end: datetime):
        self.calls.append("list_between")
        items = [e for e in self._events.values() if e.user_id == int(user_id) and start <= e.timestamp < end]
        return sorted(items, key=lambda e: (e.timestamp, e.event_id))

    def delete(self, event_id: int, user_id: int) -> bool:
        e = self._events.get(int(event_id))
        if not e or e.user_id != int(user_id):
            return False
        del self._events[int(event_id)]
        return True


def make_user(user_id: int, *, role: Role = Role.EMPLOYEE, password: str = EMPLOYEE_PASSWORD, **overrides) -> User:
    fields = dict(
        user_id=user_id,
        full_name=f"User {user_id}",
        email=f"user{user_id}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        employee_code=f"EMP{user_id:03d}",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        is_active=True,
    )
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def at(fixed_now):
    """Timestamp on the fixed_now day: at(9, 30) -> 09:30 UTC."""

    def _at(hour: int, minute: int = 0, second: int = 0, *, days_ago: int = 0) -> datetime:
        day = fixed_now.date() - timedelta(days=days_ago)
        return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)

    return _at


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            make_user(1, full_name="Alice Employee", email="alice@example.com"),
            make_user(2, full_name="Bob Employee", email="bob@example.com"),
            make_user(9, role=Role.ADMIN, password=ADMIN_PASSWORD, full_name="Ada Admin", email="admin@example.com", employee_code="ADM001"),
        ]
    )


@pytest.fixture
def clock_repo() -> InMemoryClockEvents:
    return InMemoryClockEvents()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService("test-secret", expiration_minutes=60, refresh_max_age_days=7)


@pytest.fixture
def container(users_repo, clock_repo, tokens):
    return wire(users_repo=users_repo, clock_repo=clock_repo, locks=InProcessUserLocks(timeout_seconds=1), tokens=tokens)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(users_repo, tokens):
    def _headers(user_id: int = 1) -> dict:
        issued = tokens.issue(users_repo.get_by_id(user_id))
        return {"Authorization": f"Bearer {issued.token}"}

    return _headers

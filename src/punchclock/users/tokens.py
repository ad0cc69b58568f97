from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_EXPIRATION_MINUTES, DEFAULT_TOKEN_REFRESH_MAX_AGE_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import IssuedToken, User


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


class TokenService:
    """Signs and verifies session tokens (itsdangerous, HMAC over the app secret)."""

    SALT = "punchclock.session"

    def __init__(
        self,
        secret_key: str,
        *,
        expiration_minutes: int = DEFAULT_TOKEN_EXPIRATION_MINUTES,
        refresh_max_age_days: int = DEFAULT_TOKEN_REFRESH_MAX_AGE_DAYS,
    ):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self._expiration = timedelta(minutes=int(expiration_minutes))
        self._refresh_max_age = timedelta(days=int(refresh_max_age_days))

    def issue(self, user: User, *, now: Optional[datetime] = None) -> IssuedToken:
        now = now or datetime.now(timezone.utc)
        token = self._serializer.dumps({"uid": user.user_id, "role": user.role.value, "jti": uuid.uuid4().hex})
        return IssuedToken(token=token, expiration=now + self._expiration)

    def verify(self, token: str) -> TokenClaims:
        return self._load(token, max_age=self._expiration)

    def verify_for_refresh(self, token: str) -> TokenClaims:
        """Accept an expired token as long as its signature is valid and it is not too old."""
        return self._load(token, max_age=self._refresh_max_age)

    def _load(self, token: str, *, max_age: timedelta) -> TokenClaims:
        if not token:
            raise AuthenticationError("Missing token")
        try:
            payload = self._serializer.loads(token, max_age=int(max_age.total_seconds()))
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadData:
            raise AuthenticationError("Invalid token")

        try:
            return TokenClaims(user_id=int(payload["uid"]), role=Role(payload["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

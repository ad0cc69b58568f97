from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_utc
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    employee_code: Optional[str]
    created_at: datetime
    is_active: bool = True


@dataclass(frozen=True)
class UserProfile:
    user_id: int
    full_name: str
    email: str
    employee_code: Optional[str]
    role: Role
    is_active: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            employee_code=user.employee_code,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "fullName": self.full_name,
            "email": self.email,
            "employeeCode": self.employee_code,
            "role": self.role.value,
            "isActive": self.is_active,
            "createdAt": isoformat_utc(self.created_at),
        }


@dataclass(frozen=True)
class CurrentUserInfo:
    """Fixed shape returned by the "me" endpoint."""

    user_id: int
    email: str
    full_name: str
    employee_code: Optional[str]
    role: Role
    is_active: bool

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "fullName": self.full_name,
            "employeeCode": self.employee_code,
            "role": self.role.value,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expiration: datetime


@dataclass(frozen=True)
class AuthResult:
    token: IssuedToken
    user: UserProfile

    def to_dict(self) -> dict:
        return {
            "token": self.token.token,
            "expiration": isoformat_utc(self.token.expiration),
            "user": self.user.to_dict(),
        }

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_employee_code(self, employee_code: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        employee_code: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, full_name: str, email: str) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_users(self, *, search: Optional[str] = None, offset: int = 0, limit: int = 10) -> Sequence[User]:
        raise NotImplementedError

    def count_users(self, *, search: Optional[str] = None) -> int:
        raise NotImplementedError

    def ping(self) -> None:
        raise NotImplementedError

from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.pagination import Page, offset_for, validate_page
from ..common.validators import (
    require_email,
    require_max_length,
    require_non_empty,
    require_strong_password,
)
from ..core.constants import MAX_FULL_NAME_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import AuthResult, CurrentUserInfo, User, UserProfile
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _full_name(value: str) -> str:
    name = require_non_empty(value, "Full name")
    require_max_length(name, "Full name", MAX_FULL_NAME_LENGTH)
    return name


class AuthService:
    """Use case: register, log in and refresh session tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        confirm_password: str,
        employee_code: Optional[str] = None,
    ) -> AuthResult:
        full_name = _full_name(full_name)
        email = require_email(email)
        require_strong_password(password)
        if password != confirm_password:
            raise ValidationError("Password and confirmation do not match")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already in use")

        employee_code = (employee_code or "").strip() or None
        if employee_code and self._users.get_by_employee_code(employee_code):
            raise ValidationError("Employee code is already in use")

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
            employee_code=employee_code,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise RuntimeError(f"User {user_id} vanished right after creation")

        logger.info("User registered: user_id=%s email=%s", user.user_id, user.email)
        return AuthResult(token=self._tokens.issue(user), user=UserProfile.from_user(user))

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.get_by_email((email or "").strip().lower()) if email else None
        if not user or not user.is_active:
            logger.warning("Rejected login for %s (unknown or inactive)", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Rejected login for user_id=%s (bad password)", user.user_id)
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user

    def login(self, email: str, password: str) -> AuthResult:
        user = self.authenticate(email, password)
        logger.info("User logged in: user_id=%s", user.user_id)
        return AuthResult(token=self._tokens.issue(user), user=UserProfile.from_user(user))

    def refresh(self, token: str) -> AuthResult:
        claims = self._tokens.verify_for_refresh(token)
        user = self._users.get_by_id(claims.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        return AuthResult(token=self._tokens.issue(user), user=UserProfile.from_user(user))


class UserService:
    """Use case: own profile management and the admin user listing."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def current_user_info(self, user_id: int) -> CurrentUserInfo:
        user = self._require_user(user_id)
        return CurrentUserInfo(
            user_id=user.user_id,
            email=user.email,
            full_name=user.full_name,
            employee_code=user.employee_code,
            role=user.role,
            is_active=user.is_active,
        )

    def get_profile(self, user_id: int) -> UserProfile:
        return UserProfile.from_user(self._require_user(user_id))

    def update_profile(self, user_id: int, *, full_name: str, email: str) -> UserProfile:
        user = self._require_user(user_id)
        full_name = _full_name(full_name)
        email = require_email(email)

        if email != user.email:
            other = self._users.get_by_email(email)
            if other and other.user_id != user.user_id:
                raise ValidationError("Email is already used by another user")

        if not self._users.update_profile(user.user_id, full_name=full_name, email=email):
            raise ValidationError("Failed to update profile")

        logger.info("Profile updated: user_id=%s", user.user_id)
        return self.get_profile(user.user_id)

    def change_password(self, user_id: int, *, current_password: str, new_password: str, confirm_new_password: str) -> None:
        user = self._require_user(user_id)
        if not current_password:
            raise ValidationError("Current password is required")
        require_strong_password(new_password, "New password")
        if new_password != confirm_new_password:
            raise ValidationError("New password and confirmation do not match")

        try:
            ok = check_password_hash(user.password_hash, current_password)
        except ValueError:
            ok = False
        if not ok:
            raise ValidationError("Current password is incorrect")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("Password changed: user_id=%s", user.user_id)

    def deactivate(self, user_id: int) -> None:
        user = self._require_user(user_id)
        if not self._users.set_active(user.user_id, is_active=False):
            raise ValidationError("Failed to deactivate user")
        logger.info("User deactivated: user_id=%s", user.user_id)

    def list_users(
        self,
        *,
        current_role: Role,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
    ) -> Page[UserProfile]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can list users")
        validate_page(page, page_size)

        search = (search or "").strip() or None
        total = self._users.count_users(search=search)
        users = self._users.list_users(search=search, offset=offset_for(page, page_size), limit=page_size)
        return Page(items=[UserProfile.from_user(u) for u in users], total_count=total, page=page, page_size=page_size)

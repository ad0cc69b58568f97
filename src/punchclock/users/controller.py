from __future__ import annotations

from flask import Flask, g, request, session

from ..common.http import admin_required, bearer_token, json_body, login_required, ok, ok_page, resolve_identity
from ..common.validators import require_int
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    def _start_session(result) -> None:
        session.permanent = True
        session["user_id"] = result.user.user_id
        session["role"] = result.user.role.value

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        payload = json_body()
        result = container.auth_service.register(
            full_name=payload.get("fullName", ""),
            email=payload.get("email", ""),
            password=payload.get("password", ""),
            confirm_password=payload.get("confirmPassword", ""),
            employee_code=payload.get("employeeCode"),
        )
        _start_session(result)
        return ok(result.to_dict(), "User registered successfully", status=201)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        payload = json_body()
        result = container.auth_service.login(payload.get("email", ""), payload.get("password", ""))
        _start_session(result)
        return ok(result.to_dict(), "Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return ok(True, "Logout successful")

    @app.route("/api/auth/refresh", methods=["POST"], endpoint="refresh_token")
    def refresh_token():
        token = json_body().get("token") or bearer_token()
        if not token:
            raise AuthenticationError("Token is required")
        result = container.auth_service.refresh(token)
        return ok(result.to_dict(), "Token refreshed successfully")

    @app.route("/api/auth/verify", methods=["GET"], endpoint="verify_token")
    def verify_token():
        resolve_identity()
        return ok({"valid": True, "userId": g.user_id, "role": g.role.value}, "Token is valid")

    @app.route("/api/user/me", methods=["GET"], endpoint="current_user")
    @login_required
    def current_user():
        info = container.user_service.current_user_info(g.user_id)
        return ok(info.to_dict(), "User information retrieved successfully")

    @app.route("/api/user/profile", methods=["GET"], endpoint="get_profile")
    @login_required
    def get_profile():
        return ok(container.user_service.get_profile(g.user_id).to_dict())

    @app.route("/api/user/profile", methods=["PUT"], endpoint="update_profile")
    @login_required
    def update_profile():
        payload = json_body()
        profile = container.user_service.update_profile(
            g.user_id,
            full_name=payload.get("fullName", ""),
            email=payload.get("email", ""),
        )
        return ok(profile.to_dict(), "Profile updated successfully")

    @app.route("/api/user/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        payload = json_body()
        container.user_service.change_password(
            g.user_id,
            current_password=payload.get("currentPassword", ""),
            new_password=payload.get("newPassword", ""),
            confirm_new_password=payload.get("confirmNewPassword", ""),
        )
        return ok(True, "Password changed successfully")

    @app.route("/api/user/deactivate", methods=["POST"], endpoint="deactivate_account")
    @login_required
    def deactivate_account():
        container.user_service.deactivate(g.user_id)
        session.clear()
        return ok(True, "User deactivated successfully")

    @app.route("/api/user", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        page = container.user_service.list_users(
            current_role=g.role,
            page=require_int(request.args.get("page"), "Page", default=1),
            page_size=require_int(request.args.get("pageSize"), "Page size", default=DEFAULT_PAGE_SIZE),
            search=request.args.get("search"),
        )
        return ok_page(page, [u.to_dict() for u in page.items])

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        container.users_repo.ping()
        return ok({"ok": True})

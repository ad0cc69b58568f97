"""Shared Flask helpers: response envelope, identity resolution, error handlers.

Every JSON response has the shape {success, message, data, errors}; paginated
lists additionally carry the Page metadata at the top level.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional, Sequence

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .pagination import Page

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def ok(data: Any = None, message: str = "Operation completed successfully", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data, "errors": []}), status


def ok_page(page: Page, data: list, message: str = "Operation completed successfully"):
    body = {"success": True, "message": message, "data": data, "errors": []}
    body.update(page.meta())
    return jsonify(body), 200


def fail(message: str, status: int, errors: Optional[Sequence[str]] = None):
    return jsonify({"success": False, "message": message, "data": None, "errors": list(errors or [])}), status


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def resolve_identity() -> None:
    """Populate g.user_id / g.role from a bearer token, falling back to the Flask session."""

    token = bearer_token()
    if token:
        claims = current_app.extensions["punchclock"].tokens.verify(token)
        g.user_id, g.role = claims.user_id, claims.role
        return

    if "user_id" in session:
        try:
            g.user_id, g.role = int(session["user_id"]), Role(session.get("role", Role.EMPLOYEE.value))
            return
        except ValueError:
            session.clear()

    raise AuthenticationError("User is not authenticated")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        resolve_identity()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        resolve_identity()
        if g.role != Role.ADMIN:
            raise AuthorizationError("Administrator access required")
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    """Map domain exceptions to envelopes once, at the app boundary."""

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(e.message, 400, e.errors or [e.message])

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(e.message, 404)

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return fail(e.message, 401)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(e.message, 403)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail(INTERNAL_ERROR_MESSAGE, 500)

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (PersistenceError, 500),
)


def ok(message: str = "", status: int = 200, **payload: Any):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: Exception, fallback: str):
    """Translate an exception into the JSON error shape.

    Domain errors carry their own message; anything else is logged and
    reported with ``fallback``.
    """

    if isinstance(exc, DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                if status >= 500:
                    current_app.logger.error("%s: %s", fallback, exc)
                return fail(str(exc) or fallback, status)
        return fail(str(exc) or fallback, 400)

    current_app.logger.exception(fallback)
    return fail(fallback, 500)


def session_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def session_role() -> Role:
    return Role.parse(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Authentication required", 401)
        if session_role() != Role.ADMIN:
            return fail("Access denied", 403)
        return view(*args, **kwargs)

    return wrapper

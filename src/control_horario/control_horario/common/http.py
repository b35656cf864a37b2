from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    DuplicateSessionError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    StorePermissionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (StorePermissionError, 403),
    (StoreError, 503),
    (DuplicateSessionError, 409),
    (ConflictError, 409),
    (InvalidTransitionError, 400),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
)


def status_for(error: DomainError) -> int:
    if isinstance(error, StoreError) and error.kind == "integrity":
        return 409
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(error: DomainError):
    status = status_for(error)
    payload = {"success": False, "message": str(error), "error": type(error).__name__}
    if isinstance(error, StoreError):
        payload["kind"] = error.kind
    logger.warning(
        "%s: %s",
        type(error).__name__,
        error,
        extra={"path": request.path, "method": request.method, "status_code": status},
    )
    return jsonify(payload), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Inicia sesión para continuar", 401)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def month_year_args(today: date) -> tuple[int, int]:
    """Read ``month`` (1-12) and ``year`` query args, defaulting to today's month."""
    try:
        month = int(request.args.get("month") or today.month)
        year = int(request.args.get("year") or today.year)
    except ValueError:
        raise ValidationError("month y year deben ser números")
    if not 1 <= month <= 12:
        raise ValidationError("month debe estar entre 1 y 12")
    return month, year

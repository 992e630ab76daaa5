from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.exceptions import ConflictError, DomainError, InvalidActionError, NotFoundError, ValidationError

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 400),
    (InvalidActionError, 400),
    (ValidationError, 400),
)


def employee_required(view):
    """Reject requests without an employee session (login lives outside this app)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "error": "not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_employee_id() -> int:
    return int(session["employee_id"])


def domain_error_response(e: DomainError):
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            return jsonify({"success": False, "error": str(e)}), status
    return jsonify({"success": False, "error": str(e)}), 400


def account_required(view):
    """Reject requests without an account (company owner) session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "account_id" not in session:
            return jsonify({"success": False, "error": "not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper

"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Tuple

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..users.model import Actor

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
)


def message(text: str, status: int):
    return jsonify({"message": text}), status


def domain_error_response(e: DomainError) -> Tuple:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(e, error_cls):
            return message(str(e), status)
    return message(str(e), 400)


def server_error_response(action: str) -> Tuple:
    logger.exception("%s failed", action)
    return message("Server error", 500)


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def current_actor() -> Actor:
    """Rebuild the caller's identity from the session for this request only."""
    return Actor(user_id=int(session["user_id"]), role=Role(session["role"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return message("No token, authorization denied", 401)
        return view(*args, **kwargs)

    return wrapper


def hr_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return message("No token, authorization denied", 401)
        if session.get("role") != Role.HR.value:
            return message("Access denied. HR role required.", 403)
        return view(*args, **kwargs)

    return wrapper

"""Helpers shared by the feature controllers.

The session is populated by the login layer with ``user_id``, ``role`` and
``school_id``. The school is resolved here once and passed explicitly to the
services.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AttendanceSyncError, AuthorizationError, NotFoundError, ValidationError
from .datetime_utils import parse_optional_date

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Convert dataclasses/enums/dates into JSON-ready structures (ISO dates)."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def error_response(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def current_school_id() -> int:
    return int(session["school_id"])


def current_user_id() -> int:
    return int(session["user_id"])


def school_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or not session.get("school_id"):
            return error_response("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or not session.get("school_id"):
            return error_response("Please sign in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response("You do not have permission", 403)
        return view(*args, **kwargs)

    return wrapper


def json_errors(view):
    """Map domain errors to HTTP responses; anything else is a logged 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error_response(str(e), 400)
        except AuthorizationError as e:
            return error_response(str(e), 403)
        except NotFoundError as e:
            return error_response(str(e), 404)
        except AttendanceSyncError as e:
            return error_response(str(e), 502, leave=to_json(e.leave))
        except ValueError as e:
            return error_response(f"Invalid parameter: {e}", 400)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return error_response("Internal server error", 500)

    return wrapper


def arg_date(name: str) -> Optional[date]:
    return parse_optional_date(request.args.get(name))


def arg_int(name: str) -> Optional[int]:
    v = (request.args.get(name) or "").strip()
    return int(v) if v else None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data

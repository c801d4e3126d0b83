"""Flask helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser

logger = logging.getLogger(__name__)


def current_user() -> SessionUser | None:
    if "username" not in session:
        return None
    return SessionUser(
        username=session["username"],
        full_name=session.get("name", ""),
        role=Role(session["role"]),
    )


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "username" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "username" not in session:
                return error_response("Please log in to continue", 401)
            if session.get("role") not in allowed:
                return error_response("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def domain_errors(view):
    """Translate service-layer exceptions into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AuthenticationError as e:
            return error_response(str(e), 401)
        except AuthorizationError as e:
            return error_response(str(e), 403)
        except NotFoundError as e:
            return error_response(str(e), 404)
        except (ValidationError, DomainError) as e:
            return error_response(str(e), 400)
        except Exception:
            logger.exception("unhandled error in %s", view.__name__)
            return error_response("Internal server error", 500)

    return wrapper

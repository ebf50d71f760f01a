from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, NotFoundError

logger = logging.getLogger(__name__)


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def api_errors(view):
    """Translate domain errors raised by services into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404)
        except DomainError as e:
            return fail(str(e), 400)
        except HTTPException:
            # Left to the app-level handlers (413 for oversized uploads).
            raise
        except Exception:
            logger.exception("unexpected error in %s", view.__name__)
            return fail("Error del sistema. Intente de nuevo.", 500)

    return wrapper


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "si", "sí", "on"}

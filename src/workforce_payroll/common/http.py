from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..auth.context import ManagerContext
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ComputationError,
    DataSourceError,
    NotFoundError,
    ValidationError,
)
from .validators import require_iso_date

logger = logging.getLogger(__name__)


def manager_required(container):
    """Build a ManagerContext from the session and pass it as ``ctx``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = session.get("user_id")
            if not user_id:
                raise AuthenticationError("Unauthorized.")
            store_ids = container.stores_repo.list_managed_store_ids(str(user_id))
            kwargs["ctx"] = ManagerContext(acting_user_id=str(user_id), store_ids=tuple(store_ids))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def query_date(name: str, *, required: bool = True):
    value = request.args.get(name)
    if not value and not required:
        return None
    return require_iso_date(value, name)


def query_str(name: str) -> Optional[str]:
    value = (request.args.get(name) or "").strip()
    return value or None


def query_flag(name: str) -> bool:
    return (request.args.get(name) or "").strip().lower() in {"1", "true", "yes"}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"error": str(e), "code": e.code}), 400

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return jsonify({"error": str(e) or "Unauthorized.", "code": "unauthorized"}), 401

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return jsonify({"error": str(e), "code": e.code}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": str(e), "code": "not_found"}), 404

    @app.errorhandler(ComputationError)
    def _computation(e: ComputationError):
        logger.exception("report computation failed: %s", e)
        return jsonify({"error": "Internal error while computing report.", "code": "internal_error"}), 500

    @app.errorhandler(DataSourceError)
    def _data_source(e: DataSourceError):
        logger.exception("data source failure: %s", e)
        return jsonify({"error": "Data source unavailable.", "code": "data_source_error"}), 500

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error: %s", e)
        return jsonify({"error": "Internal server error.", "code": "internal_error"}), 500

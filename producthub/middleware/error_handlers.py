"""
Application-wide error handlers.

Maps the domain exceptions raised by services (producthub.core.exceptions)
and the HTTP errors raised by Flask to the standard JSON error body built
by ``utils.errors.api_error``. Any unexpected exception rolls back the
session, is logged with its traceback and surfaces as a generic 500.

Usage:
    from producthub.middleware.error_handlers import init_error_handlers
    init_error_handlers(app)
"""

import logging

from flask import request
from werkzeug.exceptions import HTTPException

from producthub.core.exceptions import (
    AuthenticationError,
    ConflictError,
    EpicConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from producthub.models import db
from producthub.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def init_error_handlers(app):
    """Register JSON error handlers on the app."""

    @app.errorhandler(ValidationError)
    def _validation(e):
        db.session.rollback()
        return api_error(E.VALIDATION_INVALID, str(e), details=e.details or None)

    @app.errorhandler(InvalidStateError)
    def _invalid_state(e):
        db.session.rollback()
        return api_error(E.INVALID_STATE, str(e))

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e):
        db.session.rollback()
        return api_error(E.UNAUTHENTICATED, str(e))

    @app.errorhandler(ForbiddenError)
    def _forbidden(e):
        db.session.rollback()
        return api_error(E.FORBIDDEN, str(e))

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        db.session.rollback()
        # resource_id and scope stay in the log, never in the response
        logger.debug("Not found: %s", e)
        return api_error(E.NOT_FOUND, f"{e.resource} not found")

    @app.errorhandler(ConflictError)
    def _conflict(e):
        db.session.rollback()
        return api_error(E.CONFLICT_DUPLICATE, str(e))

    @app.errorhandler(EpicConflictError)
    def _epic_conflict(e):
        db.session.rollback()
        return api_error(E.CONFLICT_STATE, str(e), details={"conflicts": e.conflicts})

    @app.errorhandler(HTTPException)
    def _http(e):
        if e.code == 429:
            return {
                "error": "Too many requests",
                "code": "ERR_RATE_LIMITED",
                "retry_after": e.description,
            }, 429
        if e.code == 404:
            return {"error": "Not found", "code": E.NOT_FOUND, "path": request.path}, 404
        if e.code == 405:
            return {"error": "Method not allowed", "code": "ERR_METHOD_NOT_ALLOWED"}, 405
        return {"error": e.description or e.name, "code": f"ERR_HTTP_{e.code}"}, e.code

    @app.errorhandler(Exception)
    def _unhandled(e):
        db.session.rollback()
        logger.error("Unhandled error on %s %s: %s", request.method, request.path, e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error", status=500)

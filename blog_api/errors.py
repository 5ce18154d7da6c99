import logging

from flask import request
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException, NotFound, RequestEntityTooLarge

from blog_api.db import db
from blog_api.responses import error_response


logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class AppError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class PermissionDeniedError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class MediaStorageError(AppError):
    status_code = 503


def _sqlstate(error) -> str | None:
    orig = getattr(error, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate.
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def classify_integrity_error(error: IntegrityError):
    code = _sqlstate(error)
    text = str(getattr(error, "orig", error)).lower()

    if code == UNIQUE_VIOLATION or "unique constraint" in text:
        return 409, "Resource already exists"
    if code == FOREIGN_KEY_VIOLATION or "foreign key constraint" in text:
        return 400, "Invalid reference to related resource"
    return 400, "Invalid input data"


def register_error_handlers(app, settings):
    """Install the one place that turns exceptions into response envelopes."""

    def _log(status_code, error):
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Error occurred: %s %s -> %s %s",
            request.method,
            request.path,
            status_code,
            error,
            exc_info=status_code >= 500,
        )

    @app.errorhandler(AppError)
    def handle_app_error(error):
        _log(error.status_code, error.message)
        return error_response(error.message, error.status_code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        status_code, message = classify_integrity_error(error)
        _log(status_code, error.orig)
        return error_response(message, status_code)

    @app.errorhandler(DataError)
    def handle_data_error(error):
        db.session.rollback()
        _log(400, error.orig)
        return error_response("Invalid input data", 400)

    @app.errorhandler(NotFound)
    def handle_route_not_found(error):
        _log(404, error)
        return error_response(f"Route {request.path} not found", 404)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        _log(413, error)
        return error_response("Uploaded file is too large", 413)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        _log(error.code, error)
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, SQLAlchemyError):
            db.session.rollback()
        _log(500, error)
        message = "Internal Server Error" if settings.is_production else str(error)
        return error_response(message or "Internal Server Error", 500)

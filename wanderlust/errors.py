"""
Central error handling.

- AppError: raise from routes with an HTTP status + user-facing message.
- Unknown URLs -> 404 "Page Not Found!"
- Other HTTP exceptions -> their own code/description
- Anything else -> logged with traceback, session rolled back, 500 "Something went wrong!"

All of them render the same error.html page.
"""

from __future__ import annotations

from flask import Flask, render_template
from werkzeug.exceptions import HTTPException, NotFound, RequestEntityTooLarge

from .extensions import db

DEFAULT_STATUS = 500
DEFAULT_MESSAGE = "Something went wrong!"


class AppError(Exception):
    """Application error carrying an HTTP status code and a message for the user."""

    def __init__(self, status_code: int = DEFAULT_STATUS, message: str = DEFAULT_MESSAGE):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _render_error(status_code: int, message: str):
    return render_template("error.html", message=message, status_code=status_code), status_code


def register_error_handlers(app: Flask) -> None:
    """Wire the error handlers on the app (called from create_app)."""

    @app.errorhandler(AppError)
    def _app_error(err: AppError):
        if err.status_code >= 500:
            app.logger.error("AppError %s: %s", err.status_code, err.message)
        return _render_error(err.status_code, err.message)

    @app.errorhandler(NotFound)
    def _not_found(_err: NotFound):
        return _render_error(404, "Page Not Found!")

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(_err: RequestEntityTooLarge):
        limit_mb = (app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return _render_error(413, f"Upload is too large (limit {limit_mb} MB).")

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return _render_error(err.code or DEFAULT_STATUS, err.description or DEFAULT_MESSAGE)

    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        app.logger.exception("Unhandled error: %s", err)
        db.session.rollback()
        return _render_error(DEFAULT_STATUS, DEFAULT_MESSAGE)

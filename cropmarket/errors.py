# cropmarket/errors.py
from __future__ import annotations

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge


class ApiError(Exception):
    """Base for every error a handler may translate into an HTTP answer."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(ApiError):
    # duplicate keys are reported as a plain client error
    status_code = 400
    default_message = "Already exists"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Missing credentials"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class PayloadTooLarge(ApiError):
    status_code = 413
    default_message = "Payload too large"


class StorageError(ApiError):
    status_code = 500
    default_message = "Storage unavailable"


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):
        if e.status_code >= 500:
            current_app.logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(e):
        return jsonify(message=PayloadTooLarge.default_message), 413

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify(message=e.description or e.name), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        current_app.logger.exception("Unhandled error: %s", e)
        return jsonify(message="Internal server error"), 500

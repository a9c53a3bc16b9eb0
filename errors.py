"""
Error taxonomy for the portal API and the handlers that turn it into JSON.

Every error response has the shape {"error": <message>, "code": <code>}.
Nothing here ever includes a traceback in the response body.
"""
from __future__ import annotations

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PortalError(Exception):
    status_code = 400
    code = "bad_request"
    message = "Bad request"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {"error": self.message, "code": self.code}


class ValidationError(PortalError):
    status_code = 400
    code = "validation_error"
    message = "Invalid input"


class MissingFile(ValidationError):
    code = "missing_file"
    message = "A non-empty file is required"


class Unauthenticated(PortalError):
    status_code = 401
    code = "unauthenticated"
    message = "Please authenticate"


class InvalidToken(Unauthenticated):
    code = "invalid_token"
    message = "Invalid token"


class ExpiredToken(Unauthenticated):
    code = "expired_token"
    message = "Token expired"


class InvalidCredentials(Unauthenticated):
    code = "invalid_credentials"
    message = "Invalid credentials"


class NotFound(PortalError):
    status_code = 404
    code = "not_found"
    message = "Not found"


class DuplicateKey(PortalError):
    status_code = 409
    code = "duplicate"
    message = "Email or student id is already registered"


class PayloadTooLarge(PortalError):
    status_code = 413
    code = "payload_too_large"
    message = "File exceeds the upload limit"


class NotifierFailure(PortalError):
    """Delivery of a notification failed. Logged, never sent to clients."""

    status_code = 500
    code = "notifier_failure"
    message = "Notification delivery failed"


def _json_error(message: str, code: str, status: int):
    resp = jsonify({"error": message, "code": code})
    resp.status_code = status
    if status == 401:
        resp.headers["WWW-Authenticate"] = "Bearer"
    return resp


def register_error_handlers(app):
    @app.errorhandler(PortalError)
    def handle_portal_error(exc: PortalError):
        return _json_error(exc.message, exc.code, exc.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        if exc.code == 413:
            return _json_error(PayloadTooLarge.message, PayloadTooLarge.code, 413)
        code = (exc.name or "error").lower().replace(" ", "_")
        return _json_error(exc.description or exc.name, code, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error")
        return _json_error("Internal server error", "internal", 500)

"""Centralized JSON error handling for the API.

Every failure leaves the application as ``{"error": "<message>"}`` with the
mapped status code. Validation failures add a ``details`` mapping with the
per-field messages. Server-side failures never expose internal messages.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from catalog.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def error_response(
    message: str,
    status: int,
    *,
    details: dict[str, Any] | None = None,
) -> Response:
    """Build the JSON error response used across the application.

    :param message: Client-safe summary.
    :param status: HTTP status code.
    :param details: Optional structured details (validation messages).
    :returns: Flask response carrying ``{"error": message}``.
    """
    payload: dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    resp = jsonify(payload)
    resp.status_code = int(status)
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    :param message: Human-readable description presented to clients.
    :param status_code: HTTP status code to return. Defaults to ``400``.
    :param details: Optional structured payload included in the body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.details = details or {}

    def to_response(self) -> Response:
        """Render the error as a JSON response."""
        return error_response(self.message, self.status_code, details=self.details or None)


class BadRequest(APIError):
    """400 for malformed input or violated business preconditions."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST)


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


class Forbidden(APIError):
    """403 when the authorization policy denies access."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN)


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND)


class Conflict(APIError):
    """409 for uniqueness or state collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT)


class ServiceUnavailable(APIError):
    """503 when a dependency (database) cannot serve the request."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(message, status_code=HTTPStatus.SERVICE_UNAVAILABLE)


def _register_jwt_loaders() -> None:
    """Render flask-jwt-extended failures as ``401 {"error"}`` responses."""
    from catalog.core.extensions import jwt

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        log.info("auth.token_missing path=%s", request.path)
        return error_response("Authentication required", HTTPStatus.UNAUTHORIZED)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        log.info("auth.token_invalid path=%s reason=%s", request.path, reason)
        return error_response("Invalid access token", HTTPStatus.UNAUTHORIZED)

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
        log.info("auth.token_expired path=%s", request.path)
        return error_response("Access token has expired", HTTPStatus.UNAUTHORIZED)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    4xx are logged as warnings; 5xx are logged with ``exc_info``.
    """

    _register_jwt_loaders()

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: status=%s msg=%s request_id=%s",
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return err.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        elif status >= 500:
            message = "Unexpected error"
        else:
            message = (err.name or HTTPStatus(status).phrase).strip()
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: status=%s detail=%s request_id=%s",
            status,
            message,
            ensure_request_id(),
        )
        return error_response(message, status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        return error_response("Validation failed", HTTPStatus.BAD_REQUEST, details=messages)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Resource conflict", HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Service temporarily unavailable", HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Unexpected error", HTTPStatus.INTERNAL_SERVER_ERROR)

"""Translate service-layer exceptions raised by views into JSON errors."""

from __future__ import annotations

import logging

from flask import Flask

from catalog.core.cancellation import OperationCancelledError
from catalog.services._shared.base import translate_service_error
from catalog.services._shared.errors import ServiceError

log = logging.getLogger(__name__)


def init_app(app: Flask) -> None:
    """Register handlers for :class:`ServiceError` and cancellation."""

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = translate_service_error(err)
        log.warning(
            "ServiceError: type=%s status=%s msg=%s",
            type(err).__name__,
            translated.status_code,
            translated.message,
        )
        return translated.to_response()

    @app.errorhandler(OperationCancelledError)
    def handle_cancelled(err: OperationCancelledError):
        log.info("request.cancelled")
        return translate_service_error(err).to_response()

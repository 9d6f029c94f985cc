"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity

from catalog.core.cancellation import CancellationToken
from catalog.core.errors import APIError, BadRequest, Conflict, NotFound, Unauthorized
from catalog.core.logger import ensure_request_id
from catalog.schemas.common import PaginationQuerySchema
from catalog.services._shared.base import ServiceContext
from catalog.services._shared.dto import PaginationIn
from catalog.services._shared.result import Err, FailureKind, Ok

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

# Attributes read by the auth gate from the resolved view function
PUBLIC_ATTR = "_catalog_public"
PERMISSION_ATTR = "_catalog_permission"

_FAILURE_ERRORS: dict[FailureKind, type[APIError]] = {
    FailureKind.BAD_REQUEST: BadRequest,
    FailureKind.UNAUTHORIZED: Unauthorized,
    FailureKind.NOT_FOUND: NotFound,
    FailureKind.CONFLICT: Conflict,
}


def public_endpoint(func: F) -> F:
    """Mark a view as reachable without an access token."""

    setattr(func, PUBLIC_ATTR, True)
    return func


def permission_required(permission: str) -> Callable[[F], F]:
    """Declare the permission a view needs; enforced by the auth gate before dispatch.

    Place it above :func:`timing` so the attribute lands on the registered view.
    """

    def decorator(func: F) -> F:
        setattr(func, PERMISSION_ATTR, permission)
        return func

    return decorator


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


def _request_cancellation() -> CancellationToken:
    cancellation = g.get("cancellation")
    if cancellation is None:
        cancellation = g.cancellation = CancellationToken()
    return cancellation


def anonymous_context() -> ServiceContext:
    """Service context for public views: no actor, but the request's cancellation token."""

    return ServiceContext(request_id=ensure_request_id(), cancellation=_request_cancellation())


def current_context() -> ServiceContext:
    """Build the service context from the verified access token, if any."""

    claims = get_jwt() or {}
    raw_uid = claims.get("uid")
    try:
        actor_id = uuid.UUID(str(raw_uid)) if raw_uid else None
    except ValueError:
        actor_id = None
    return ServiceContext(
        actor_id=actor_id,
        actor_username=get_jwt_identity(),
        role=claims.get("role"),
        request_id=ensure_request_id(),
        cancellation=_request_cancellation(),
    )


def unwrap(result: Ok[T] | Err) -> T:
    """Return the value of ``Ok`` or raise the API error matching an ``Err``."""

    if isinstance(result, Ok):
        return result.value
    raise _FAILURE_ERRORS.get(result.kind, BadRequest)(result.message)


def public_url(path: str | None) -> str | None:
    """Turn a stored ``/images/...`` path into an absolute URL."""

    if not path:
        return None
    base = current_app.config.get("PUBLIC_BASE_URL") or request.host_url
    return base.rstrip("/") + path


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    return Response(status=204)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]

"""Authentication and authorization gate run before every request.

Endpoints marked with :func:`catalog.api.deps.public_endpoint` pass through.
Everything else needs a valid access token (bearer header or ``access_token``
cookie); a view that declares a permission additionally needs a role granting
it in :data:`catalog.services._shared.policies.access.ROLE_PERMISSIONS`.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app, g, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from catalog.api.deps import PERMISSION_ATTR, PUBLIC_ATTR
from catalog.core.cancellation import CancellationToken
from catalog.core.errors import Forbidden
from catalog.services._shared.policies.access import is_allowed

log = logging.getLogger(__name__)


def _resolve_view():
    if request.endpoint is None:
        return None
    return current_app.view_functions.get(request.endpoint)


def enforce_access() -> None:
    """
    Verify the access token and the view's declared permission.

    :raises Forbidden: When the caller's role lacks the permission.
    """
    g.cancellation = CancellationToken()

    view = _resolve_view()
    # Unknown routes fall through to the 404 handler.
    if view is None or request.method == "OPTIONS":
        return
    if getattr(view, PUBLIC_ATTR, False):
        return

    # Raises the library's errors; the JWT loaders render them as 401.
    verify_jwt_in_request()

    permission = getattr(view, PERMISSION_ATTR, None)
    if permission is None:
        return
    role = (get_jwt() or {}).get("role")
    if not is_allowed(role, permission):
        log.info("auth.forbidden endpoint=%s role=%s permission=%s", request.endpoint, role, permission)
        raise Forbidden("You do not have permission to perform this action")


def init_app(app: Flask) -> None:
    app.before_request(enforce_access)

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from catalog.core import errors as api_errors
from catalog.core.cancellation import CancellationToken, OperationCancelledError
from catalog.repositories.base import Pagination
from catalog.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
)
from catalog.services._shared.policies.access import is_owner_or_admin
from catalog.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user id.
    :param actor_username: Authenticated username (token subject).
    :param role: Authenticated user's role.
    :param request_id: Correlation id for logging.
    :param cancellation: Caller-controlled cancellation token.
    """

    actor_id: uuid.UUID | None = None
    actor_username: str | None = None
    role: str | None = None
    request_id: str | None = None
    cancellation: CancellationToken | None = None


def translate_service_error(
    exc: ServiceError | OperationCancelledError,
) -> api_errors.APIError:
    """
    Map service-level errors to API-level (HTTP) errors.

    :param exc: Exception raised within a service.
    :returns: Matching API error; other service errors become ``BadRequest``.
    """
    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(str(exc))
    if isinstance(exc, ConflictError):
        return api_errors.Conflict(str(exc))
    if isinstance(exc, AuthorizationError):
        return api_errors.Forbidden(str(exc))
    if isinstance(exc, OperationCancelledError):
        return api_errors.ServiceUnavailable("Request was cancelled")
    return api_errors.BadRequest(str(exc))


class BaseService:
    """
    Base class for application services.

    * Provide read-only and read-write units of work.
    * Offer shared helpers (pagination, cancellation checkpoints, ownership).
    * Stay framework-agnostic: no Flask request objects reach a service.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work bound to the context's cancellation token.

        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork(cancellation=self.ctx.cancellation)

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level hint.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
        )

    # ----------------------------- Helpers ----------------------------------

    def checkpoint(self) -> None:
        """
        Abort early when the caller has cancelled.

        :raises OperationCancelledError: If the context's token is cancelled.
        """
        if self.ctx.cancellation is not None:
            self.ctx.cancellation.raise_if_cancelled()

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Build a Pagination value object with basic clamping."""
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or []))

    def ensure_owner_or_admin(self, owner_id, *, msg: str | None = None) -> None:
        """
        :raises AuthorizationError: Unless the actor owns the resource or is an admin.
        """
        if not is_owner_or_admin(actor_id=self.ctx.actor_id, owner_id=owner_id, role=self.ctx.role):
            raise AuthorizationError(msg or "You are not allowed to modify this resource.")

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(timezone.utc)

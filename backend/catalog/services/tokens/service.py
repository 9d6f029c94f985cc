"""
TokenService
============

Issues signed access tokens through the :class:`TokenProvider` port and
opaque refresh tokens persisted on the user row.

- Access tokens: ``sub = username`` plus ``uid`` and ``role`` claims; issuer,
  audience and lifetime come from the provider's configuration.
- Refresh tokens: random hex identifiers with a fixed, non-sliding lifetime.
  Issuing one overwrites whatever the user held before.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from catalog.services._shared.base import BaseService, ServiceContext
from catalog.services._shared.ports import TokenProvider
from catalog.services._shared.result import Err, Ok, unauthorized
from catalog.services.tokens.dto import IssuedRefreshToken, RefreshSession, TokenSubject
from catalog.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

DEFAULT_REFRESH_TTL = timedelta(days=7)
INVALID_REFRESH_MESSAGE = "Invalid or expired refresh token"
UNKNOWN_USER_MESSAGE = "User no longer exists"


class TokenService(BaseService):
    """Access-token minting and refresh-token persistence."""

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_ttl: timedelta | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_provider: Adapter signing access tokens.
        :param refresh_ttl: Refresh-token lifetime; seven days when omitted.
        :param ctx: Request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.provider = token_provider
        self.refresh_ttl = refresh_ttl or DEFAULT_REFRESH_TTL

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def issue_access_token(self, subject: TokenSubject) -> str:
        """
        Mint a signed access token for ``subject``.

        :param subject: Identity to embed.
        :returns: Encoded JWT.
        :raises ConfigurationError: If the signing secret is missing.
        """
        return self.provider.create_access_token(
            identity=subject.username,
            additional_claims={"uid": str(subject.user_id), "role": subject.role},
        )

    # ------------------------------------------------------------------ #
    # Refresh tokens
    # ------------------------------------------------------------------ #

    @staticmethod
    def new_refresh_token() -> str:
        return uuid.uuid4().hex

    def issue_refresh_token(
        self, user_id: uuid.UUID, *, uow: SQLAlchemyUnitOfWork
    ) -> Ok[IssuedRefreshToken] | Err:
        """
        Generate a refresh token and store it on the user, replacing any prior one.

        Runs inside the caller's read-write unit of work so the write commits
        together with the rest of the session issuance.

        :param user_id: Owner of the new token.
        :param uow: Active read-write unit of work.
        :returns: ``Ok(IssuedRefreshToken)``, or ``UNAUTHORIZED`` when the user
            row no longer exists and nothing was stored.
        """
        issued = IssuedRefreshToken(
            token=self.new_refresh_token(),
            expires_at=self.now_utc() + self.refresh_ttl,
        )
        if not uow.users.store_refresh_token(user_id, issued.token, issued.expires_at):
            log.warning("auth.refresh_store_missed user_id=%s", user_id)
            return unauthorized(UNKNOWN_USER_MESSAGE)
        return Ok(issued)

    def resolve_user_by_refresh_token(self, token: str) -> Ok[RefreshSession] | Err:
        """
        Find the user currently holding ``token``.

        Matching is exact and the stored expiry must be strictly later than
        now; expiry never slides.

        :param token: Opaque refresh token presented by the client.
        :returns: ``Ok(RefreshSession)`` or an ``UNAUTHORIZED`` failure.
        """
        if not token:
            return unauthorized(INVALID_REFRESH_MESSAGE)
        self.checkpoint()
        now = self.now_utc()
        with self.ro_uow() as uow:
            user = uow.users.get_by_refresh_token(token, now)
            if user is None or not user.has_active_refresh_token(token, now):
                return unauthorized(INVALID_REFRESH_MESSAGE)
            return Ok(
                RefreshSession(
                    user_id=user.id,
                    username=user.username,
                    role=user.role,
                    token=token,
                    version=user.version,
                    expires_at=user.refresh_expiry_utc,
                )
            )

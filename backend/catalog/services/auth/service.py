# catalog/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from catalog.models.user import ROLE_USER, User
from catalog.repositories.user import UserRepository
from catalog.services._shared.base import BaseService, ServiceContext
from catalog.services._shared.errors import violates
from catalog.services._shared.result import Err, FailureKind, Ok, conflict, unauthorized
from catalog.services.auth.dto import (
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserPublicOut,
)
from catalog.services.tokens.dto import TokenSubject
from catalog.services.tokens.service import TokenService

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
STALE_REFRESH = "Refresh token is no longer valid"
USERNAME_TAKEN = "User with this username already exists"
EMAIL_TAKEN = "User with this email already exists"


def to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


class AuthService(BaseService):
    """
    Session lifecycle service (register / login / refresh / logout).

    Expected failures come back as :class:`Err` values; the HTTP layer maps
    their kind to a status code. Refresh rotation is single-use: the stored
    token is swapped with a compare-and-swap update on the token value and
    row version, so replaying a rotated token or losing a concurrent race
    both end in ``UNAUTHORIZED``.
    """

    def __init__(self, *, tokens: TokenService, ctx: ServiceContext | None = None) -> None:
        """
        :param tokens: Token issuer used to mint and persist credentials.
        :param ctx: Request-scoped context (actor, cancellation).
        """
        super().__init__(ctx=ctx)
        self.tokens = tokens

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> Ok[UserPublicOut] | Err:
        """
        Create a user with role ``user``. No tokens are issued here.

        :param dto: Registration input.
        :returns: ``Ok(UserPublicOut)``; ``CONFLICT`` on a duplicate username
            or email; ``BAD_REQUEST`` when the model rejects a value.
        """
        self.checkpoint()
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_username(dto.username):
                    return conflict(USERNAME_TAKEN)
                if repo.exists_by_email(dto.email):
                    return conflict(EMAIL_TAKEN)

                user = User(username=dto.username, email=dto.email, role=ROLE_USER)
                user.password = dto.password
                repo.add(user)
                out = to_public(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration
            if violates(exc, "email"):
                return conflict(EMAIL_TAKEN)
            return conflict(USERNAME_TAKEN)
        except ValueError as exc:
            return Err(FailureKind.BAD_REQUEST, str(exc))

        log.info("auth.registered user_id=%s", out.id)
        return Ok(out)

    # ------------------------------------------------------------------ #
    # Credentials
    # ------------------------------------------------------------------ #

    def authenticate(self, dto: LoginIn) -> Ok[UserPublicOut] | Err:
        """
        Check credentials.

        Unknown users and wrong passwords produce the same failure.
        """
        self.checkpoint()
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(dto.username)
            if user is None or not user.verify_password(dto.password):
                log.info("auth.login_failed")
                return unauthorized(INVALID_CREDENTIALS)
            return Ok(to_public(user))

    def issue_session(self, user: UserPublicOut) -> Ok[TokenPairOut] | Err:
        """
        Persist a fresh refresh token, then mint the access token.

        Both happen inside one read-write unit of work: if minting fails the
        stored token is rolled back with it.

        :param user: Authenticated user.
        :returns: ``Ok(TokenPairOut)``; ``UNAUTHORIZED`` when the user was
            deleted since it was authenticated.
        """
        with self.rw_uow() as uow:
            stored = self.tokens.issue_refresh_token(user.id, uow=uow)
            if not stored.ok:
                return stored
            access = self.tokens.issue_access_token(
                TokenSubject(user_id=user.id, username=user.username, role=user.role)
            )
            self.checkpoint()
        return Ok(TokenPairOut(access_token=access, refresh_token=stored.value.token))

    def login(self, dto: LoginIn) -> Ok[TokenPairOut] | Err:
        result = self.authenticate(dto)
        if not result.ok:
            return result
        return self.issue_session(result.value)

    # ------------------------------------------------------------------ #
    # Refresh with compare-and-swap rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> Ok[TokenPairOut] | Err:
        """
        Rotate a refresh token and emit a new pair.

        1. Resolve the owner of the presented token (exact, unexpired).
        2. Swap it for a new one, predicated on the token and version read
           in step 1. Exactly one of several concurrent callers wins.
        3. Mint an access token for the winner.

        :param dto: Presented refresh token.
        :returns: ``Ok(TokenPairOut)`` or ``UNAUTHORIZED``.
        """
        found = self.tokens.resolve_user_by_refresh_token(dto.refresh_token)
        if not found.ok:
            log.info("auth.refresh_rejected reason=lookup")
            return found
        session = found.value

        now = self.now_utc()
        new_token = self.tokens.new_refresh_token()
        with self.rw_uow() as uow:
            swapped = uow.users.swap_refresh_token(
                user_id=session.user_id,
                expected_token=session.token,
                expected_version=session.version,
                new_token=new_token,
                expires_at=now + self.tokens.refresh_ttl,
                now=now,
            )
            if not swapped:
                log.warning("auth.refresh_conflict user_id=%s", session.user_id)
                return unauthorized(STALE_REFRESH)
            access = self.tokens.issue_access_token(session.subject)
            self.checkpoint()

        return Ok(TokenPairOut(access_token=access, refresh_token=new_token))

    # ------------------------------------------------------------------ #
    # Logout / profile
    # ------------------------------------------------------------------ #

    def logout(self, username: str) -> None:
        """Drop the stored refresh token of ``username``; unknown users are ignored."""
        with self.rw_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                return
            uow.users.clear_refresh_token(user.id)
        log.info("auth.logout username=%s", username)

    def me(self, username: str) -> Ok[UserPublicOut] | Err:
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                return Err(FailureKind.NOT_FOUND, "User not found")
            return Ok(to_public(user))

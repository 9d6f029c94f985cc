"""Authentication endpoints: register, login, refresh, logout, me."""

from __future__ import annotations

from datetime import timedelta

from flask import Blueprint, Response, current_app, request
from flask_jwt_extended import get_jwt_identity, set_access_cookies, unset_access_cookies

from catalog.api.deps import (
    anonymous_context,
    current_context,
    json_response,
    no_content,
    public_endpoint,
    timing,
    unwrap,
)
from catalog.core.errors import Unauthorized
from catalog.infra.jwt import JWTTokenProvider
from catalog.schemas import LoginSchema, RegisterSchema, TokenPairSchema, UserSchema
from catalog.services._shared.base import ServiceContext
from catalog.services.auth import AuthService, LoginIn, RefreshIn, RegisterIn, TokenPairOut
from catalog.services.tokens import TokenService

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


def _refresh_ttl() -> timedelta:
    return timedelta(days=int(current_app.config.get("REFRESH_TOKEN_TTL_DAYS", 7)))


def _auth_service(ctx: ServiceContext | None = None) -> AuthService:
    tokens = TokenService(token_provider=JWTTokenProvider(), refresh_ttl=_refresh_ttl(), ctx=ctx)
    return AuthService(tokens=tokens, ctx=ctx)


def _refresh_cookie_kwargs() -> dict:
    cfg = current_app.config
    return {
        "secure": bool(cfg.get("AUTH_COOKIE_SECURE", True)),
        "httponly": True,
        "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "None"),
        "path": "/",
    }


def _session_response(pair: TokenPairOut) -> Response:
    """Body ``{token, refreshToken}`` plus both cookies."""

    response = json_response(token_schema.dump(pair))
    set_access_cookies(response, pair.access_token)
    response.set_cookie(
        current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token"),
        pair.refresh_token,
        max_age=int(_refresh_ttl().total_seconds()),
        **_refresh_cookie_kwargs(),
    )
    return response


@bp.post("/register")
@public_endpoint
@timing
def register():
    """Create an account and open a session for it."""

    data = register_schema.load(request.get_json(silent=True) or {})
    service = _auth_service(anonymous_context())
    user = unwrap(service.register(RegisterIn(**data)))
    return _session_response(unwrap(service.issue_session(user)))


@bp.post("/login")
@public_endpoint
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = unwrap(_auth_service(anonymous_context()).login(LoginIn(**data)))
    return _session_response(pair)


@bp.post("/refresh")
@public_endpoint
@timing
def refresh():
    """Rotate the refresh token carried by the ``refresh_token`` cookie."""

    token = request.cookies.get(current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token"))
    if not token:
        raise Unauthorized("Refresh token is missing")
    pair = unwrap(_auth_service(anonymous_context()).refresh(RefreshIn(refresh_token=token)))
    return _session_response(pair)


@bp.post("/logout")
@timing
def logout():
    """End the session server-side and clear both cookies."""

    ctx = current_context()
    _auth_service(ctx).logout(get_jwt_identity())
    response = no_content()
    unset_access_cookies(response)
    response.delete_cookie(
        current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token"), **_refresh_cookie_kwargs()
    )
    return response


@bp.get("/me")
@timing
def me():
    ctx = current_context()
    user = unwrap(_auth_service(ctx).me(get_jwt_identity()))
    return json_response(user_schema.dump(user))

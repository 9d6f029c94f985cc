# catalog/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask import current_app

from catalog.core.config import ConfigurationError
from catalog.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Issuer, audience, algorithm and the default lifetime come from the app
    config (see :func:`catalog.core.extensions._derive_jwt_settings`).

    .. note::
       Requires an active Flask app context.
    """

    def _require_secret(self) -> None:
        if not current_app.config.get("JWT_SECRET_KEY"):
            raise ConfigurationError("JWT_SECRET_KEY is not configured.")

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        # flask-jwt-extended generates a unique jti per token.
        from flask_jwt_extended import create_access_token as _create_access

        self._require_secret()
        return cast(
            str,
            _create_access(
                identity=identity,
                additional_claims=dict(additional_claims or {}),
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        self._require_secret()
        return cast(dict[str, Any], decode_token(token))

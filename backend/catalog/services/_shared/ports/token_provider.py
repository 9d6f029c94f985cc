from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for minting and decoding signed access tokens."""

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

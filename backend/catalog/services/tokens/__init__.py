from .dto import IssuedRefreshToken, RefreshSession, TokenSubject
from .service import TokenService

__all__ = ["IssuedRefreshToken", "RefreshSession", "TokenService", "TokenSubject"]

from .dto import AuthorCreateIn, AuthorListIn, AuthorListOut, AuthorOut, AuthorUpdateIn
from .service import AuthorService

__all__ = [
    "AuthorCreateIn",
    "AuthorListIn",
    "AuthorListOut",
    "AuthorOut",
    "AuthorService",
    "AuthorUpdateIn",
]

from .dto import (
    BookCreateIn,
    BookListIn,
    BookListOut,
    BookOut,
    BookUpdateIn,
    BorrowIn,
    CoverUploadIn,
)
from .service import BookService

__all__ = [
    "BookCreateIn",
    "BookListIn",
    "BookListOut",
    "BookOut",
    "BookService",
    "BookUpdateIn",
    "BorrowIn",
    "CoverUploadIn",
]

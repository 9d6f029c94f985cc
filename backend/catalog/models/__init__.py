from catalog.models.author import Author
from catalog.models.book import Book
from catalog.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Author",
    "Book",
    "ROLE_ADMIN",
    "ROLE_USER",
    "User",
]

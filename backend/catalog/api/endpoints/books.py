"""Book endpoints, including borrow/return and cover uploads."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from flask import Blueprint, current_app, request

from catalog.api.deps import (
    current_context,
    json_response,
    no_content,
    parse_pagination,
    permission_required,
    public_url,
    timing,
)
from catalog.core.errors import BadRequest
from catalog.infra.storage import LocalImageStore
from catalog.schemas import (
    BookCreateSchema,
    BookFilterSchema,
    BookSchema,
    BookUpdateSchema,
    BorrowSchema,
    build_meta,
)
from catalog.services._shared.policies.access import (
    BOOKS_BORROW,
    CATALOG_DELETE,
    CATALOG_READ,
    CATALOG_UPDATE,
    CATALOG_WRITE,
)
from catalog.services.books import (
    BookCreateIn,
    BookListIn,
    BookOut,
    BookService,
    BookUpdateIn,
    BorrowIn,
    CoverUploadIn,
)

bp = Blueprint("books", __name__)

book_schema = BookSchema()
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_filter_schema = BookFilterSchema()
borrow_schema = BorrowSchema()


def dump_book(book: BookOut) -> dict[str, Any]:
    """Serialize a book and add the absolute cover URL."""

    data = book_schema.dump(book)
    data["imageUrl"] = public_url(book.image_path)
    return data


def dump_books(books: Iterable[BookOut]) -> list[dict[str, Any]]:
    return [dump_book(b) for b in books]


def _service() -> BookService:
    store = LocalImageStore(directory=current_app.config["COVER_IMAGES_DIR"])
    return BookService(ctx=current_context(), image_store=store)


@bp.get("")
@permission_required(CATALOG_READ)
@timing
def list_books():
    """Return paginated books."""

    filters = book_filter_schema.load(request.args)
    pagination = parse_pagination()
    result = _service().list_books(BookListIn(pagination=pagination, **filters))
    return json_response({"data": dump_books(result.items), "meta": build_meta(result.meta)})


@bp.get("/<uuid:book_id>")
@permission_required(CATALOG_READ)
@timing
def get_book(book_id: uuid.UUID):
    return json_response(dump_book(_service().get_book(book_id)))


@bp.get("/isbn/<string:isbn>")
@permission_required(CATALOG_READ)
@timing
def get_book_by_isbn(isbn: str):
    return json_response(dump_book(_service().get_by_isbn(isbn)))


@bp.post("")
@permission_required(CATALOG_WRITE)
@timing
def create_book():
    data = book_create_schema.load(request.get_json(silent=True) or {})
    book = _service().create_book(BookCreateIn(**data))
    return json_response(dump_book(book), status=201)


@bp.put("/<uuid:book_id>")
@permission_required(CATALOG_UPDATE)
@timing
def update_book(book_id: uuid.UUID):
    data = book_update_schema.load(request.get_json(silent=True) or {}, partial=True)
    if not data:
        raise BadRequest("No fields to update")
    book = _service().update_book(BookUpdateIn(book_id=book_id, fields=data))
    return json_response(dump_book(book))


@bp.delete("/<uuid:book_id>")
@permission_required(CATALOG_DELETE)
@timing
def delete_book(book_id: uuid.UUID):
    _service().delete_book(book_id)
    return no_content()


@bp.post("/<uuid:book_id>/borrow")
@permission_required(BOOKS_BORROW)
@timing
def borrow_book(book_id: uuid.UUID):
    data = borrow_schema.load(request.get_json(silent=True) or {})
    book = _service().borrow(BorrowIn(book_id=book_id, due_date=data["due_date"]))
    return json_response(dump_book(book))


@bp.post("/<uuid:book_id>/return")
@permission_required(BOOKS_BORROW)
@timing
def return_book(book_id: uuid.UUID):
    return json_response(dump_book(_service().return_book(book_id)))


@bp.post("/<uuid:book_id>/image")
@permission_required(CATALOG_UPDATE)
@timing
def upload_cover(book_id: uuid.UUID):
    """Attach a cover image sent as multipart field ``image``."""

    upload = request.files.get("image")
    if upload is None or not upload.filename:
        raise BadRequest("No image file provided")
    book = _service().attach_cover(
        CoverUploadIn(book_id=book_id, filename=upload.filename, stream=upload.stream)
    )
    return json_response({"imagePath": book.image_path, "imageUrl": public_url(book.image_path)})

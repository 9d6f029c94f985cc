"""Author endpoints."""

from __future__ import annotations

import uuid

from flask import Blueprint, request

from catalog.api.deps import (
    current_context,
    json_response,
    no_content,
    parse_pagination,
    permission_required,
    timing,
)
from catalog.api.endpoints.books import dump_books
from catalog.core.errors import BadRequest
from catalog.schemas import (
    AuthorCreateSchema,
    AuthorFilterSchema,
    AuthorSchema,
    AuthorUpdateSchema,
    build_meta,
)
from catalog.services._shared.policies.access import (
    CATALOG_DELETE,
    CATALOG_READ,
    CATALOG_UPDATE,
    CATALOG_WRITE,
)
from catalog.services.authors import AuthorCreateIn, AuthorListIn, AuthorService, AuthorUpdateIn

bp = Blueprint("authors", __name__)

author_schema = AuthorSchema()
author_list_schema = AuthorSchema(many=True)
author_create_schema = AuthorCreateSchema()
author_update_schema = AuthorUpdateSchema()
author_filter_schema = AuthorFilterSchema()


@bp.get("")
@permission_required(CATALOG_READ)
@timing
def list_authors():
    """Return paginated authors."""

    filters = author_filter_schema.load(request.args)
    pagination = parse_pagination()
    result = AuthorService(ctx=current_context()).list_authors(
        AuthorListIn(pagination=pagination, country=filters["country"])
    )
    return json_response(
        {"data": author_list_schema.dump(result.items), "meta": build_meta(result.meta)}
    )


@bp.get("/<uuid:author_id>")
@permission_required(CATALOG_READ)
@timing
def get_author(author_id: uuid.UUID):
    author = AuthorService(ctx=current_context()).get_author(author_id)
    return json_response(author_schema.dump(author))


@bp.get("/<uuid:author_id>/books")
@permission_required(CATALOG_READ)
@timing
def author_books(author_id: uuid.UUID):
    books = AuthorService(ctx=current_context()).books_of(author_id)
    return json_response({"data": dump_books(books)})


@bp.post("")
@permission_required(CATALOG_WRITE)
@timing
def create_author():
    data = author_create_schema.load(request.get_json(silent=True) or {})
    author = AuthorService(ctx=current_context()).create_author(AuthorCreateIn(**data))
    return json_response(author_schema.dump(author), status=201)


@bp.put("/<uuid:author_id>")
@permission_required(CATALOG_UPDATE)
@timing
def update_author(author_id: uuid.UUID):
    data = author_update_schema.load(request.get_json(silent=True) or {}, partial=True)
    if not data:
        raise BadRequest("No fields to update")
    author = AuthorService(ctx=current_context()).update_author(
        AuthorUpdateIn(author_id=author_id, fields=data)
    )
    return json_response(author_schema.dump(author))


@bp.delete("/<uuid:author_id>")
@permission_required(CATALOG_DELETE)
@timing
def delete_author(author_id: uuid.UUID):
    AuthorService(ctx=current_context()).delete_author(author_id)
    return no_content()

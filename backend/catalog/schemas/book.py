"""Book resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

# Raw ISBNs may carry hyphens/spaces; the model normalizes and re-checks length.
_ISBN = validate.Length(min=10, max=17)


class BookCreateSchema(Schema):
    """Payload for creating a book."""

    isbn = fields.String(required=True, validate=_ISBN)
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    genre = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(required=True, validate=validate.Length(min=1))
    author_id = fields.UUID(required=True, data_key="authorId")


class BookUpdateSchema(BookCreateSchema):
    """Payload for updating a book; load with ``partial=True``."""


class BookFilterSchema(Schema):
    """Supported query parameters for listing books."""

    class Meta:
        unknown = EXCLUDE

    genre = fields.String(load_default=None, validate=validate.Length(min=1, max=100))
    author_id = fields.UUID(load_default=None, data_key="authorId")
    is_borrowed = fields.Boolean(load_default=None, data_key="isBorrowed")


class BorrowSchema(Schema):
    due_date = fields.DateTime(required=True, data_key="dueDate")


class BookSchema(Schema):
    """Public representation of a book."""

    id = fields.UUID(required=True)
    isbn = fields.String()
    title = fields.String()
    genre = fields.String()
    description = fields.String()
    author_id = fields.UUID(data_key="authorId")
    author_name = fields.String(data_key="authorName", allow_none=True)
    is_borrowed = fields.Boolean(data_key="isBorrowed")
    borrowed_at = fields.DateTime(data_key="borrowedAt", allow_none=True)
    due_date = fields.DateTime(data_key="dueDate", allow_none=True)
    borrowed_by_id = fields.UUID(data_key="borrowedById", allow_none=True)
    image_path = fields.String(data_key="imagePath", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)

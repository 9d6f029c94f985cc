"""Author resource schemas."""

from __future__ import annotations

from datetime import date

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates


class AuthorCreateSchema(Schema):
    """Payload for creating an author."""

    first_name = fields.String(
        required=True, data_key="firstName", validate=validate.Length(min=1, max=100)
    )
    last_name = fields.String(
        required=True, data_key="lastName", validate=validate.Length(min=1, max=100)
    )
    date_of_birth = fields.Date(required=True, data_key="dateOfBirth")
    country = fields.String(required=True, validate=validate.Length(min=1, max=100))

    @validates("date_of_birth")
    def _in_the_past(self, value: date, **_kwargs) -> None:
        if value >= date.today():
            raise ValidationError("Date of birth must be in the past.")


class AuthorUpdateSchema(AuthorCreateSchema):
    """Payload for updating an author; load with ``partial=True``."""


class AuthorFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    country = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class AuthorSchema(Schema):
    """Public representation of an author."""

    id = fields.UUID(required=True)
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    date_of_birth = fields.Date(data_key="dateOfBirth")
    country = fields.String()
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)

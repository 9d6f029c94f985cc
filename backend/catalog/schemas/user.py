"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from catalog.models.user import ROLES


class UserFilterSchema(Schema):
    """Supported query parameters for listing users."""

    class Meta:
        unknown = EXCLUDE

    role = fields.String(load_default=None, validate=validate.OneOf(sorted(ROLES)))


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    role = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)

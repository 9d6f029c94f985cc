"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from catalog.services._shared.dto import PageMeta


class SortQuerySchema(Schema):
    """Parse comma-separated ``sort`` query parameters into a list."""

    class Meta:
        unknown = EXCLUDE

    sort = fields.String(load_default="")

    @post_load
    def split_sort(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        if isinstance(raw, str):
            data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        return data


class PaginationQuerySchema(SortQuerySchema):
    """Validate pagination parameters with configurable defaults.

    Resource filters travel in the same query string, so unknown keys are
    ignored here and validated by the resource's filter schema.
    """

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    has_prev = fields.Boolean(data_key="hasPrev")
    has_next = fields.Boolean(data_key="hasNext")


_meta_schema = MetaSchema()


def build_meta(meta: PageMeta) -> dict[str, Any]:
    """Return a ``meta`` mapping for paginated responses."""

    return _meta_schema.dump(meta)

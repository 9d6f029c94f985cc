"""User administration endpoints."""

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
from catalog.schemas import UserFilterSchema, UserSchema, build_meta
from catalog.services._shared.policies.access import USERS_MANAGE
from catalog.services.users import UserAdminService, UserListIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_filter_schema = UserFilterSchema()


@bp.get("")
@permission_required(USERS_MANAGE)
@timing
def list_users():
    """Return paginated users."""

    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    result = UserAdminService(ctx=current_context()).list_users(
        UserListIn(pagination=pagination, role=filters["role"])
    )
    return json_response({"data": user_list_schema.dump(result.items), "meta": build_meta(result.meta)})


@bp.get("/<uuid:user_id>")
@permission_required(USERS_MANAGE)
@timing
def get_user(user_id: uuid.UUID):
    user = UserAdminService(ctx=current_context()).get_user(user_id)
    return json_response(user_schema.dump(user))


@bp.delete("/<uuid:user_id>")
@permission_required(USERS_MANAGE)
@timing
def delete_user(user_id: uuid.UUID):
    UserAdminService(ctx=current_context()).delete_user(user_id)
    return no_content()

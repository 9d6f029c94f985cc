"""Public cover image serving."""

from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

from catalog.api.deps import public_endpoint

bp = Blueprint("images", __name__)


@bp.get("/images/<path:filename>")
@public_endpoint
def serve_image(filename: str):
    return send_from_directory(current_app.config["COVER_IMAGES_DIR"], filename)

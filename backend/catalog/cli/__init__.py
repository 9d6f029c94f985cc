"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .commands import db_init, users_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI commands.

    :param app: Flask application whose CLI registry receives ``db-init`` and
        the ``users`` group.
    """
    app.cli.add_command(db_init)
    app.cli.add_command(users_cli)

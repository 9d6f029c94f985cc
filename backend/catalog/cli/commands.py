"""Flask CLI commands for schema creation and account provisioning."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from catalog.core.extensions import db
from catalog.infra.jwt import JWTTokenProvider
from catalog.models.user import ROLE_ADMIN
from catalog.services.auth import AuthService, RegisterIn
from catalog.services.auth.service import to_public
from catalog.services.tokens import TokenService
from catalog.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.command("db-init")
@with_appcontext
def db_init() -> None:
    """Create every table known to the model metadata."""
    db.create_all()
    click.echo("Database schema created.")


@click.group("users")
def users_cli() -> None:
    """Manage user accounts."""


@users_cli.command("create")
@click.argument("username")
@click.argument("email")
@click.option("--admin", is_flag=True, help="Grant the admin role.")
@click.password_option(help="Password for the new account.")
@with_appcontext
def create_user(username: str, email: str, admin: bool, password: str) -> None:
    """Create a user; ``--admin`` promotes it to administrator."""
    service = AuthService(tokens=TokenService(token_provider=JWTTokenProvider()))
    result = service.register(RegisterIn(username=username, email=email, password=password))
    if not result.ok:
        raise click.ClickException(result.message)

    user = result.value
    if admin:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.users.get(user.id)
            row.role = ROLE_ADMIN
            uow.session.flush()
            user = to_public(row)
    LOGGER.info("cli.user_created user_id=%s role=%s", user.id, user.role)
    click.echo(f"Created {user.role} '{user.username}' ({user.id}).")


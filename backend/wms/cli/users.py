"""Flask CLI commands for user administration."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from wms.core.auth import get_auth
from wms.services._shared.errors import EmailAlreadyRegisteredError


@click.group("users")
def users_cli() -> None:
    """User administration commands."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.option(
    "--password",
    required=True,
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted when omitted).",
)
@click.option("--full-name", default=None, help="Optional display name.")
@with_appcontext
def create_admin_command(email: str, password: str, full_name: str | None) -> None:
    """Create an administrator account."""
    if len(password) < 8:
        raise click.BadParameter("must be at least 8 characters", param_hint="--password")
    try:
        user = get_auth().registration.create_admin(email, password, full_name)
    except EmailAlreadyRegisteredError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Created admin user id={user.id} email={user.email}")

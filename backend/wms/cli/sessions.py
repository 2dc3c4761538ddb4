"""Flask CLI commands for refresh-session housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from wms.core.auth import get_auth

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Refresh-session maintenance commands."""


@sessions_cli.command("purge")
@with_appcontext
def purge_command() -> None:
    """Delete sessions whose refresh token has expired.

    Safe to run from cron at any frequency; active and revoked-but-unexpired
    rows are kept so reuse detection keeps working until expiry.
    """
    purged = get_auth().manager.purge_expired()
    LOGGER.info("sessions purge finished", extra={"purged": purged})
    click.echo(f"Purged {purged} expired session(s).")

"""Tests for the ``flask users`` and ``flask sessions`` command groups."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.factories.session import AuthSessionFactory
from tests.factories.user import UserFactory
from wms.models.base import utcnow
from wms.models.session import AuthSession
from wms.models.user import Role, User


@pytest.fixture()
def runner(app, session):
    return app.test_cli_runner()


def test_create_admin(runner, session):
    result = runner.invoke(
        args=["users", "create-admin", "--email", "Boss@Example.com", "--password", "s3cret-pass"]
    )

    assert result.exit_code == 0, result.output
    assert "Created admin user" in result.output
    user = session.query(User).filter_by(email="boss@example.com").one()
    assert user.role is Role.ADMIN


def test_create_admin_rejects_short_password(runner):
    result = runner.invoke(
        args=["users", "create-admin", "--email", "boss@example.com", "--password", "short"]
    )

    assert result.exit_code == 2
    assert "must be at least 8 characters" in result.output


def test_create_admin_duplicate_email(runner, session):
    UserFactory(email="taken@example.com")
    session.commit()

    result = runner.invoke(
        args=["users", "create-admin", "--email", "taken@example.com", "--password", "s3cret-pass"]
    )

    assert result.exit_code == 1
    assert "Email already registered" in result.output


def test_sessions_purge(runner, session):
    now = utcnow()
    AuthSessionFactory(created_at=now - timedelta(days=8), expires_at=now - timedelta(days=1))
    live = AuthSessionFactory()
    session.commit()
    live_id = live.id

    result = runner.invoke(args=["sessions", "purge"])

    assert result.exit_code == 0, result.output
    assert "Purged 1 expired session(s)." in result.output
    assert session.query(AuthSession).filter_by(id=live_id).count() == 1

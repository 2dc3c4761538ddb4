"""Unit tests for the ``AuthSession`` model."""

from datetime import UTC, datetime

from tests.factories.session import AuthSessionFactory
from tests.factories.user import UserFactory
from wms.models.session import AuthSession
from wms.models.user import User


def test_timestamps_come_back_timezone_aware(session):
    row = AuthSessionFactory(expires_at=datetime(2030, 1, 1, 12, 0))
    session.commit()
    session.expire_all()

    loaded = session.get(AuthSession, row.id)
    assert loaded.expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
    assert loaded.created_at.tzinfo is not None


def test_child_references_parent(session):
    root = AuthSessionFactory()
    child = AuthSessionFactory(
        user=root.user, token_family=root.token_family, parent_token_id=root.id
    )
    session.flush()

    assert child.parent_token_id == root.id
    assert {s.id for s in root.user.sessions} == {root.id, child.id}


def test_deleting_user_cascades_to_sessions(session):
    user = UserFactory()
    AuthSessionFactory(user=user)
    AuthSessionFactory(user=user)
    session.flush()

    session.delete(user)
    session.flush()

    assert session.query(AuthSession).filter_by(user_id=user.id).count() == 0
    assert session.get(User, user.id) is None


def test_new_rows_start_unrevoked(session):
    row = AuthSessionFactory()
    session.flush()
    session.refresh(row)

    assert row.is_revoked is False
    assert row.parent_token_id is None

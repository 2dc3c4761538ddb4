"""
Unit tests for the writer and read-only SQLAlchemy Units of Work.
"""

from __future__ import annotations

import pytest
from sqlalchemy import text

from tests.factories.user import UserFactory
from wms.models import User
from wms.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from wms.uow import SQLAlchemyUnitOfWork as RWuow


class TestSQLAlchemyUnitOfWorkWriter:
    def test_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the block
        THEN nothing is persisted.
        """
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial

    def test_repositories_share_the_session(self, session):
        with RWuow() as uow:
            assert uow.users.session is uow.sessions.session is uow.session


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("INSERT INTO users (email, password_hash) VALUES (:email, 'x')"),
                {"email": "ro@example.com"},
            )

    def test_allows_reads(self, session):
        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="reader@example.com"))

        with ROuow() as uow:
            assert uow.users.get_by_email("reader@example.com") is not None

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self, session):
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="after-ro@example.com"))

        assert session.query(User).filter_by(email="after-ro@example.com").count() == 1

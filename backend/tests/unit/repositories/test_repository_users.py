"""Unit tests for UserRepository."""

import pytest

from tests.factories.user import UserFactory
from wms.repositories.user import UserRepository


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_create_and_get_user(self, repo, session):
        """Create a user and fetch it by email to verify retrieval."""
        u = UserFactory(email="alice@example.com")
        session.commit()

        fetched = repo.get_by_email("alice@example.com")
        assert fetched is not None
        assert fetched.id == u.id
        assert repo.get(u.id) is fetched

    def test_get_by_email_normalizes_input(self, repo, session):
        UserFactory(email="carol@example.com")
        session.flush()

        assert repo.get_by_email("  CAROL@example.com ") is not None

    def test_exists_by_email(self, repo, session):
        """Return existence flags for known and unknown email addresses."""
        UserFactory(email="bob@example.com")
        session.commit()

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")

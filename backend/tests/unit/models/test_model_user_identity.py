"""Unit tests for the ``User`` model and ``Role`` enumeration."""

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories.user import UserFactory
from wms.models.user import Role, User


class TestRole:
    @pytest.mark.parametrize("raw", [None, ""])
    def test_parse_defaults_to_user(self, raw):
        assert Role.parse(raw) is Role.USER

    def test_parse_accepts_members_and_mixed_case(self):
        assert Role.parse(Role.ADMIN) is Role.ADMIN
        assert Role.parse(" ReadOnly ") is Role.READONLY

    def test_parse_rejects_unknown_values(self):
        with pytest.raises(ValueError):
            Role.parse("superuser")


class TestUserModel:
    def test_email_is_normalized(self, session):
        user = UserFactory(email="  Alice@Example.COM ")
        assert user.email == "alice@example.com"

    def test_email_must_look_valid(self, session):
        with pytest.raises(ValueError):
            User(email="not-an-email", password_hash="x")

    def test_defaults_on_insert(self, session):
        user = User(email="defaults@example.com", password_hash="x")
        session.add(user)
        session.flush()
        session.refresh(user)

        assert user.role is Role.USER
        assert user.is_active is True
        assert user.created_at.tzinfo is not None

    def test_role_round_trips_as_enum(self, session):
        user = UserFactory(role=Role.READONLY)
        session.commit()
        session.expire_all()

        assert session.get(User, user.id).role is Role.READONLY

    def test_email_is_unique(self, session):
        UserFactory(email="dup@example.com")
        with pytest.raises(IntegrityError):
            UserFactory(email="dup@example.com")

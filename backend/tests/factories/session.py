"""Factory Boy definition for :class:`wms.models.session.AuthSession`."""

from __future__ import annotations

from datetime import timedelta

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from wms.models.base import utcnow
from wms.models.session import AuthSession
from wms.services._shared.ports.session_store import new_refresh_token, new_token_family


class AuthSessionFactory(BaseFactory):
    """Build persisted family roots; pass ``parent_token_id`` for children."""

    class Meta:
        model = AuthSession

    id = None
    user = factory.SubFactory(UserFactory)
    refresh_token = factory.LazyFunction(new_refresh_token)
    token_family = factory.LazyFunction(new_token_family)
    is_revoked = False
    device_name = "Firefox / Linux"
    ip_address = factory.Faker("ipv4")
    user_agent = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
    created_at = factory.LazyFunction(utcnow)
    last_used_at = factory.LazyAttribute(lambda o: o.created_at)
    expires_at = factory.LazyAttribute(lambda o: o.created_at + timedelta(days=7))
    parent_token_id = None

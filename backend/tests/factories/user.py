"""Factory Boy definition for :class:`wms.models.user.User`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from wms.core.config import TestingConfig
from wms.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from wms.models.user import Role, User

DEFAULT_PASSWORD = "Passw0rd!"

_hasher = WerkzeugPasswordHasher(method=TestingConfig.PASSWORD_HASH_METHOD)


class UserFactory(BaseFactory):
    """
    Build persisted :class:`wms.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter: pass ``password="..."`` to pick the
      plaintext, the stored value is always a hash.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = factory.Faker("name")
    role = Role.USER
    is_active = True
    password_hash = factory.LazyAttribute(lambda o: _hasher.hash(o.password))

    class Params:
        password = DEFAULT_PASSWORD


class AdminFactory(UserFactory):
    role = Role.ADMIN

"""
RegistrationService
===================

Creates user identities:

- Normalizes the email and rejects duplicates, including the race where two
  registrations pass the existence check concurrently (unique constraint).
- Defaults the role to ``user`` and rejects anything outside the enumeration.
- Hashes passwords through the injected :class:`PasswordHasher`.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from wms.models.user import Role, User
from wms.services._shared.base import BaseService, ServiceContext
from wms.services._shared.errors import (
    EmailAlreadyRegisteredError,
    InvalidRoleError,
    NotFoundError,
)
from wms.services._shared.ports.password_hasher import PasswordHasher
from wms.services.registration.dto import RegisterIn, UserOut

log = logging.getLogger(__name__)


class RegistrationService(BaseService):
    """Orchestrates user registration and user lookups."""

    def __init__(self, *, hasher: PasswordHasher, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.hasher = hasher

    def register(self, dto: RegisterIn) -> UserOut:
        """
        Register a user.

        :param dto: Registration input.
        :returns: Created user.
        :raises InvalidRoleError: Role outside ``{user, admin, readonly}``.
        :raises EmailAlreadyRegisteredError: Email already taken.
        """
        try:
            role = Role.parse(dto.role)
        except ValueError:
            raise InvalidRoleError() from None
        return self._create(
            email=dto.email, password=dto.password, full_name=dto.full_name, role=role
        )

    def create_admin(self, email: str, password: str, full_name: str | None = None) -> UserOut:
        """Bootstrap an administrator account (CLI)."""
        return self._create(email=email, password=password, full_name=full_name, role=Role.ADMIN)

    def get_user(self, user_id: int) -> UserOut:
        """
        :raises NotFoundError: When the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._to_out(user)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _create(self, *, email: str, password: str, full_name: str | None, role: Role) -> UserOut:
        norm_email = email.lower().strip()
        password_hash = self.hasher.hash(password)
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(norm_email):
                    raise EmailAlreadyRegisteredError()
                user = uow.users.add(
                    User(
                        email=norm_email,
                        password_hash=password_hash,
                        full_name=(full_name or "").strip() or None,
                        role=role,
                        is_active=True,
                    )
                )
                out = self._to_out(user)
        except IntegrityError:
            # Lost a concurrent registration race on the unique email index.
            raise EmailAlreadyRegisteredError() from None

        log.info("user registered", extra={"user_id": out.id, "role": out.role.value})
        return out

    @staticmethod
    def _to_out(user: User) -> UserOut:
        return UserOut(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=Role.parse(user.role),
            is_active=bool(user.is_active),
            created_at=user.created_at,
        )

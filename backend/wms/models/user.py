"""User model and role enumeration."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, true
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from wms.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .session import AuthSession


class Role(str, Enum):
    """Closed set of roles a principal can hold."""

    USER = "user"
    ADMIN = "admin"
    READONLY = "readonly"

    @classmethod
    def parse(cls, value: str | Role | None) -> Role:
        """Coerce a raw value into a :class:`Role`.

        :param value: Role name; ``None`` or empty defaults to ``user``.
        :raises ValueError: If ``value`` is outside the enumeration.
        """
        if value is None or value == "":
            return cls.USER
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authenticated identity of the inventory API.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed) and unique.
    password_hash : str
        Opaque hash produced by the configured password hasher.
    full_name : str | None
        Optional display name.
    role : Role
        Authorization role (``user``, ``admin`` or ``readonly``).
    is_active : bool
        Inactive accounts cannot log in or refresh.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role,
            name="user_role",
            native_enum=False,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=Role.USER,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    sessions: Mapped[list[AuthSession]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and minimally validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Full validation happens at the API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

"""Refresh-session rows forming per-login rotation chains."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wms.core.extensions import db

from .base import PKMixin, ReprMixin, UTCDateTime, utcnow

if TYPE_CHECKING:
    from .user import User


class AuthSession(PKMixin, ReprMixin, db.Model):
    """
    One refresh token issued to one device.

    Every login creates a *family* root (``parent_token_id`` is NULL). Each
    successful refresh revokes the presented row and inserts exactly one child
    carrying the same ``token_family``. Apart from flipping ``is_revoked`` and
    touching ``last_used_at`` a row is never modified.

    Fields
    ------
    refresh_token : str
        Opaque random token, globally unique.
    token_family : str
        Identifier shared by all rows descending from the same login.
    device_name, ip_address, user_agent : str | None
        Client metadata captured at issue time; ``None`` when unknown.
    parent_token_id : int | None
        Row this one was rotated from. Set to NULL if the parent is purged.
    """

    __tablename__ = "sessions"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    refresh_token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    token_family: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    is_revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    device_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    last_used_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    parent_token_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True
    )

    user: Mapped[User] = relationship(back_populates="sessions")

    __table_args__ = (Index("ix_sessions_user_id_is_revoked", "user_id", "is_revoked"),)

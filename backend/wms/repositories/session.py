"""Repository for refresh-session rows."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import cast

from sqlalchemy import select

from wms.models.session import AuthSession
from wms.repositories.base import BaseRepository


class SessionRepository(BaseRepository[AuthSession]):
    """Persistence-only repository for :class:`AuthSession`.

    Revocation helpers only ever flip ``is_revoked`` from false to true, and
    return how many rows actually changed so callers can detect lost races
    and keep revocations idempotent.
    """

    model = AuthSession

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_token(self, refresh_token: str) -> AuthSession | None:
        """Fetch the session holding ``refresh_token`` (revoked or not)."""
        stmt = select(AuthSession).where(AuthSession.refresh_token == refresh_token)
        return cast(AuthSession | None, self.session.execute(stmt).scalars().first())

    def list_active_for_user(self, user_id: int, *, now: datetime) -> Sequence[AuthSession]:
        """Unrevoked, unexpired sessions of a user, most recently used first."""
        stmt = (
            select(AuthSession)
            .where(
                AuthSession.user_id == user_id,
                AuthSession.is_revoked.is_(False),
                AuthSession.expires_at > now,
            )
            .order_by(AuthSession.last_used_at.desc(), AuthSession.id.desc())
        )
        return self.session.execute(stmt).scalars().all()

    def list_family(self, token_family: str) -> Sequence[AuthSession]:
        """Every row of a token family in creation order."""
        stmt = (
            select(AuthSession)
            .where(AuthSession.token_family == token_family)
            .order_by(AuthSession.id.asc())
        )
        return self.session.execute(stmt).scalars().all()

    # ---------------------------- Revocation ----------------------------

    def revoke_if_active(self, session_id: int, *, now: datetime | None = None) -> int:
        """Compare-and-set revoke of a single row.

        :param session_id: Row to revoke.
        :param now: When given, ``last_used_at`` is touched in the same statement.
        :returns: ``1`` if this call flipped the row, ``0`` if it was already
            revoked (or does not exist).
        """
        values: dict[str, object] = {"is_revoked": True}
        if now is not None:
            values["last_used_at"] = now
        return self._bulk_update(
            AuthSession.id == session_id,
            AuthSession.is_revoked.is_(False),
            values=values,
        )

    def revoke_all_for_user(self, user_id: int) -> int:
        """Revoke every still-active session of ``user_id``."""
        return self._bulk_update(
            AuthSession.user_id == user_id,
            AuthSession.is_revoked.is_(False),
            values={"is_revoked": True},
        )

    def revoke_family(self, token_family: str) -> int:
        """Revoke every still-active member of ``token_family``."""
        return self._bulk_update(
            AuthSession.token_family == token_family,
            AuthSession.is_revoked.is_(False),
            values={"is_revoked": True},
        )

    # ---------------------------- Housekeeping ----------------------------

    def delete_expired(self, *, now: datetime) -> int:
        """Hard-delete rows whose ``expires_at`` lies before ``now``."""
        return self._bulk_delete(AuthSession.expires_at < now)

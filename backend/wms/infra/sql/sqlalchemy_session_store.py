# wms/infra/sql/sqlalchemy_session_store.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from wms.models.base import utcnow
from wms.models.session import AuthSession
from wms.services._shared.errors import NotFoundError, SessionAlreadyRevokedError
from wms.services._shared.ports.session_store import (
    DeviceInfo,
    SessionRecord,
    SessionStore,
    new_refresh_token,
    new_token_family,
)
from wms.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def _to_record(row: AuthSession) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        user_id=row.user_id,
        refresh_token=row.refresh_token,
        token_family=row.token_family,
        is_revoked=bool(row.is_revoked),
        expires_at=row.expires_at,
        created_at=row.created_at,
        last_used_at=row.last_used_at,
        parent_token_id=row.parent_token_id,
        device_name=row.device_name,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
    )


class SQLAlchemySessionStore(SessionStore):
    """
    Relational session store.

    Each call runs in its own Unit of Work. Rotation claims the parent with a
    guarded ``UPDATE ... WHERE is_revoked = false`` and inserts the child in
    the same transaction; when the claim matches no row the exception rolls
    the unit back and nothing is written.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow
        self._clock = clock

    # ------------------------- writes -------------------------

    def create(self, *, user_id: int, device: DeviceInfo, expires_at: datetime) -> SessionRecord:
        now = self._clock()
        with self._rw_uow() as uow:
            row = uow.sessions.add(
                AuthSession(
                    user_id=user_id,
                    refresh_token=new_refresh_token(),
                    token_family=new_token_family(),
                    is_revoked=False,
                    device_name=device.device_name,
                    ip_address=device.ip_address,
                    user_agent=device.user_agent,
                    created_at=now,
                    last_used_at=now,
                    expires_at=expires_at,
                    parent_token_id=None,
                )
            )
            record = _to_record(row)
        return record

    def rotate(self, old: SessionRecord, *, expires_at: datetime) -> SessionRecord:
        now = self._clock()
        with self._rw_uow() as uow:
            if uow.sessions.revoke_if_active(old.id, now=now) == 0:
                raise SessionAlreadyRevokedError()
            row = uow.sessions.add(
                AuthSession(
                    user_id=old.user_id,
                    refresh_token=new_refresh_token(),
                    token_family=old.token_family,
                    is_revoked=False,
                    device_name=old.device_name,
                    ip_address=old.ip_address,
                    user_agent=old.user_agent,
                    created_at=now,
                    last_used_at=now,
                    expires_at=expires_at,
                    parent_token_id=old.id,
                )
            )
            record = _to_record(row)
        return record

    def revoke(self, session_id: int) -> int:
        with self._rw_uow() as uow:
            return uow.sessions.revoke_if_active(session_id)

    def revoke_all_for_user(self, user_id: int) -> int:
        with self._rw_uow() as uow:
            return uow.sessions.revoke_all_for_user(user_id)

    def revoke_family(self, token_family: str) -> int:
        with self._rw_uow() as uow:
            return uow.sessions.revoke_family(token_family)

    def purge_expired(self) -> int:
        with self._rw_uow() as uow:
            return uow.sessions.delete_expired(now=self._clock())

    # ------------------------- reads -------------------------

    def get(self, session_id: int) -> SessionRecord:
        with self._ro_uow() as uow:
            row = uow.sessions.get(session_id)
            if row is None:
                raise NotFoundError("Session", session_id)
            return _to_record(row)

    def find_by_token(self, refresh_token: str) -> SessionRecord:
        with self._ro_uow() as uow:
            row = uow.sessions.get_by_token(refresh_token)
            if row is None:
                raise NotFoundError("Session", "refresh_token")
            return _to_record(row)

    def list_active_for_user(self, user_id: int) -> list[SessionRecord]:
        with self._ro_uow() as uow:
            rows = uow.sessions.list_active_for_user(user_id, now=self._clock())
            return [_to_record(r) for r in rows]

    def list_family(self, token_family: str) -> list[SessionRecord]:
        with self._ro_uow() as uow:
            return [_to_record(r) for r in uow.sessions.list_family(token_family)]

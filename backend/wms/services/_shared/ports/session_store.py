from __future__ import annotations

import secrets
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol
from uuid import uuid4

from wms.models.base import utcnow
from wms.services._shared.errors import NotFoundError, SessionAlreadyRevokedError

REFRESH_TOKEN_BYTES = 48


def new_refresh_token() -> str:
    """Return a fresh opaque refresh token (URL-safe, 384 bits of entropy)."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def new_token_family() -> str:
    """Return a fresh token-family identifier."""
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """
    Client metadata captured when a session is issued.

    Unknown values are ``None``, never empty strings.
    """

    device_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def build(
        cls,
        *,
        device_name: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> DeviceInfo:
        """Build an instance turning blank strings into ``None``."""
        return cls(
            device_name=(device_name or "").strip() or None,
            ip_address=(ip_address or "").strip() or None,
            user_agent=(user_agent or "").strip() or None,
        )


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """
    Read-model for one refresh session.

    :ivar id: Row identifier.
    :ivar refresh_token: Opaque token value.
    :ivar token_family: Identifier shared by one login's rotation chain.
    :ivar parent_token_id: Row this one was rotated from (``None`` for roots).
    """

    id: int
    user_id: int
    refresh_token: str
    token_family: str
    is_revoked: bool
    expires_at: datetime
    created_at: datetime
    last_used_at: datetime
    parent_token_id: int | None = None
    device_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def device(self) -> DeviceInfo:
        return DeviceInfo(self.device_name, self.ip_address, self.user_agent)


class SessionStore(Protocol):
    """
    Persistence port for refresh sessions.

    Revocations are idempotent and return how many rows flipped to revoked.
    ``rotate`` MUST be atomic: the parent is claimed with a compare-and-set
    and the child only exists if the claim succeeded.
    """

    def create(self, *, user_id: int, device: DeviceInfo, expires_at: datetime) -> SessionRecord:
        """Create a family root with a new token and a new family id."""
        ...

    def get(self, session_id: int) -> SessionRecord:
        """Fetch by id. :raises NotFoundError: when absent."""
        ...

    def find_by_token(self, refresh_token: str) -> SessionRecord:
        """Fetch by token, revoked or not. :raises NotFoundError: when absent."""
        ...

    def rotate(self, old: SessionRecord, *, expires_at: datetime) -> SessionRecord:
        """
        Revoke ``old`` (only if still active) and create its child.

        :raises SessionAlreadyRevokedError: if ``old`` was revoked meanwhile;
            nothing is written in that case.
        """
        ...

    def revoke(self, session_id: int) -> int: ...

    def revoke_all_for_user(self, user_id: int) -> int: ...

    def revoke_family(self, token_family: str) -> int: ...

    def list_active_for_user(self, user_id: int) -> Sequence[SessionRecord]:
        """Unrevoked, unexpired sessions, most recently used first."""
        ...

    def list_family(self, token_family: str) -> Sequence[SessionRecord]:
        """Every member of a family in creation order."""
        ...

    def purge_expired(self) -> int:
        """Delete rows whose ``expires_at`` has passed."""
        ...


class InMemorySessionStore(SessionStore):
    """
    In-memory session store with the same atomicity guarantees.

    .. note::
       A single lock serializes every operation, standing in for the row-level
       compare-and-set of the SQL adapter. Used by unit tests.
    """

    def __init__(self, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._rows: dict[int, SessionRecord] = {}
        self._by_token: dict[str, int] = {}
        self._seq = 0
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    def _insert(
        self,
        *,
        user_id: int,
        token_family: str,
        device: DeviceInfo,
        expires_at: datetime,
        parent_token_id: int | None,
    ) -> SessionRecord:
        now = self._clock()
        self._seq += 1
        token = new_refresh_token()
        record = SessionRecord(
            id=self._seq,
            user_id=user_id,
            refresh_token=token,
            token_family=token_family,
            is_revoked=False,
            expires_at=expires_at,
            created_at=now,
            last_used_at=now,
            parent_token_id=parent_token_id,
            device_name=device.device_name,
            ip_address=device.ip_address,
            user_agent=device.user_agent,
        )
        self._rows[record.id] = record
        self._by_token[token] = record.id
        return record

    def _revoke_where(self, predicate: Callable[[SessionRecord], bool]) -> int:
        flipped = 0
        for sid, row in list(self._rows.items()):
            if not row.is_revoked and predicate(row):
                self._rows[sid] = replace(row, is_revoked=True)
                flipped += 1
        return flipped

    # ------------------------- port -------------------------

    def create(self, *, user_id: int, device: DeviceInfo, expires_at: datetime) -> SessionRecord:
        with self._lock:
            return self._insert(
                user_id=user_id,
                token_family=new_token_family(),
                device=device,
                expires_at=expires_at,
                parent_token_id=None,
            )

    def get(self, session_id: int) -> SessionRecord:
        with self._lock:
            row = self._rows.get(session_id)
        if row is None:
            raise NotFoundError("Session", session_id)
        return row

    def find_by_token(self, refresh_token: str) -> SessionRecord:
        with self._lock:
            sid = self._by_token.get(refresh_token)
            row = self._rows.get(sid) if sid is not None else None
        if row is None:
            raise NotFoundError("Session", "refresh_token")
        return row

    def rotate(self, old: SessionRecord, *, expires_at: datetime) -> SessionRecord:
        with self._lock:
            current = self._rows.get(old.id)
            if current is None or current.is_revoked:
                raise SessionAlreadyRevokedError()
            self._rows[old.id] = replace(current, is_revoked=True, last_used_at=self._clock())
            return self._insert(
                user_id=current.user_id,
                token_family=current.token_family,
                device=current.device,
                expires_at=expires_at,
                parent_token_id=current.id,
            )

    def revoke(self, session_id: int) -> int:
        with self._lock:
            return self._revoke_where(lambda row: row.id == session_id)

    def revoke_all_for_user(self, user_id: int) -> int:
        with self._lock:
            return self._revoke_where(lambda row: row.user_id == user_id)

    def revoke_family(self, token_family: str) -> int:
        with self._lock:
            return self._revoke_where(lambda row: row.token_family == token_family)

    def list_active_for_user(self, user_id: int) -> list[SessionRecord]:
        now = self._clock()
        with self._lock:
            rows = [
                r
                for r in self._rows.values()
                if r.user_id == user_id and not r.is_revoked and not r.is_expired(now)
            ]
        return sorted(rows, key=lambda r: (r.last_used_at, r.id), reverse=True)

    def list_family(self, token_family: str) -> list[SessionRecord]:
        with self._lock:
            return sorted(
                (r for r in self._rows.values() if r.token_family == token_family),
                key=lambda r: r.id,
            )

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [r for r in self._rows.values() if r.expires_at < now]
            for row in expired:
                del self._rows[row.id]
                self._by_token.pop(row.refresh_token, None)
            for sid, row in list(self._rows.items()):
                if row.parent_token_id is not None and row.parent_token_id not in self._rows:
                    self._rows[sid] = replace(row, parent_token_id=None)
            return len(expired)

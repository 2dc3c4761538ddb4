# wms/services/auth/service.py
from __future__ import annotations

import logging
import secrets
from functools import cached_property

from wms.services._shared.base import BaseService, Clock, ServiceContext
from wms.services._shared.errors import (
    AccountInactiveError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    NotFoundError,
    RefreshTokenExpiredError,
    SessionAlreadyRevokedError,
    TokenReusedError,
)
from wms.services._shared.ports.password_hasher import PasswordHasher
from wms.services._shared.ports.session_store import DeviceInfo, SessionRecord, SessionStore
from wms.services._shared.ports.token_signer import AccessClaims, TokenSigner
from wms.services.auth.dto import (
    AuthSettings,
    AuthTokens,
    LoginIn,
    RefreshIn,
    SessionView,
    UserIdentity,
)

log = logging.getLogger(__name__)


class SessionManager(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout / sessions).

    Access tokens are minted by a :class:`TokenSigner` and validated without
    touching storage. Refresh tokens are opaque rows in a
    :class:`SessionStore`; every refresh rotates the presented row into a new
    child of the same *token family*.

    Security
    --------
    - A refresh token is good for exactly one rotation.
    - Presenting an already-rotated (revoked) token is treated as theft: the
      whole family is revoked, including the child the legitimate client holds.
    - Losing a concurrent rotation race takes the same path (fail closed).
    - Login failures are indistinguishable to callers; internal reasons are
      logged only.
    """

    def __init__(
        self,
        *,
        settings: AuthSettings,
        signer: TokenSigner,
        store: SessionStore,
        hasher: PasswordHasher,
        ctx: ServiceContext | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the manager with its collaborators.

        :param settings: Token lifetimes and signing configuration.
        :param signer: Access-token adapter.
        :param store: Refresh-session persistence.
        :param hasher: Password verification.
        """
        super().__init__(ctx=ctx, clock=clock)
        self.settings = settings
        self.signer = signer
        self.store = store
        self.hasher = hasher

    @cached_property
    def _dummy_hash(self) -> str:
        # Verified against when the email is unknown so timing stays uniform.
        return self.hasher.hash(secrets.token_urlsafe(16))

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn, device: DeviceInfo | None = None) -> AuthTokens:
        """
        Authenticate credentials and open a new session family.

        :param dto: Login input.
        :param device: Client metadata recorded on the session row.
        :returns: Access/refresh pair.
        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises AccountInactiveError: Account disabled (callers see the same
            response as for invalid credentials).
        """
        identity = self._identity_by_email(dto.email)
        if identity is None:
            self.hasher.verify(self._dummy_hash, dto.password)
            log.info("login rejected", extra={"reason": "unknown_email"})
            raise InvalidCredentialsError()

        password_ok = self.hasher.verify(identity.password_hash, dto.password)
        if not identity.is_active:
            log.info("login rejected", extra={"reason": "inactive", "user_id": identity.id})
            raise AccountInactiveError()
        if not password_ok:
            log.info("login rejected", extra={"reason": "bad_password", "user_id": identity.id})
            raise InvalidCredentialsError()

        access = self.signer.mint(identity)
        record = self.store.create(
            user_id=identity.id,
            device=device or DeviceInfo(),
            expires_at=self.now_utc() + self.settings.refresh_ttl,
        )
        log.info(
            "login succeeded",
            extra={
                "user_id": identity.id,
                "session_id": record.id,
                "token_family": record.token_family,
                "device_name": record.device_name,
            },
        )
        return self._pair(access, record)

    # ------------------------------------------------------------------ #
    # Refresh with rotation + reuse detection
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthTokens:
        """
        Rotate a refresh token and emit a new pair.

        :raises InvalidRefreshTokenError: Unknown token, or its owner is gone.
        :raises TokenReusedError: Token already rotated/revoked; family revoked.
        :raises RefreshTokenExpiredError: Token past ``expires_at``.
        :raises AccountInactiveError: Owner was disabled after login.
        """
        try:
            current = self.store.find_by_token(dto.refresh_token)
        except NotFoundError:
            raise InvalidRefreshTokenError() from None

        if current.is_revoked:
            self._contain_reuse(current)
            raise TokenReusedError()

        now = self.now_utc()
        if current.is_expired(now):
            log.info(
                "refresh rejected",
                extra={"reason": "expired", "session_id": current.id, "user_id": current.user_id},
            )
            raise RefreshTokenExpiredError()

        identity = self._identity_by_id(current.user_id)
        if identity is None:
            raise InvalidRefreshTokenError()
        if not identity.is_active:
            raise AccountInactiveError()

        access = self.signer.mint(identity)
        try:
            child = self.store.rotate(current, expires_at=now + self.settings.refresh_ttl)
        except SessionAlreadyRevokedError:
            # Someone else consumed this token between lookup and claim.
            self._contain_reuse(current)
            raise TokenReusedError() from None

        log.info(
            "session rotated",
            extra={
                "user_id": identity.id,
                "old_session_id": current.id,
                "new_session_id": child.id,
                "token_family": child.token_family,
            },
        )
        return self._pair(access, child)

    def _contain_reuse(self, record: SessionRecord) -> None:
        """Revoke the whole family of a replayed token and raise the alarm."""
        revoked = self.store.revoke_family(record.token_family)
        log.error(
            "refresh token reuse detected; token family revoked",
            extra={
                "user_id": record.user_id,
                "session_id": record.id,
                "token_family": record.token_family,
                "revoked": revoked,
            },
        )

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, refresh_token: str) -> None:
        """Revoke the session holding ``refresh_token``. Unknown tokens are a no-op."""
        try:
            record = self.store.find_by_token(refresh_token)
        except NotFoundError:
            log.debug("logout with unknown refresh token ignored")
            return
        revoked = self.store.revoke(record.id)
        log.info(
            "logout",
            extra={"user_id": record.user_id, "session_id": record.id, "revoked": revoked},
        )

    def logout_everywhere(self, user_id: int) -> int:
        """Revoke every session of ``user_id``. :returns: rows revoked."""
        revoked = self.store.revoke_all_for_user(user_id)
        log.info("logout everywhere", extra={"user_id": user_id, "revoked": revoked})
        return revoked

    # ------------------------------------------------------------------ #
    # Session management
    # ------------------------------------------------------------------ #

    def list_sessions(self, user_id: int, current_token: str | None = None) -> list[SessionView]:
        """
        Active sessions of ``user_id``, most recently used first.

        :param current_token: Caller's refresh token, used to flag ``is_current``.
        """
        return [
            SessionView(
                id=r.id,
                device_name=r.device_name,
                ip_address=r.ip_address,
                last_used_at=r.last_used_at,
                expires_at=r.expires_at,
                is_current=_same_token(r.refresh_token, current_token),
            )
            for r in self.store.list_active_for_user(user_id)
        ]

    def revoke_session(self, user_id: int, session_id: int) -> None:
        """
        Revoke one of the caller's own sessions.

        :raises NotFoundError: Unknown id or a session owned by someone else.
        """
        record = self.store.get(session_id)
        if record.user_id != user_id:
            raise NotFoundError("Session", session_id)
        revoked = self.store.revoke(session_id)
        log.info(
            "session revoked by owner",
            extra={"user_id": user_id, "session_id": session_id, "revoked": revoked},
        )

    def purge_expired(self) -> int:
        """Delete expired session rows. :returns: rows deleted."""
        purged = self.store.purge_expired()
        log.info("expired sessions purged", extra={"purged": purged})
        return purged

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def validate_access_token(self, token: str) -> AccessClaims:
        """Verify an access token cryptographically. Never touches storage."""
        return self.signer.verify(token)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _identity_by_email(self, email: str) -> UserIdentity | None:
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(email)
            return UserIdentity.from_model(user) if user is not None else None

    def _identity_by_id(self, user_id: int) -> UserIdentity | None:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            return UserIdentity.from_model(user) if user is not None else None

    def _pair(self, access: str, record: SessionRecord) -> AuthTokens:
        return AuthTokens(
            access_token=access,
            refresh_token=record.refresh_token,
            expires_in=self.settings.access_ttl_seconds,
        )


def _same_token(stored: str, presented: str | None) -> bool:
    if not presented:
        return False
    return secrets.compare_digest(stored.encode(), presented.encode())

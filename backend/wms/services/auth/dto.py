# wms/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from wms.models.user import Role
from wms.services._shared.ports.session_store import DeviceInfo

# --------------------------- Settings DTO --------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable auth configuration, built once at application start.

    :param secret: HMAC key for access tokens.
    :param algorithm: The only algorithm accepted when verifying.
    :param issuer: ``iss`` claim minted and required.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh session lifetime.
    :param access_cookie_name: Cookie holding the access token (browser clients).
    :param refresh_cookie_name: Cookie holding the refresh token (browser clients).
    """

    secret: str
    algorithm: str = "HS256"
    issuer: str = "wms-lite"
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    access_cookie_name: str = "access_token"
    refresh_cookie_name: str = "refresh_token"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a Flask config mapping."""
        secret = str(config.get("JWT_SECRET_KEY") or "")
        if not secret:
            raise RuntimeError("JWT_SECRET_KEY is not set")
        return cls(
            secret=secret,
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
            issuer=str(config.get("JWT_ISSUER", "wms-lite")),
            access_ttl=timedelta(seconds=int(config.get("ACCESS_TOKEN_TTL_SECONDS", 900))),
            refresh_ttl=timedelta(seconds=int(config.get("REFRESH_TOKEN_TTL_SECONDS", 604800))),
            access_cookie_name=str(config.get("AUTH_COOKIE_NAME", "access_token")),
            refresh_cookie_name=str(config.get("REFRESH_COOKIE_NAME", "refresh_token")),
        )

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_ttl.total_seconds())


# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the service).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token issued at login or last refresh.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Internal DTOs -------------------------------- #


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Snapshot of the user fields the session manager needs."""

    id: int
    email: str
    role: Role
    is_active: bool
    password_hash: str = ""

    @classmethod
    def from_model(cls, user: Any) -> UserIdentity:
        return cls(
            id=int(user.id),
            email=str(user.email),
            role=Role.parse(user.role),
            is_active=bool(user.is_active),
            password_hash=str(user.password_hash or ""),
        )


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokens:
    """
    Output DTO with an access/refresh pair.

    :param access_token: Signed access JWT.
    :param refresh_token: Opaque refresh token.
    :param expires_in: Access token lifetime in seconds.
    :param token_type: Always ``"Bearer"``.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class SessionView:
    """One active session as shown to its owner."""

    id: int
    device_name: str | None
    ip_address: str | None
    last_used_at: datetime
    expires_at: datetime
    is_current: bool


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller derived from a verified access token."""

    user_id: int
    email: str
    role: Role


__all__ = [
    "AuthSettings",
    "AuthTokens",
    "DeviceInfo",
    "LoginIn",
    "Principal",
    "RefreshIn",
    "SessionView",
    "UserIdentity",
]

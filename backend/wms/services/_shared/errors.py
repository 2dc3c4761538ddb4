"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask, HTTP, or SQLAlchemy directly. They serve as stable contracts between
repositories, token/session adapters and application services.

The translation to HTTP responses (RFC 7807) is handled by
``wms/core/errors.py``. Internal distinctions (for example *why* a login
failed) are kept here for audit logging; the HTTP layer decides what a caller
is allowed to learn.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, stores or domain logic.
    """

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class AuthenticationError(ServiceError):
    """Base class for failures that end in *unauthenticated*."""

    default_message = "Unauthorized"


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __post_init__(self) -> None:
        Exception.__init__(self, str(self))

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. Both look the same to callers."""

    default_message = "Invalid credentials"


class AccountInactiveError(AuthenticationError):
    """The account exists but is disabled."""

    default_message = "Account is inactive"


class InvalidRefreshTokenError(AuthenticationError):
    """The presented refresh token matches no session."""

    default_message = "Invalid refresh token"


class RefreshTokenExpiredError(AuthenticationError):
    """The session exists, is not revoked, but is past ``expires_at``."""

    default_message = "Refresh token expired"


class TokenReusedError(AuthenticationError):
    """
    An already-rotated refresh token was presented again.

    Raised after the whole token family has been revoked.
    """

    default_message = "Refresh token has been revoked"


class InvalidAccessTokenError(AuthenticationError):
    """Signature, algorithm, issuer, expiry or claim-shape check failed."""

    default_message = "Invalid or expired token"


class UnauthorizedError(AuthenticationError):
    """No credential, a garbled credential, or any access-token failure."""

    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    """Authenticated principal lacks an allowed role."""

    default_message = "Insufficient permissions"


class EmailAlreadyRegisteredError(ServiceError):
    """Registration collided with an existing email."""

    default_message = "Email already registered"


class InvalidRoleError(ServiceError):
    """Requested role is outside ``{user, admin, readonly}``."""

    default_message = "Invalid role: must be user, admin, or readonly"


class SessionAlreadyRevokedError(ServiceError):
    """
    Rotation lost the race: the parent row was revoked by someone else.

    Internal to the session subsystem; the manager converts it into
    :class:`TokenReusedError` after containing the family.
    """

    default_message = "Session already revoked"

# wms/services/auth/gateway.py
from __future__ import annotations

import logging

from wms.models.user import Role
from wms.services._shared.errors import AuthenticationError, ForbiddenError, UnauthorizedError
from wms.services._shared.ports.token_signer import TokenSigner
from wms.services.auth.dto import Principal

log = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer(authorization: str | None, cookie_token: str | None = None) -> str:
    """
    Pick the access token out of a request.

    The ``Authorization`` header wins when present; it must read
    ``Bearer <token>``. Without the header the access-token cookie is used.

    :raises UnauthorizedError: No credential, or a malformed header.
    """
    if authorization is not None and authorization.strip():
        parts = authorization.strip().split()
        if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
            raise UnauthorizedError()
        return parts[1]
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()
    raise UnauthorizedError()


class AuthGateway:
    """
    Request-facing authentication and role gate.

    Validation is purely cryptographic: a revoked session does not affect
    access tokens already issued to it until they expire.
    """

    def __init__(self, *, signer: TokenSigner) -> None:
        self.signer = signer

    def authenticate(self, authorization: str | None, cookie_token: str | None = None) -> Principal:
        """
        Resolve the caller from an ``Authorization`` header or cookie.

        :raises UnauthorizedError: For every failure, without distinction.
        """
        token = extract_bearer(authorization, cookie_token)
        try:
            claims = self.signer.verify(token)
        except AuthenticationError as exc:
            log.info("access token rejected", extra={"reason": type(exc).__name__})
            raise UnauthorizedError() from None
        return Principal(user_id=claims.user_id, email=claims.email, role=claims.role)

    def authorize(self, principal: Principal, *allowed_roles: Role) -> bool:
        """Return ``True`` when the principal holds one of ``allowed_roles``."""
        return principal.role in allowed_roles

    def require_roles(self, principal: Principal, *allowed_roles: Role) -> None:
        """
        :raises ForbiddenError: When :meth:`authorize` says no.
        """
        if not self.authorize(principal, *allowed_roles):
            log.warning(
                "role check failed",
                extra={
                    "user_id": principal.user_id,
                    "role": principal.role.value,
                    "allowed_roles": [r.value for r in allowed_roles],
                },
            )
            raise ForbiddenError()

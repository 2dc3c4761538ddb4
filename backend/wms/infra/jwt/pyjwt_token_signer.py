# wms/infra/jwt/pyjwt_token_signer.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import jwt

from wms.models.base import utcnow
from wms.models.user import Role
from wms.services._shared.errors import InvalidAccessTokenError
from wms.services._shared.ports.token_signer import AccessClaims, SupportsIdentity, TokenSigner
from wms.services.auth.dto import AuthSettings

REQUIRED_CLAIMS = ["exp", "iat", "iss", "user_id", "role"]


class PyJWTTokenSigner(TokenSigner):
    """
    HMAC access-token adapter built on PyJWT.

    The secret, algorithm, issuer and lifetime come from an explicit
    :class:`AuthSettings`; nothing is read from ``current_app``. Verification
    accepts exactly the configured algorithm, so ``alg=none`` and algorithm
    switching are rejected before the signature is even checked.
    """

    def __init__(self, settings: AuthSettings, *, clock: Callable[[], datetime] = utcnow) -> None:
        self.settings = settings
        self._clock = clock

    def mint(self, user: SupportsIdentity) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "user_id": int(user.id),
            "email": user.email,
            "role": Role.parse(user.role).value,
            "iat": now,
            "exp": now + self.settings.access_ttl,
            "iss": self.settings.issuer,
        }
        return jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)

    def verify(self, token: str) -> AccessClaims:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as exc:
            raise InvalidAccessTokenError() from exc
        if header.get("alg") != self.settings.algorithm:
            raise InvalidAccessTokenError("Unexpected signing algorithm")

        try:
            payload = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as exc:
            raise InvalidAccessTokenError() from exc

        try:
            user_id = payload["user_id"]
            if isinstance(user_id, bool) or not isinstance(user_id, int):
                raise TypeError("user_id must be an integer")
            role = Role(payload["role"])
            return AccessClaims(
                user_id=user_id,
                email=str(payload.get("email") or ""),
                role=role,
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
                issuer=str(payload["iss"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidAccessTokenError() from exc

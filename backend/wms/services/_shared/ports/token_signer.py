from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from wms.models.user import Role


class SupportsIdentity(Protocol):
    """Anything carrying the identity claims of an access token."""

    @property
    def id(self) -> int: ...

    @property
    def email(self) -> str: ...

    @property
    def role(self) -> Role | str: ...


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """Typed, verified claims of an access token."""

    user_id: int
    email: str
    role: Role
    issued_at: datetime
    expires_at: datetime
    issuer: str


class TokenSigner(Protocol):
    """Port for minting and verifying short-lived access tokens."""

    def mint(self, user: SupportsIdentity) -> str:
        """Sign ``{user_id, email, role, iat, exp, iss}``. No side effects."""
        ...

    def verify(self, token: str) -> AccessClaims:
        """
        Check algorithm, signature, expiry and issuer.

        :raises InvalidAccessTokenError: on any failure.
        """
        ...

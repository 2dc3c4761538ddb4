"""
DTOs for RegistrationService.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from wms.models.user import Role

# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input payload for self-registration.

    :param email: Login email (normalized to lowercase+trim).
    :type email: str
    :param password: Raw password (hashed by the service).
    :type password: str
    :param full_name: Optional display name.
    :type full_name: str | None
    :param role: Requested role; ``None`` means ``user``.
    :type role: str | None
    """

    email: str
    password: str
    full_name: str | None = None
    role: str | None = None


# --------------------------------------------------------------------------- #
# Output
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public-safe user view (no password hash)."""

    id: int
    email: str
    full_name: str | None
    role: Role
    is_active: bool
    created_at: datetime

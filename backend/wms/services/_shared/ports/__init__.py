"""
wms.services._shared.ports
==========================

Ports (hexagonal interfaces) the auth services depend on.

- :mod:`session_store`: :class:`~.SessionStore` plus the
  :class:`~.InMemorySessionStore` used in unit tests.
- :mod:`token_signer`: :class:`~.TokenSigner` and :class:`~.AccessClaims`.
- :mod:`password_hasher`: :class:`~.PasswordHasher`.

Concrete adapters live under ``wms.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .session_store import (
    DeviceInfo,
    InMemorySessionStore,
    SessionRecord,
    SessionStore,
    new_refresh_token,
    new_token_family,
)
from .token_signer import AccessClaims, SupportsIdentity, TokenSigner

__all__ = [
    "AccessClaims",
    "DeviceInfo",
    "InMemorySessionStore",
    "PasswordHasher",
    "SessionRecord",
    "SessionStore",
    "SupportsIdentity",
    "TokenSigner",
    "new_refresh_token",
    "new_token_family",
]

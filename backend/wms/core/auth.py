"""Composition root for the authentication components."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, cast

from flask import Flask, current_app

from wms.infra.jwt.pyjwt_token_signer import PyJWTTokenSigner
from wms.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from wms.infra.sql.sqlalchemy_session_store import SQLAlchemySessionStore
from wms.services._shared.ports import PasswordHasher, SessionStore, TokenSigner
from wms.services.auth import AuthGateway, SessionManager
from wms.services.auth.dto import AuthSettings
from wms.services.registration import RegistrationService

EXTENSION_KEY = "wms.auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Auth collaborators shared by every request of one application."""

    settings: AuthSettings
    signer: TokenSigner
    store: SessionStore
    hasher: PasswordHasher
    manager: SessionManager
    gateway: AuthGateway
    registration: RegistrationService


def build_components(
    config: Mapping[str, Any],
    *,
    store: SessionStore | None = None,
) -> AuthComponents:
    """Wire the auth graph from configuration.

    :param config: Flask config (or any mapping with the same keys).
    :param store: Session store override; the SQL store by default.
    """
    settings = AuthSettings.from_config(config)
    signer = PyJWTTokenSigner(settings)
    hasher = WerkzeugPasswordHasher(method=str(config.get("PASSWORD_HASH_METHOD", "scrypt")))
    session_store = store if store is not None else SQLAlchemySessionStore()
    manager = SessionManager(settings=settings, signer=signer, store=session_store, hasher=hasher)
    return AuthComponents(
        settings=settings,
        signer=signer,
        store=session_store,
        hasher=hasher,
        manager=manager,
        gateway=AuthGateway(signer=signer),
        registration=RegistrationService(hasher=hasher),
    )


def init_app(app: Flask) -> None:
    """Build the auth components once and attach them to ``app.extensions``."""
    app.extensions[EXTENSION_KEY] = build_components(app.config)


def get_auth() -> AuthComponents:
    """Return the auth components of the current application."""
    return cast(AuthComponents, current_app.extensions[EXTENSION_KEY])

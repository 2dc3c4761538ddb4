"""Cross-origin policy for the API blueprints."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Headers browsers must be allowed to send/read for the session endpoints
ALLOWED_HEADERS = ("Authorization", "Content-Type", "X-Refresh-Token", "X-Request-ID")
EXPOSED_HEADERS = ("X-Request-ID",)


def _split_origins(raw: str | None) -> list[str]:
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Register Flask-CORS on ``/api/*``.

    Cookie-borne access tokens need credentialed requests, which browsers only
    honour for an explicit origin list. A blank or ``"*"`` ``CORS_ORIGINS``
    therefore opens the API to any origin *without* credentials.
    """
    origins = _split_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=list(ALLOWED_HEADERS),
        expose_headers=list(EXPOSED_HEADERS),
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )

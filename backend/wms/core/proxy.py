"""Trust forwarded headers from the ingress proxy."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`ProxyFix` when ``USE_PROXYFIX`` is set.

    ``request.remote_addr`` is recorded on every refresh session, so the number
    of trusted ``X-Forwarded-For`` hops is configurable through
    ``PROXYFIX_X_FOR`` (one hop by default). Running without a proxy while the
    flag is on lets clients spoof their recorded address.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_X_FOR", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=1, x_host=1)

"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from wms.core.auth import get_auth
from wms.models.user import Role
from wms.services.auth.device import parse_device_name
from wms.services.auth.dto import DeviceInfo, Principal

F = TypeVar("F", bound=Callable[..., Any])

REFRESH_TOKEN_HEADER = "X-Refresh-Token"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    """Return an empty ``204 No Content`` response."""

    return Response(status=204)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ----------------------------- Authentication -----------------------------


def _authenticate() -> Principal:
    auth = get_auth()
    principal = auth.gateway.authenticate(
        request.headers.get("Authorization"),
        request.cookies.get(auth.settings.access_cookie_name),
    )
    g.principal = principal
    return principal


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token (``401`` otherwise)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: Role) -> Callable[[F], F]:
    """Ensure the authenticated principal holds one of ``roles`` (``403`` otherwise)."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            principal = _authenticate()
            get_auth().gateway.require_roles(principal, *roles)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def current_principal() -> Principal:
    """Return the principal resolved by :func:`require_auth`."""

    return cast(Principal, g.principal)


# ----------------------------- Request metadata -----------------------------


def client_device() -> DeviceInfo:
    """Describe the calling client from its ``User-Agent`` and address."""

    user_agent = request.headers.get("User-Agent")
    return DeviceInfo.build(
        device_name=parse_device_name(user_agent),
        ip_address=request.remote_addr,
        user_agent=user_agent,
    )


def presented_refresh_token() -> str | None:
    """Caller's refresh token from ``X-Refresh-Token`` or the refresh cookie."""

    header = request.headers.get(REFRESH_TOKEN_HEADER)
    if header and header.strip():
        return header.strip()
    return request.cookies.get(get_auth().settings.refresh_cookie_name) or None

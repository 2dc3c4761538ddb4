"""HTTP helpers for authenticated API tests."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD

API = "/api/v1"
AUTH = f"{API}/auth"

FIREFOX_LINUX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
CHROME_WINDOWS_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)


def bearer(access_token: str) -> dict[str, str]:
    """``Authorization`` header for ``access_token``."""
    return {"Authorization": f"Bearer {access_token}"}


def login(client, email: str, password: str = DEFAULT_PASSWORD, *, user_agent: str | None = None):
    """POST ``/auth/login`` and return the raw response."""
    headers = {"User-Agent": user_agent} if user_agent else {}
    return client.post(
        f"{AUTH}/login", json={"email": email, "password": password}, headers=headers
    )


def login_tokens(client, email: str, password: str = DEFAULT_PASSWORD, **kwargs) -> dict:
    """Log in and return the token pair, asserting success."""
    resp = login(client, email, password, **kwargs)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()

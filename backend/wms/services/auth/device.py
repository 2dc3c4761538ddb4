"""Human-readable device labels derived from ``User-Agent`` headers."""

from __future__ import annotations


def _browser(ua: str) -> str:
    if "edg" in ua:
        return "Edge"
    if "chrome" in ua:
        return "Chrome"
    if "firefox" in ua:
        return "Firefox"
    if "safari" in ua:
        return "Safari"
    return "Unknown Browser"


def _operating_system(ua: str) -> str:
    if "windows" in ua:
        return "Windows"
    if "macintosh" in ua or "mac os" in ua:
        return "macOS"
    if "linux" in ua:
        return "Linux"
    return "Unknown OS"


def parse_device_name(user_agent: str | None) -> str | None:
    """Return a short label such as ``"Chrome / Windows"`` or ``"iPhone"``.

    Mobile devices are named by hardware, desktops by ``browser / OS``.
    Returns ``None`` when no header was sent.
    """
    if not user_agent or not user_agent.strip():
        return None
    ua = user_agent.lower()

    if "iphone" in ua:
        return "iPhone"
    if "ipad" in ua:
        return "iPad"
    if "android" in ua:
        return "Android Phone" if "mobile" in ua else "Android Tablet"

    return f"{_browser(ua)} / {_operating_system(ua)}"

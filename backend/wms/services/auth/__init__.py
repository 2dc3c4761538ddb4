from .device import parse_device_name
from .gateway import AuthGateway
from .service import SessionManager

__all__ = ["AuthGateway", "SessionManager", "parse_device_name"]

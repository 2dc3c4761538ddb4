"""Service layer public API.

Re-exports
----------
- :class:`BaseService`, :class:`ServiceContext` (``wms.services._shared.base``)
- :class:`SessionManager`, :class:`AuthGateway` (``wms.services.auth``)
- :class:`RegistrationService` (``wms.services.registration``)
"""

from __future__ import annotations

from wms.services._shared.base import BaseService, ServiceContext
from wms.services.auth import AuthGateway, SessionManager
from wms.services.registration import RegistrationService

__all__ = [
    "AuthGateway",
    "BaseService",
    "RegistrationService",
    "ServiceContext",
    "SessionManager",
]

"""WMS authentication backend."""

from wms.factory import create_app

__all__ = ["create_app"]

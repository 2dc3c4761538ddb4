"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from wms.repositories.base import BaseRepository
from wms.repositories.session import SessionRepository
from wms.repositories.user import UserRepository

__all__ = ["BaseRepository", "SessionRepository", "UserRepository"]

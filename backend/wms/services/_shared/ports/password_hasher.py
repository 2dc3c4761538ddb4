from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way password hashing."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, hashed: str, plaintext: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``hashed``. Never raises."""
        ...

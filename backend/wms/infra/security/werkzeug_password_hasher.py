# wms/infra/security/werkzeug_password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from wms.services._shared.ports.password_hasher import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Adapter over :mod:`werkzeug.security`.

    :param method: Hash method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    """

    method: str = "scrypt"

    def hash(self, plaintext: str) -> str:
        if not isinstance(plaintext, str) or not plaintext:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plaintext, method=self.method)

    def verify(self, hashed: str, plaintext: str) -> bool:
        if not hashed or not isinstance(plaintext, str):
            return False
        try:
            # ``check_password_hash`` is untyped; coerce to bool for mypy.
            return bool(check_password_hash(hashed, plaintext))
        except ValueError:
            # Malformed or unsupported stored hash.
            return False

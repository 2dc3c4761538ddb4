"""Unit tests for the Werkzeug password hasher adapter."""

import pytest

from wms.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher


def test_hash_and_verify(hasher):
    hashed = hasher.hash("correct horse")

    assert hashed != "correct horse"
    assert hashed.startswith("pbkdf2:sha256")
    assert hasher.verify(hashed, "correct horse")
    assert not hasher.verify(hashed, "battery staple")


def test_hashes_are_salted(hasher):
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_empty_password_is_refused(hasher):
    with pytest.raises(ValueError):
        hasher.hash("")


@pytest.mark.parametrize("stored", ["", "plaintext", "unknown$salt$digest"])
def test_malformed_hashes_never_verify(hasher, stored):
    assert hasher.verify(stored, "plaintext") is False


def test_default_method_is_scrypt():
    assert WerkzeugPasswordHasher().method == "scrypt"

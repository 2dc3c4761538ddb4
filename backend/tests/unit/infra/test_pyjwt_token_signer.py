"""Unit tests for the PyJWT access-token adapter."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from wms.infra.jwt.pyjwt_token_signer import PyJWTTokenSigner
from wms.models.user import Role
from wms.services._shared.errors import InvalidAccessTokenError
from wms.services.auth.dto import AuthSettings, UserIdentity

SECRET = "unit-test-secret-key-with-at-least-32-bytes"
SETTINGS = AuthSettings(secret=SECRET)
ALICE = UserIdentity(id=7, email="alice@example.com", role=Role.ADMIN, is_active=True)


@pytest.fixture()
def signer() -> PyJWTTokenSigner:
    return PyJWTTokenSigner(SETTINGS)


def _claims(**overrides):
    now = datetime.now(UTC)
    payload = {
        "user_id": 7,
        "email": "alice@example.com",
        "role": "admin",
        "iat": now,
        "exp": now + timedelta(minutes=15),
        "iss": SETTINGS.issuer,
    }
    payload.update(overrides)
    return payload


def test_mint_then_verify(signer):
    claims = signer.verify(signer.mint(ALICE))

    assert claims.user_id == 7
    assert claims.email == "alice@example.com"
    assert claims.role is Role.ADMIN
    assert claims.issuer == "wms-lite"
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_minted_header_uses_configured_algorithm(signer):
    assert jwt.get_unverified_header(signer.mint(ALICE))["alg"] == "HS256"


def test_rejects_expired_token(signer):
    past = PyJWTTokenSigner(SETTINGS, clock=lambda: datetime.now(UTC) - timedelta(hours=1))

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(past.mint(ALICE))


def test_rejects_wrong_secret(signer):
    other = PyJWTTokenSigner(AuthSettings(secret="another-secret-key-with-32-plus-bytes!!"))

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(other.mint(ALICE))


def test_rejects_wrong_issuer(signer):
    token = jwt.encode(_claims(iss="someone-else"), SECRET, algorithm="HS256")

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(token)


def test_rejects_alg_none(signer):
    token = jwt.encode(_claims(), None, algorithm="none")

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(token)


def test_rejects_algorithm_switch(signer):
    token = jwt.encode(_claims(), SECRET, algorithm="HS512")

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(token)


@pytest.mark.parametrize("missing", ["user_id", "role", "exp", "iss"])
def test_rejects_missing_claims(signer, missing):
    payload = _claims()
    del payload[missing]
    token = jwt.encode(payload, SECRET, algorithm="HS256")

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(token)


@pytest.mark.parametrize(
    "overrides",
    [{"user_id": "7"}, {"user_id": True}, {"role": "superuser"}],
)
def test_rejects_malformed_claims(signer, overrides):
    token = jwt.encode(_claims(**overrides), SECRET, algorithm="HS256")

    with pytest.raises(InvalidAccessTokenError):
        signer.verify(token)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_rejects_garbage(signer, garbage):
    with pytest.raises(InvalidAccessTokenError):
        signer.verify(garbage)

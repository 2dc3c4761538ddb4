"""Unit tests for AuthGateway (access-token authentication and role checks)."""

from datetime import UTC, datetime, timedelta

import pytest

from wms.infra.jwt.pyjwt_token_signer import PyJWTTokenSigner
from wms.models.user import Role
from wms.services._shared.errors import ForbiddenError, UnauthorizedError
from wms.services.auth.dto import AuthSettings, Principal, UserIdentity
from wms.services.auth.gateway import AuthGateway, extract_bearer

SETTINGS = AuthSettings(secret="gateway-test-secret-key-with-32-plus-bytes")
CLERK = UserIdentity(id=3, email="clerk@example.com", role=Role.USER, is_active=True)


@pytest.fixture()
def signer() -> PyJWTTokenSigner:
    return PyJWTTokenSigner(SETTINGS)


@pytest.fixture()
def gateway(signer) -> AuthGateway:
    return AuthGateway(signer=signer)


class TestExtractBearer:
    def test_header(self):
        assert extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer("bearer tok") == "tok"

    def test_cookie_fallback(self):
        assert extract_bearer(None, "cookie-token") == "cookie-token"

    def test_header_wins_over_cookie(self):
        assert extract_bearer("Bearer header-token", "cookie-token") == "header-token"

    @pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer a b", "token"])
    def test_malformed_header_does_not_fall_back(self, header):
        with pytest.raises(UnauthorizedError):
            extract_bearer(header, "cookie-token")

    @pytest.mark.parametrize("cookie", [None, "", "   "])
    def test_nothing_presented(self, cookie):
        with pytest.raises(UnauthorizedError):
            extract_bearer(None, cookie)


class TestAuthenticate:
    def test_valid_token_yields_principal(self, gateway, signer):
        principal = gateway.authenticate(f"Bearer {signer.mint(CLERK)}")

        assert principal == Principal(user_id=3, email="clerk@example.com", role=Role.USER)

    def test_cookie_token(self, gateway, signer):
        assert gateway.authenticate(None, signer.mint(CLERK)).user_id == 3

    def test_expired_token(self, gateway):
        stale = PyJWTTokenSigner(SETTINGS, clock=lambda: datetime.now(UTC) - timedelta(hours=2))

        with pytest.raises(UnauthorizedError):
            gateway.authenticate(f"Bearer {stale.mint(CLERK)}")

    def test_foreign_signature(self, gateway):
        forged = PyJWTTokenSigner(AuthSettings(secret="attacker-chosen-secret-key-32-bytes!!"))

        with pytest.raises(UnauthorizedError):
            gateway.authenticate(f"Bearer {forged.mint(CLERK)}")

    def test_garbage_token(self, gateway):
        with pytest.raises(UnauthorizedError):
            gateway.authenticate("Bearer garbage")


class TestAuthorize:
    @pytest.mark.parametrize(
        ("role", "allowed", "expected"),
        [
            (Role.ADMIN, (Role.ADMIN,), True),
            (Role.USER, (Role.ADMIN,), False),
            (Role.READONLY, (Role.USER, Role.READONLY), True),
            (Role.USER, (), False),
        ],
    )
    def test_authorize(self, gateway, role, allowed, expected):
        principal = Principal(user_id=1, email="x@example.com", role=role)

        assert gateway.authorize(principal, *allowed) is expected

    def test_require_roles_raises_forbidden(self, gateway):
        principal = Principal(user_id=1, email="x@example.com", role=Role.READONLY)

        with pytest.raises(ForbiddenError):
            gateway.require_roles(principal, Role.ADMIN)

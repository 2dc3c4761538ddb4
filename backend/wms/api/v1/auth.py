"""Authentication and session endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from wms.api.deps import (
    client_device,
    current_principal,
    json_response,
    no_content,
    presented_refresh_token,
    require_auth,
    require_roles,
    timing,
)
from wms.core.auth import get_auth
from wms.models.user import Role
from wms.schemas import (
    AuthResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    SessionListSchema,
    UserSchema,
)
from wms.services.auth.dto import LoginIn, RefreshIn
from wms.services.registration.dto import RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
auth_response_schema = AuthResponseSchema()
session_list_schema = SessionListSchema()
user_schema = UserSchema()


@bp.post("/register")
@timing
def register():
    """Create an account and return its public representation."""

    data = register_schema.load(request.get_json(silent=True) or {})
    user = get_auth().registration.register(RegisterIn(**data))
    return json_response(user_schema.dump(user), status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and open a session."""

    data = login_schema.load(request.get_json(silent=True) or {})
    tokens = get_auth().manager.login(LoginIn(**data), client_device())
    return json_response(auth_response_schema.dump(tokens))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new token pair."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    tokens = get_auth().manager.refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return json_response(auth_response_schema.dump(tokens))


@bp.post("/logout")
@timing
def logout():
    """Revoke the session holding the given refresh token."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    get_auth().manager.logout(data["refresh_token"])
    return no_content()


@bp.post("/logout-all")
@require_auth
@timing
def logout_all():
    """Revoke every session of the caller."""

    get_auth().manager.logout_everywhere(current_principal().user_id)
    return no_content()


@bp.get("/sessions")
@require_auth
@timing
def list_sessions():
    """List the caller's active sessions, flagging the one making the request."""

    views = get_auth().manager.list_sessions(
        current_principal().user_id, presented_refresh_token()
    )
    return json_response(session_list_schema.dump({"sessions": views, "total": len(views)}))


@bp.delete("/sessions/<int:session_id>")
@require_auth
@timing
def revoke_session(session_id: int):
    """Revoke one of the caller's sessions."""

    get_auth().manager.revoke_session(current_principal().user_id, session_id)
    return no_content()


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    user = get_auth().registration.get_user(current_principal().user_id)
    return json_response(user_schema.dump(user))


@bp.post("/users/<int:user_id>/revoke-sessions")
@require_roles(Role.ADMIN)
@timing
def admin_revoke_sessions(user_id: int):
    """Log a user out everywhere on their behalf (administrators only)."""

    get_auth().manager.logout_everywhere(user_id)
    return no_content()

"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from wms.models.user import Role

ROLE_CHOICES = [role.value for role in Role]


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    full_name = fields.String(load_default=None, validate=validate.Length(max=100))
    role = fields.String(
        load_default=None,
        validate=validate.OneOf(ROLE_CHOICES, error="Invalid role: must be user, admin, or readonly"),
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user.

    No length policy on the password: rejecting short passwords here would
    tell callers something about the account's password rules.
    """

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    """Input payload carrying a refresh token (refresh and logout)."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class AuthResponseSchema(Schema):
    """Token pair returned by login and refresh.

    ``expires_at`` is the access-token lifetime in seconds.
    """

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    expires_at = fields.Integer(attribute="expires_in", required=True)
    token_type = fields.String(dump_default="Bearer")


class SessionSchema(Schema):
    """One active session of the caller."""

    id = fields.Integer(required=True)
    device_name = fields.String(allow_none=True)
    ip_address = fields.String(allow_none=True)
    last_used_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)
    is_current = fields.Boolean(required=True)


class SessionListSchema(Schema):
    """Envelope for ``GET /auth/sessions``."""

    sessions = fields.List(fields.Nested(SessionSchema), required=True)
    total = fields.Integer(required=True)

"""User serialization schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public user representation (never includes the password hash)."""

    id = fields.Integer(dump_only=True)
    email = fields.Email(required=True)
    full_name = fields.String(allow_none=True)
    role = fields.Function(lambda user: getattr(user.role, "value", user.role))
    is_active = fields.Boolean()
    created_at = fields.DateTime(dump_only=True)

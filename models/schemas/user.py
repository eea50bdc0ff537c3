from marshmallow import EXCLUDE, Schema, fields, pre_load


def _norm(v):
    return v.strip().lower() if isinstance(v, str) else v


class UserRegisterSchema(Schema):
    """Presence of every field is checked by the route so the error matches the login path."""
    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", load_default="")
    email = fields.String(load_default="")
    username = fields.String(load_default="")
    password = fields.String(load_default="", load_only=True)
    # Already-uploaded media URLs; uploading is not this service's job
    avatar = fields.String(allow_none=True, load_default=None)
    cover_image = fields.String(data_key="coverImage", allow_none=True, load_default=None)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            for key in ("email", "username"):
                if key in data:
                    data[key] = _norm(data[key])
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(allow_none=True, load_default=None)
    username = fields.String(allow_none=True, load_default=None)
    password = fields.String(allow_none=True, load_default=None, load_only=True)


class RefreshSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(data_key="refreshToken", allow_none=True, load_default=None)


class UserOutSchema(Schema):
    """Public profile: password hash and refresh token are never dumped."""
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName", allow_none=True)
    avatar = fields.String(allow_none=True)
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)

from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from utils.errors import UnauthorizedError
from utils.tokens import verify_access_token

ACCESS_COOKIE = "accessToken"


def _access_token_from_request() -> str | None:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


def jwt_required():
    """
    Resolve the caller from a valid access token (cookie or Bearer header)
    and attach it as g.current_user. Any failure is a 401.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _access_token_from_request()
            if not token:
                raise UnauthorizedError("Unauthorized request")

            auth = current_app.extensions["auth"]
            claims = verify_access_token(token, auth.config)

            user = auth.repository.find_by_id(claims.user_id)
            if not user:
                raise UnauthorizedError("Invalid access token")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator

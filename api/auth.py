"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, one secret per kind)
- Keeps exactly one valid refresh token per user on the user row, rotated on every refresh
- Sends both tokens back as HttpOnly cookies and in the response body
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, g, request
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError

from models.schemas.user import RefreshSchema, UserLoginSchema, UserOutSchema, UserRegisterSchema
from models.user import User
from utils.decorators import ACCESS_COOKIE, jwt_required
from utils.errors import ConflictError, ValidationError
from utils.security import hash_password

from .responses import api_response

REFRESH_COOKIE = "refreshToken"

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshSchema()
user_out_schema = UserOutSchema()


def _auth():
    return current_app.extensions["auth"]


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": current_app.config.get("AUTH_COOKIE_SECURE", True),
        "samesite": "Lax",
    }


def _set_token_cookies(response, tokens):
    options = _cookie_options()
    response.set_cookie(ACCESS_COOKIE, tokens.access_token,
                        max_age=int(_auth().config.access_token_ttl.total_seconds()), **options)
    response.set_cookie(REFRESH_COOKIE, tokens.refresh_token,
                        max_age=int(_auth().config.refresh_token_ttl.total_seconds()), **options)
    return response


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            fullName: { type: string }
            email: { type: string }
            username: { type: string }
            password: { type: string }
            avatar: { type: string }
            coverImage: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Missing fields
      409:
        description: Username or email already taken
    """
    payload = request.get_json(silent=True) or {}
    data = user_register_schema.load(payload)

    if any(not (data.get(f) or "").strip() for f in ("full_name", "email", "username", "password")):
        raise ValidationError("All fields are required")

    repository = _auth().repository
    if repository.exists(username=data["username"], email=data["email"]):
        raise ConflictError("User with email or username already exists")

    user = User(
        username=data["username"],
        email=data["email"],
        full_name=data["full_name"].strip(),
        avatar=data.get("avatar"),
        cover_image=data.get("cover_image"),
        password_hash=hash_password(data["password"]),
    )
    try:
        repository.add(user)
    except IntegrityError as exc:
        # a concurrent registration took the username or email after exists()
        raise ConflictError("User with email or username already exists") from exc
    logger.debug("Registered user %s", user.to_dict())

    return api_response(user_out_schema.dump(user), "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login: return access and refresh tokens, also set as cookies
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             username: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Missing credentials
      401:
        description: Invalid credentials
      404:
        description: No such user
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    result = _auth().protocol.login(
        password=data.get("password"),
        username=data.get("username"),
        email=data.get("email"),
    )

    response, status = api_response(
        {
            "user": user_out_schema.dump(result.user),
            "accessToken": result.tokens.access_token,
            "refreshToken": result.tokens.refresh_token,
        },
        "User logged in successfully",
    )
    return _set_token_cookies(response, result.tokens), status


@bp.post("/refresh")
def refresh():
    """
    Use the refresh token (cookie or body) to obtain a new token pair (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns rotated tokens)
      401:
        description: Missing, invalid, expired, stale or reused refresh token
    """
    payload = request.get_json(silent=True) or {}
    try:
        body_token = refresh_schema.load(payload).get("refresh_token")
    except SchemaValidationError:
        # a non-string token is treated as no token
        body_token = None
    incoming = request.cookies.get(REFRESH_COOKIE) or body_token

    tokens = _auth().protocol.refresh(incoming)

    response, status = api_response(
        {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        "Access token refreshed",
    )
    return _set_token_cookies(response, tokens), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the stored refresh token and clears both cookies
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    _auth().protocol.logout(g.current_user.id)

    response, status = api_response({}, "User logged out")
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response, status


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(g.current_user), "Current user fetched successfully")

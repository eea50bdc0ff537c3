"""
Token helpers:
- access/refresh JWT creation via PyJWT, each kind signed with its own secret
- verification of signature, expiry, type and required claims

All functions take the user and an AuthConfig explicitly; nothing here reads
Flask's current_app or touches storage.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, NamedTuple

import jwt

from utils.errors import InvalidTokenError

if TYPE_CHECKING:
    from api.config import AuthConfig

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class AccessTokenClaims(NamedTuple):
    user_id: str
    username: str
    email: str
    issued_at: datetime
    expires_at: datetime
    jti: str


class RefreshTokenClaims(NamedTuple):
    user_id: str
    issued_at: datetime
    expires_at: datetime
    jti: str


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _base_claims(subject: str, token_type: str, lifetime, config: "AuthConfig") -> Dict[str, Any]:
    now = _now()
    return {
        "iss": config.issuer,
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }


def issue_access_token(user, config: "AuthConfig") -> str:
    """Sign a short-lived access token carrying the user's identity."""
    payload = _base_claims(user.id, ACCESS, config.access_token_ttl, config)
    payload["username"] = user.username
    payload["email"] = user.email
    return jwt.encode(payload, config.access_token_secret, algorithm=config.algorithm)


def issue_refresh_token(user, config: "AuthConfig") -> str:
    """Sign a long-lived refresh token; it only identifies the user."""
    payload = _base_claims(user.id, REFRESH, config.refresh_token_ttl, config)
    return jwt.encode(payload, config.refresh_token_secret, algorithm=config.algorithm)


def _decode(token: str, secret: str, expected_type: str, config: "AuthConfig") -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises InvalidTokenError on invalid signature,
    expiry, missing claims or wrong token type.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[config.algorithm],
            issuer=config.issuer,
            options={"require": ["sub", "iat", "exp", "jti"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("Token rejected: %s", exc)
        raise InvalidTokenError("Invalid token") from exc

    if decoded.get("type") != expected_type:
        raise InvalidTokenError("Wrong token type")
    return decoded


def _ts(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def verify_refresh_token(token: str, config: "AuthConfig") -> RefreshTokenClaims:
    """Check a refresh token's signature and expiry. Does not consult storage."""
    decoded = _decode(token, config.refresh_token_secret, REFRESH, config)
    return RefreshTokenClaims(
        user_id=decoded["sub"],
        issued_at=_ts(decoded["iat"]),
        expires_at=_ts(decoded["exp"]),
        jti=decoded["jti"],
    )


def verify_access_token(token: str, config: "AuthConfig") -> AccessTokenClaims:
    decoded = _decode(token, config.access_token_secret, ACCESS, config)
    return AccessTokenClaims(
        user_id=decoded["sub"],
        username=decoded.get("username", ""),
        email=decoded.get("email", ""),
        issued_at=_ts(decoded["iat"]),
        expires_at=_ts(decoded["exp"]),
        jti=decoded["jti"],
    )

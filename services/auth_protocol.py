"""
Login / refresh / logout state machine.

A user is either logged out (no stored refresh token) or authenticated with
exactly one stored refresh token. Login and refresh enter the authenticated
state through SessionStore.issue_session(); logout leaves it through
SessionStore.revoke_session(). Refresh with anything but the stored token
is rejected, which is how reuse of a rotated-out token is detected.
"""
from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from models.user import User
from services.session_store import STALE_TOKEN_MESSAGE
from utils.errors import InvalidTokenError, NotFoundError, UnauthorizedError, ValidationError
from utils.security import verify_password
from utils.tokens import TokenPair, verify_refresh_token

logger = logging.getLogger(__name__)


class LoginResult(NamedTuple):
    user: User
    tokens: TokenPair


def _blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or not value.strip()


class AuthProtocol:
    def __init__(self, repository, session_store, config, password_verifier=verify_password):
        self.repository = repository
        self.session_store = session_store
        self.config = config
        self.verify_password = password_verifier

    def login(self, password: Optional[str], username: Optional[str] = None,
              email: Optional[str] = None) -> LoginResult:
        if _blank(password):
            raise ValidationError("Password is required")
        if _blank(username) and _blank(email):
            raise ValidationError("Username or email is required")

        user = self.repository.find_by_username_or_email(username=username, email=email)
        if user is None:
            raise NotFoundError("User does not exist")

        if not self.verify_password(password, user.password_hash):
            logger.info("Rejected login for user_id=%s: bad password", user.id)
            raise UnauthorizedError("Invalid user credentials")

        tokens = self.session_store.issue_session(user.id)
        logger.info("User logged in: user_id=%s", user.id)
        return LoginResult(user=self.repository.find_by_id(user.id), tokens=tokens)

    def refresh(self, incoming_refresh_token: Optional[str]) -> TokenPair:
        if _blank(incoming_refresh_token):
            raise UnauthorizedError("Unauthorized request")

        try:
            claims = verify_refresh_token(incoming_refresh_token, self.config)
        except InvalidTokenError as exc:
            logger.warning("Rejected refresh: %s", exc.message)
            raise

        user = self.repository.find_by_id(claims.user_id)
        if user is None:
            raise UnauthorizedError("Invalid refresh token")

        if incoming_refresh_token != user.refresh_token:
            # Only this request is refused; the currently stored token stays valid.
            logger.warning("Rejected refresh for user_id=%s: stale or reused token", user.id)
            raise UnauthorizedError(STALE_TOKEN_MESSAGE)

        try:
            tokens = self.session_store.issue_session(user.id, expected_token=incoming_refresh_token)
        except NotFoundError as exc:
            # never reveal through the refresh path whether a user id exists
            raise UnauthorizedError("Invalid refresh token") from exc
        except UnauthorizedError:
            logger.warning("Rejected refresh for user_id=%s: lost rotation race", user.id)
            raise

        logger.info("Access token refreshed: user_id=%s", user.id)
        return tokens

    def logout(self, user_id: Optional[str]) -> None:
        """`user_id` must come from an already verified access token."""
        if _blank(user_id):
            raise UnauthorizedError("Unauthorized request")
        self.session_store.revoke_session(user_id)
        logger.info("User logged out: user_id=%s", user_id)

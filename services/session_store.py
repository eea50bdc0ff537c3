"""
SessionStore: single point of truth for a user's current refresh token.

A session is the (user, refresh_token) pair on the user row. issue_session()
mints a new token pair and overwrites the stored refresh token in one
guarded UPDATE; revoke_session() clears it.
"""
from __future__ import annotations

import logging
from typing import Optional

from models.user_repository import ANY
from utils.errors import ApiError, InternalError, NotFoundError, UnauthorizedError
from utils.tokens import TokenPair, issue_access_token, issue_refresh_token

STALE_TOKEN_MESSAGE = "Refresh token is expired or used"


class SessionStore:
    def __init__(self, repository, config, logger: Optional[logging.Logger] = None):
        self.repository = repository
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def issue_session(self, user_id: str, expected_token=ANY) -> TokenPair:
        """
        Mint a token pair for `user_id` and make its refresh token the only
        valid one.

        With `expected_token` the stored value must still equal it at write
        time, otherwise UnauthorizedError: another rotation or a logout got
        there first.
        """
        try:
            user = self.repository.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")

            access_token = issue_access_token(user, self.config)
            refresh_token = issue_refresh_token(user, self.config)

            if not self.repository.replace_refresh_token(user.id, refresh_token, expected=expected_token):
                raise UnauthorizedError(STALE_TOKEN_MESSAGE)
        except ApiError:
            raise
        except Exception as exc:
            self._rollback()
            self.logger.exception("Token generation failed for user_id=%s", user_id)
            raise InternalError("Something went wrong while generating refresh and access token") from exc

        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def revoke_session(self, user_id: str) -> None:
        """Clear the stored refresh token; every outstanding one stops working."""
        try:
            self.repository.replace_refresh_token(user_id, None)
        except Exception as exc:
            self._rollback()
            self.logger.exception("Session revocation failed for user_id=%s", user_id)
            raise InternalError("Something went wrong while logging out") from exc

    def _rollback(self):
        storage = getattr(self.repository, "storage", None)
        if storage is None:
            return
        try:
            storage.rollback()
        except Exception:
            self.logger.exception("Rollback after session failure also failed")

"""
AccountManager module for Alias Platform.

Registers users and logs them in. A successful login creates a session row
holding a random opaque token and returns that token. A failed login never
tells the caller whether the username or the password was wrong.
"""

import logging
from typing import Optional

from ..errors import AuthFailedError, InvalidInputError, UserNotFoundError
from ..models import Authenticated
from ..security.tokens import SessionTokenGenerator
from ..storage.base import SessionStore, UserStore
from .strategies import BaseStrategy

log = logging.getLogger(__name__)


class AccountManager:
    """
    Args:
        users (UserStore): Backend that owns the users table.
        sessions (SessionStore): Backend that owns the sessions table.
        token_generator (Optional[BaseStrategy]): Session token source.
            Defaults to SessionTokenGenerator (ALIAS_TOKEN_LENGTH characters).
    """

    def __init__(
        self,
        users: UserStore,
        sessions: SessionStore,
        token_generator: Optional[BaseStrategy] = None,
    ):
        self.users = users
        self.sessions = sessions
        self.token_generator = token_generator or SessionTokenGenerator()

    @staticmethod
    def _require_credentials(username: str, password: str) -> None:
        if not username or not password:
            raise InvalidInputError("username and password are required")

    def register_user(self, username: str, password: str) -> int:
        """
        Create a user.

        Returns:
            int: New user id.

        Raises:
            InvalidInputError: Empty username or password.
            UsernameConflictError: Username taken.
            HashingError, StoreError: Internal failures.
        """
        self._require_credentials(username, password)
        user_id = self.users.create_user(username, password)
        log.info("user created: id=%s", user_id)
        return user_id

    def login_user(self, username: str, password: str) -> str:
        """
        Authenticate and open a session.

        Returns:
            str: The new session token.

        Raises:
            InvalidInputError: Empty username or password.
            AuthFailedError: Unknown user or wrong password. No session is created.
            GenerationError, StoreError: Internal failures.
        """
        self._require_credentials(username, password)
        try:
            outcome = self.users.authenticate_user(username, password)
        except UserNotFoundError as exc:
            log.info("failed to login user: %s", username)
            raise AuthFailedError() from exc

        if not isinstance(outcome, Authenticated):
            log.info("failed to login user: %s", username)
            raise AuthFailedError()

        log.info("user authenticated: %s", username)
        token = self.token_generator.generate()
        session_id = self.sessions.create_session(outcome.user_id, token)
        log.debug("session created: id=%s user_id=%s", session_id, outcome.user_id)
        return token

"""
Credential Engine: one-way password hashing and verification.

Hashes use werkzeug's self-describing format ``method$salt$hash``, so the
method (scrypt, pbkdf2, ...) can change without touching callers or
migrating stored rows: old hashes keep verifying under their own method.

LLM Prompt Example:
    "Explain why a password hash should carry its own method and salt, and
    how that enables upgrading the hashing scheme without a migration."
"""

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..config import settings
from ..errors import HashingError

log = logging.getLogger(__name__)


class PasswordHasher:
    """Salted, adaptive password hashing.

    Args:
        method (str): werkzeug method spec, e.g. "scrypt" or "pbkdf2:sha256:600000".
            Defaults to ALIAS_PASSWORD_METHOD.
        salt_length (int): Length of the random salt.
    """

    def __init__(self, method: str = None, salt_length: int = 16) -> None:
        self.method = method or settings.PASSWORD_METHOD
        self.salt_length = salt_length

    def hash(self, password: str) -> str:
        """
        Return a salted hash of `password`.

        Raises:
            HashingError: If the OS entropy source cannot produce a salt.
        """
        try:
            return generate_password_hash(password, method=self.method, salt_length=self.salt_length)
        except (OSError, NotImplementedError) as exc:
            log.error("entropy source failed while hashing password: %s", exc)
            raise HashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        """
        True if `password` matches `hashed`.

        Mismatches and malformed or unknown-method hashes both return False.
        """
        if not isinstance(hashed, str) or not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            log.warning("stored password hash is malformed")
            return False

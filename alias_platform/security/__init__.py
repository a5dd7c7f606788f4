"""
Credential and session-token primitives.
"""

from .passwords import PasswordHasher
from .tokens import SessionTokenGenerator

__all__ = ["PasswordHasher", "SessionTokenGenerator"]

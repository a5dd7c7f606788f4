"""Opaque session tokens."""

from dataclasses import dataclass, field

from ..config import settings
from ..manager.strategies import RandomStrategy


@dataclass(frozen=True)
class SessionTokenGenerator(RandomStrategy):
    """Same entropy source as alias generation, separate instance and length (ALIAS_TOKEN_LENGTH)."""
    length: int = field(default_factory=lambda: settings.TOKEN_LENGTH)

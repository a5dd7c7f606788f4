"""
Random string generation for aliases (and, via security.tokens, session tokens).

RandomStrategy draws characters from a URL-safe alphabet using
`random.SystemRandom`, i.e. the operating system's entropy source. It never
checks uniqueness: the store's unique constraint is the single source of
truth for collisions, so there is no check-then-insert window.

Configuration (via alias_platform.config.settings):
- ALIAS_LENGTH: default generated alias length (default 6)
"""

import random
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..config import settings
from ..errors import GenerationError

URL_SAFE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class BaseStrategy(ABC):
    """Abstract base for alias generation strategies."""

    @abstractmethod
    def generate(self, length: Optional[int] = None) -> str:  # pragma: no cover
        """Return a new candidate string of `length` characters."""
        raise NotImplementedError


@dataclass(frozen=True)
class RandomStrategy(BaseStrategy):
    """
    Random fixed-length strings over `alphabet`.

    Attributes:
        length (int): Default length when generate() gets none.
        alphabet (str): Characters to draw from.
    """
    length: int = field(default_factory=lambda: settings.ALIAS_LENGTH)
    alphabet: str = URL_SAFE_ALPHABET

    def generate(self, length: Optional[int] = None) -> str:
        """
        Raises:
            ValueError: If the length is not positive.
            GenerationError: If the entropy source is unavailable.
        """
        L = self.length if length is None else int(length)
        if L <= 0:
            raise ValueError("length must be positive")
        try:
            rng = random.SystemRandom()
            return "".join(rng.choice(self.alphabet) for _ in range(L))
        except (OSError, NotImplementedError) as exc:
            raise GenerationError() from exc

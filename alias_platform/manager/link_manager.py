"""
LinkManager module for Alias Platform.

Responsibilities:
    - Validate target URLs and explicit aliases
    - Generate a random alias when none is given
    - Save, resolve and delete alias → URL mappings through a URLStore

Design notes:
    - Uniqueness belongs to the store. The manager never asks "is this alias
      free?" before saving; it saves and lets AliasConflictError propagate.
    - A generated alias that collides is NOT retried with a fresh one. The
      conflict reaches the caller exactly like a clash on an explicit alias.
    - The store is an injected URLStore, so tests can pass any fake that
      implements save/get/delete.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from ..errors import AliasConflictError, InvalidInputError
from ..storage.base import URLStore
from .strategies import BaseStrategy, RandomStrategy

log = logging.getLogger(__name__)

AliasPattern = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_ALIAS_LENGTH = 64

# GET paths the HTTP app serves itself; an alias with one of these names
# could be saved but never redirected.
RESERVED_ALIASES = frozenset({"docs", "redoc", "health"})


class LinkManager:
    """
    Coordinates creation, lookup and deletion of aliases.

    Args:
        urls (URLStore): Backend that owns the url table.
        alias_strategy (Optional[BaseStrategy]): Alias generator. Defaults to
            RandomStrategy with the configured ALIAS_LENGTH.
    """

    def __init__(self, urls: URLStore, alias_strategy: Optional[BaseStrategy] = None):
        self.urls = urls
        self.alias_strategy = alias_strategy or RandomStrategy()

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        """
        Validate that a URL has an http/https scheme and a netloc.

        Raises:
            InvalidInputError: If the URL is malformed.
        """
        parsed = urlparse(url or "")
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise InvalidInputError("invalid URL")

    def _validate_alias(self, alias: str) -> None:
        """
        Validate alias characters and length (URL-safe, max 64), and keep
        aliases out of the app's own paths.

        Raises:
            InvalidInputError: If alias contains invalid characters, is too
                long or is reserved.
        """
        if not AliasPattern.match(alias):
            raise InvalidInputError("alias must contain only A-Z, a-z, 0-9, '-' or '_'")
        if len(alias) > MAX_ALIAS_LENGTH:
            raise InvalidInputError("alias too long")
        if alias in RESERVED_ALIASES:
            raise InvalidInputError("alias is reserved")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def save_url(self, target: str, alias: Optional[str] = None) -> str:
        """
        Map `alias` (or a freshly generated one) to `target`.

        Args:
            target (str): Long URL.
            alias (Optional[str]): Explicit alias; empty or None means generate.

        Returns:
            str: The alias that was stored.

        Raises:
            InvalidInputError: On an invalid URL or alias.
            AliasConflictError: If the alias is already taken, or a generated
                alias is reserved (no retry).
            GenerationError: If no random alias could be generated.
            StoreError: On any other storage failure.
        """
        self._validate_url(target)

        if alias:
            self._validate_alias(alias)
        else:
            alias = self.alias_strategy.generate()
            if alias in RESERVED_ALIASES:
                # Same outcome as any other generated-alias collision
                log.info("generated reserved alias: %s", alias)
                raise AliasConflictError(f"alias {alias!r} is reserved")

        try:
            url_id = self.urls.save_url(target, alias)
        except AliasConflictError:
            log.info("alias already exists: %s", alias)
            raise

        log.info("url added: id=%s alias=%s", url_id, alias)
        return alias

    def resolve_url(self, alias: str) -> str:
        """
        Return the target URL for `alias`.

        Raises:
            URLNotFoundError: If the alias is unknown.
            StoreError: On storage failure.
        """
        target = self.urls.get_url(alias)
        log.debug("resolved alias %s", alias)
        return target

    def delete_url(self, alias: str) -> None:
        """Delete `alias`; succeeds whether or not it existed."""
        self.urls.delete_url(alias)
        log.info("url deleted: alias=%s", alias)

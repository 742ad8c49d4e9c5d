"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and runs them against
the cache store. Store errors are reported through the user interface; each
handler returns True on success so the CLI can pick an exit code.
"""

import json
import logging
from typing import List, Optional

# Domain Layer Imports
from shardcache.domain.exceptions import CacheError
from shardcache.domain.interfaces.user_interface import UserInterface
from shardcache.domain.models.common import CacheKey

# Infrastructure Layer Imports
from shardcache.infrastructure.cache.file_store import FileCacheStore

logger = logging.getLogger(__name__)

_MISS = object()


class CommandHandler:
    """Handles incoming commands and delegates to the cache store."""

    def __init__(self, store: FileCacheStore, ui: UserInterface):
        """Initializes the CommandHandler with the store and the UI."""
        self.store = store
        self.ui = ui

    def _report(self, action: str, error: CacheError) -> bool:
        logger.error(f"{action} failed: {error.message}", exc_info=True)
        self.ui.display_error(f"{action} failed: {error.message}")
        return False

    def handle_put(
        self,
        key: str,
        raw_value: str,
        ttl: Optional[int] = None,
        serializer: Optional[str] = None,
        parse_json: bool = False,
    ) -> bool:
        """Handles the 'put' command."""
        logger.info(f"Handling 'put' command for key: {key}")
        value = raw_value
        if parse_json:
            try:
                value = json.loads(raw_value)
            except json.JSONDecodeError as e:
                self.ui.display_error(f"Value is not valid JSON: {e}")
                return False
        try:
            self.store.add(CacheKey(key), value, ttl=ttl, serializer=serializer)
        except CacheError as e:
            return self._report("Put", e)
        self.ui.display_info(f"Stored key '{key}'.")
        return True

    def handle_get(self, key: str) -> bool:
        """Handles the 'get' command. A miss is not an error but returns False."""
        logger.info(f"Handling 'get' command for key: {key}")
        try:
            value = self.store.get(CacheKey(key), default=_MISS)
        except CacheError as e:
            return self._report("Get", e)
        if value is _MISS:
            self.ui.display_info(f"No cached value for key '{key}'.")
            return False
        self.ui.display_output(value)
        return True

    def handle_has(self, keys: List[str]) -> bool:
        """Handles the 'has' command."""
        logger.info(f"Handling 'has' command for {len(keys)} key(s)")
        try:
            present = self.store.has(keys)
        except CacheError as e:
            return self._report("Has", e)
        if present:
            self.ui.display_info(f"All {len(keys)} key(s) are cached.")
        else:
            self.ui.display_info("Not all keys are cached.")
        return present

    def handle_invalidate(self, keys: List[str]) -> bool:
        """Handles the 'invalidate' command."""
        logger.info(f"Handling 'invalidate' command for {len(keys)} key(s)")
        try:
            self.store.invalidate(keys)
        except CacheError as e:
            return self._report("Invalidate", e)
        self.ui.display_info(f"Invalidated {len(keys)} key(s).")
        return True

    def handle_clear(self) -> bool:
        """Handles the 'clear' command."""
        logger.info("Handling 'clear' command")
        try:
            self.store.clear()
        except CacheError as e:
            return self._report("Clear", e)
        self.ui.display_info(f"Cache cleared: {self.store.root}")
        return True

    def handle_path(self, key: str) -> bool:
        """Handles the 'path' command: shows where a key is stored."""
        try:
            path = self.store.path_for(CacheKey(key))
        except CacheError as e:
            return self._report("Path", e)
        self.ui.display_output(str(path))
        return True

    def handle_info(self) -> bool:
        """Handles the 'info' command: summarizes the cache directory."""
        try:
            root = self.store.root
            entries = 0
            total_bytes = 0
            for path in self.store.entry_paths():
                entries += 1
                total_bytes += path.stat().st_size
        except CacheError as e:
            return self._report("Info", e)
        except OSError as e:
            logger.error(f"Failed to inspect cache directory: {e}", exc_info=True)
            self.ui.display_error(f"Info failed: {e}")
            return False
        self.ui.display_table(
            "Cache",
            ["Setting", "Value"],
            [
                ("Root", root),
                ("Entries", entries),
                ("Size (bytes)", total_bytes),
                ("Default TTL (s)", self.store.default_ttl),
                ("Default serializer", self.store.default_serializer.tag),
            ],
        )
        return True

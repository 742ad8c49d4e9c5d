"""Concrete implementation of the file-backed Cache Store.

Each key maps to one JSON envelope file under a two-level shard directory
derived from the MD5 digest of the key:

    <root>/<digest[0:2]>/<digest[2:4]>/<digest>.cache

Writes hold an exclusive flock for the whole truncate+write, reads hold a
shared flock, so a reader never sees a half-written envelope. Expiration is
lazy: stale and corrupt files are removed by the read that finds them.
"""

import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Union

# Domain Layer Imports
from shardcache.domain.exceptions import (
    DeleteFailed,
    DirectoryUnavailable,
    ReadFailed,
    WriteFailed,
)
from shardcache.domain.interfaces.cache import CacheStore, KeyOrKeys
from shardcache.domain.models.common import (
    CACHE_FILE_EXTENSION,
    DEFAULT_SERIALIZER_TAG,
    DEFAULT_TTL_SECONDS,
    SHARD_LEVELS,
    SHARD_WIDTH,
    CacheKey,
    KeyDigest,
)
from shardcache.domain.models.entry import CacheEntry, MalformedEntry

# Infrastructure Imports
from shardcache.infrastructure.config.settings import get_cache_root
from shardcache.infrastructure.filesystem.locking import ensure_directory, locked_file
from shardcache.infrastructure.serialization.serializers import PayloadDecodeError, Serializer

logger = logging.getLogger(__name__)

# Distinguishes "no entry" from a stored None
_MISSING = object()


def _validate_ttl(ttl: Any) -> int:
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
        raise ValueError(f"TTL must be a non-negative integer number of seconds, got {ttl!r}")
    return ttl


class FileCacheStore(CacheStore):
    """Filesystem cache with sharded layout, flock discipline and lazy expiry."""

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        default_serializer: Union[Serializer, str] = DEFAULT_SERIALIZER_TAG,
    ):
        """Initializes the store.

        Args:
            root: Cache root directory. Resolved from configuration on first
                use when omitted.
            default_ttl: TTL in seconds used when `add` gets none.
            default_serializer: Serializer used when `add` gets none.
        """
        self._root: Optional[Path] = None
        self.default_ttl = _validate_ttl(default_ttl)
        self.default_serializer = Serializer.from_tag(default_serializer)
        if root is not None:
            self.set_root(root)
        logger.debug(
            f"FileCacheStore created. root={self._root or '<lazy>'}, "
            f"ttl={self.default_ttl}s, serializer={self.default_serializer.tag}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root={str(self._root)!r})"

    # --- Root Directory ---

    @property
    def root(self) -> Path:
        """The cache root, resolved from configuration if never set."""
        if self._root is None:
            default_root = get_cache_root()
            logger.info(f"No cache root set, using configured default: {default_root}")
            self.set_root(default_root)
        return self._root

    def set_root(self, path: Union[str, Path]) -> None:
        """Sets the cache root, creating it (and its parents) if needed.

        Raises:
            DirectoryUnavailable: If the directory cannot be created or written.
        """
        root = Path(path).expanduser()
        try:
            ensure_directory(root)
        except OSError as e:
            logger.error(f"Failed to create cache directory {root}: {e}")
            raise DirectoryUnavailable(root, original_error=e) from e
        if not root.is_dir() or not os.access(root, os.W_OK | os.X_OK):
            logger.error(f"Cache directory {root} is not a writable directory")
            raise DirectoryUnavailable(root)
        self._root = root
        logger.info(f"Cache root set to: {root}")

    # --- Key Mapping ---

    @staticmethod
    def key_digest(key: CacheKey) -> KeyDigest:
        """Hashes a key to its fixed-width hex digest."""
        if not isinstance(key, str):
            raise TypeError(f"Cache keys must be strings, got {type(key).__name__}")
        return KeyDigest(hashlib.md5(key.encode("utf-8"), usedforsecurity=False).hexdigest())

    def path_for(self, key: CacheKey) -> Path:
        """Returns the entry file path a key maps to."""
        digest = self.key_digest(key)
        shards = [digest[level * SHARD_WIDTH:(level + 1) * SHARD_WIDTH] for level in range(SHARD_LEVELS)]
        return self.root.joinpath(*shards, digest + CACHE_FILE_EXTENSION)

    def entry_paths(self) -> Iterator[Path]:
        """Yields every entry file currently under the root."""
        for path in self.root.rglob(f"*{CACHE_FILE_EXTENSION}"):
            if path.is_file():
                yield path

    @staticmethod
    def _as_keys(keys: KeyOrKeys) -> Iterable[str]:
        if isinstance(keys, str):
            return (keys,)
        return keys

    # --- CacheStore Interface Implementation ---

    def add(
        self,
        key: CacheKey,
        value: Any,
        ttl: Optional[int] = None,
        serializer: Optional[Union[Serializer, str]] = None,
    ) -> None:
        """Stores a value, replacing any existing entry for the key."""
        ttl = self.default_ttl if ttl is None else _validate_ttl(ttl)
        codec = self.default_serializer if serializer is None else Serializer.from_tag(serializer)

        entry = CacheEntry(
            expiration=int(time.time()) + ttl,
            data=codec.encode(value),
            serializer=codec.tag,
        )
        payload = entry.to_json().encode("utf-8")
        path = self.path_for(key)

        try:
            ensure_directory(path.parent)
            with locked_file(path, exclusive=True, create=True) as handle:
                try:
                    handle.truncate(0)
                    handle.write(payload)
                    handle.flush()
                except OSError:
                    # Still under the lock: drop the partial envelope
                    self._unlink_partial(path)
                    raise
        except OSError as e:
            logger.error(f"Failed to write cache file {path}: {e}")
            raise WriteFailed(path, original_error=e) from e
        logger.debug(f"Stored cache entry: key={key}, file={path}, ttl={ttl}s, serializer={codec.tag}")

    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Retrieves a value, or `default` on a miss."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def has(self, keys: KeyOrKeys) -> bool:
        """True if every given key is cached. Stops at the first miss."""
        return all(self._lookup(key) is not _MISSING for key in self._as_keys(keys))

    def invalidate(self, keys: KeyOrKeys) -> None:
        """Deletes the entries for one or more keys."""
        for key in self._as_keys(keys):
            path = self.path_for(key)
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error(f"Failed to delete cache file {path}: {e}")
                raise DeleteFailed(path, original_error=e) from e
            logger.debug(f"Invalidated cache entry: key={key}, file={path}")

    def clear(self) -> None:
        """Deletes all entries and shard directories, children first."""
        root = self.root

        def _walk_error(error: OSError) -> None:
            raise DeleteFailed(error.filename, original_error=error) from error

        removed = 0
        for dirpath, dirnames, filenames in os.walk(root, topdown=False, onerror=_walk_error):
            current = Path(dirpath)
            # Symlinked directories show up in dirnames but are never walked
            links = [name for name in dirnames if (current / name).is_symlink()]
            for name in filenames + links:
                self._remove(current / name, os.unlink)
                removed += 1
            if current != root:
                self._remove(current, os.rmdir)
        logger.info(f"Cleared cache at {root}. Removed {removed} file(s).")

    def remember(
        self,
        key: CacheKey,
        producer: Callable[[], Any],
        ttl: Optional[int] = None,
        serializer: Optional[Union[Serializer, str]] = None,
    ) -> Any:
        """Returns the cached value or stores and returns `producer()`.

        Only a real miss (missing, expired or corrupt entry) calls the
        producer; falsy cached values such as 0 or '' are returned as is.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value
        logger.debug(f"Cache miss for key: {key}. Calling producer.")
        value = producer()
        self.add(key, value, ttl=ttl, serializer=serializer)
        return value

    # --- Internals ---

    def _lookup(self, key: CacheKey) -> Any:
        """Reads an entry, returning `_MISSING` on a miss."""
        path = self.path_for(key)
        try:
            with locked_file(path, exclusive=False) as handle:
                raw = handle.read()
        except FileNotFoundError:
            logger.debug(f"Cache miss for key: {key}")
            return _MISSING
        except OSError as e:
            logger.error(f"Failed to read cache file {path}: {e}")
            raise ReadFailed(path, original_error=e) from e

        try:
            entry = CacheEntry.from_json(raw.decode("utf-8"))
        except (UnicodeDecodeError, MalformedEntry) as e:
            logger.warning(f"Corrupt cache file {path}: {e}. Removing.")
            self._discard(path, raw)
            return _MISSING

        if entry.is_expired(time.time()):
            logger.debug(f"Cache expired for key: {key}. Removing file.")
            self._discard(path, raw)
            return _MISSING

        # Unknown tags are a hard error; the file is left for inspection
        codec = Serializer.from_tag(entry.serializer)
        try:
            value = codec.decode(entry.data)
        except PayloadDecodeError as e:
            logger.warning(f"Corrupt payload in cache file {path}: {e}. Removing.")
            self._discard(path, raw)
            return _MISSING

        logger.debug(f"Cache hit for key: {key}")
        return value

    def _discard(self, path: Path, stale: bytes) -> None:
        """Removes a stale or corrupt file unless it was rewritten meanwhile.

        Best effort: a failure is logged and the read still reports a miss.
        """
        try:
            with locked_file(path, exclusive=True) as handle:
                if handle.read() != stale:
                    logger.debug(f"Cache file {path} was rewritten concurrently, keeping it")
                    return
                path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Failed to remove stale cache file {path}: {e}")
            return
        logger.info(f"Removed stale cache file: {path}")

    @staticmethod
    def _unlink_partial(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Failed to remove partially written cache file {path}: {e}")
            return
        logger.info(f"Removed partially written cache file: {path}")

    @staticmethod
    def _remove(path: Path, remover: Callable[[Path], None]) -> None:
        try:
            remover(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove {path} while clearing cache: {e}")
            raise DeleteFailed(path, original_error=e) from e

"""Interface for cache stores.

Defines the contract for storing, retrieving, invalidating and clearing
cached values with a TTL and a per-entry serializer.
"""

import abc
from typing import Any, Callable, Iterable, Optional, Union

# Import relevant domain models
from ..models.common import CacheKey

KeyOrKeys = Union[CacheKey, str, Iterable[str]]


class CacheStore(abc.ABC):
    """Abstract Base Class for cache store operations."""

    @abc.abstractmethod
    def add(
        self,
        key: CacheKey,
        value: Any,
        ttl: Optional[int] = None,
        serializer: Optional[str] = None,
    ) -> None:
        """Stores a value, replacing any existing entry for the key.

        Args:
            key: The cache key to store the value under.
            value: The value to store.
            ttl: Time-to-live in seconds (store default if None).
            serializer: Serializer tag (store default if None).

        Raises:
            UnsupportedSerializer: If the serializer tag is unknown.
            EncodeFailed: If the value cannot be encoded.
            WriteFailed: If the entry cannot be written.
        """
        pass

    @abc.abstractmethod
    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Retrieves a value.

        Args:
            key: The cache key to retrieve.
            default: Returned when the entry is missing, expired or corrupt.

        Returns:
            The cached value, otherwise `default`.

        Raises:
            UnsupportedSerializer: If the entry records an unknown serializer.
            ReadFailed: If the entry exists but cannot be read.
        """
        pass

    @abc.abstractmethod
    def has(self, keys: KeyOrKeys) -> bool:
        """Checks whether one key, or every key of a collection, is cached.

        Args:
            keys: A single key or an iterable of keys.
        """
        pass

    @abc.abstractmethod
    def invalidate(self, keys: KeyOrKeys) -> None:
        """Deletes one entry or several entries. Missing entries are ignored.

        Raises:
            DeleteFailed: If an existing entry cannot be removed.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Deletes every entry and shard directory, keeping the root.

        Raises:
            DeleteFailed: If a file or directory cannot be removed.
        """
        pass

    @abc.abstractmethod
    def remember(
        self,
        key: CacheKey,
        producer: Callable[[], Any],
        ttl: Optional[int] = None,
        serializer: Optional[str] = None,
    ) -> Any:
        """Returns the cached value, or computes, stores and returns it on a miss.

        Args:
            key: The cache key.
            producer: Zero-argument callable invoked at most once, on a miss.
            ttl: Time-to-live in seconds for a freshly computed value.
            serializer: Serializer tag for a freshly computed value.
        """
        pass

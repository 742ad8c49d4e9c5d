"""shardcache: a filesystem-backed key-value cache with TTLs.

Typical use:

    from shardcache import FileCacheStore

    store = FileCacheStore(root="/tmp/my-cache")
    store.add("user:42", {"name": "Ada"}, ttl=600, serializer="json")
    store.get("user:42")
"""

from shardcache.domain.exceptions import (
    CacheError,
    DeleteFailed,
    DirectoryUnavailable,
    EncodeFailed,
    ReadFailed,
    UnsupportedSerializer,
    WriteFailed,
)
from shardcache.domain.interfaces.cache import CacheStore
from shardcache.infrastructure.cache.file_store import FileCacheStore
from shardcache.infrastructure.serialization.serializers import Serializer

__version__ = "0.1.0"

__all__ = [
    "CacheError",
    "CacheStore",
    "DeleteFailed",
    "DirectoryUnavailable",
    "EncodeFailed",
    "FileCacheStore",
    "ReadFailed",
    "Serializer",
    "UnsupportedSerializer",
    "WriteFailed",
]

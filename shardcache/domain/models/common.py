"""Defines common Value Objects used across the cache domain.

These objects represent simple values like cache keys, key digests and
serializer tags, plus the constants describing the on-disk layout.
"""

from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
CacheKey = NewType("CacheKey", str)            # Caller supplied key, never stored verbatim
KeyDigest = NewType("KeyDigest", str)          # 32 lowercase hex chars (MD5 of the key)
SerializerTag = NewType("SerializerTag", str)  # e.g. 'serialize', 'json', 'yaml'

# === On-disk Layout ===

SHARD_LEVELS = 2              # Number of nested shard directories
SHARD_WIDTH = 2               # Hex characters per shard directory name
CACHE_FILE_EXTENSION = ".cache"

# === Defaults ===

DEFAULT_TTL_SECONDS = 60 * 60  # 1 hour
DEFAULT_SERIALIZER_TAG = SerializerTag("serialize")

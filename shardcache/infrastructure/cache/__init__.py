"""Cache Store Implementation.

Provides the file-backed implementation of the CacheStore interface:
hashed, sharded entry files guarded by advisory locks, with lazy TTL
expiration and self-healing of corrupt entries.
Bounded Context: Cache Management
"""

from .file_store import FileCacheStore

__all__ = ["FileCacheStore"]

"""
Cache Exceptions

Domain-specific exceptions for cache store operations.
Corruption and expiration are not errors: the store normalizes both to a miss.
Everything else surfaces to the caller with the original error chained.
"""

from typing import Any, Dict, Optional


class CacheError(Exception):
    """Base exception for cache store errors.

    All store operations raise this or its subclasses.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.details = details or {}
        if original_error is not None:
            self.details.setdefault("original_error", str(original_error))
            self.details.setdefault("original_error_type", type(original_error).__name__)
        super().__init__(self.message)
        if original_error is not None:
            self.__cause__ = original_error


class DirectoryUnavailable(CacheError):
    """Raised when the cache root cannot be created or is not writable."""

    def __init__(self, path: Any, original_error: Optional[BaseException] = None):
        super().__init__(
            message=f"Cache directory unavailable: {path}",
            details={"path": str(path)},
            original_error=original_error,
        )
        self.path = path


class UnsupportedSerializer(CacheError, ValueError):
    """Raised when a serializer tag is not part of the registry."""

    def __init__(self, tag: Any):
        super().__init__(
            message=f"Unsupported serializer: {tag!r}",
            details={"serializer": str(tag)},
        )
        self.tag = tag


class EncodeFailed(CacheError):
    """Raised when a value cannot be encoded by the chosen serializer."""

    def __init__(self, serializer: str, original_error: Optional[BaseException] = None):
        super().__init__(
            message=f"Failed to encode value with serializer '{serializer}'",
            details={"serializer": serializer},
            original_error=original_error,
        )


class WriteFailed(CacheError):
    """Raised when an entry file or its shard directory cannot be written."""

    def __init__(self, path: Any, original_error: Optional[BaseException] = None):
        super().__init__(
            message=f"Failed to write cache file: {path}",
            details={"path": str(path)},
            original_error=original_error,
        )
        self.path = path


class ReadFailed(CacheError):
    """Raised when an existing entry file cannot be opened or read."""

    def __init__(self, path: Any, original_error: Optional[BaseException] = None):
        super().__init__(
            message=f"Failed to read cache file: {path}",
            details={"path": str(path)},
            original_error=original_error,
        )
        self.path = path


class DeleteFailed(CacheError):
    """Raised when an existing entry file or shard directory cannot be removed."""

    def __init__(self, path: Any, original_error: Optional[BaseException] = None):
        super().__init__(
            message=f"Failed to delete cache path: {path}",
            details={"path": str(path)},
            original_error=original_error,
        )
        self.path = path

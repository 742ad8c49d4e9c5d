"""Payload codecs for cache entries."""

from .serializers import PayloadDecodeError, Serializer

__all__ = ["PayloadDecodeError", "Serializer"]

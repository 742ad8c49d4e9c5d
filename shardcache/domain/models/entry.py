"""The persisted cache entry (envelope) and its JSON text format."""

import json
from dataclasses import dataclass
from typing import Any, Dict

from .common import SerializerTag

REQUIRED_FIELDS = ("expiration", "data", "serializer")


class MalformedEntry(ValueError):
    """Signals that an entry file does not hold a complete envelope."""


@dataclass(frozen=True)
class CacheEntry:
    """On-disk representation of a cache entry with expiry.

    Attributes:
        expiration: Unix timestamp (seconds) after which the entry is stale.
        data: Serializer output, always a string so it fits in the JSON document.
        serializer: Tag of the codec that produced `data`.
    """
    expiration: int
    data: str
    serializer: SerializerTag

    def is_expired(self, now: float) -> bool:
        """An entry stays valid up to and including its expiration second.

        `now` is floored to whole seconds, the unit `expiration` is stored in.
        """
        return int(now) > self.expiration

    def to_json(self) -> str:
        return json.dumps(
            {"expiration": self.expiration, "data": self.data, "serializer": self.serializer}
        )

    @classmethod
    def from_json(cls, text: str) -> "CacheEntry":
        """Parses an envelope document.

        Raises:
            MalformedEntry: If the text is not JSON, not an object, or any of the
                required fields is missing or has the wrong type.
        """
        try:
            document = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedEntry(f"Envelope is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise MalformedEntry(f"Envelope must be a JSON object, got {type(document).__name__}")
        return cls._from_document(document)

    @classmethod
    def _from_document(cls, document: Dict[str, Any]) -> "CacheEntry":
        missing = [field for field in REQUIRED_FIELDS if field not in document]
        if missing:
            raise MalformedEntry(f"Envelope is missing fields: {', '.join(missing)}")

        expiration = document["expiration"]
        # bool is an int subclass, reject it explicitly
        if isinstance(expiration, bool) or not isinstance(expiration, (int, float)):
            raise MalformedEntry(f"Invalid expiration: {expiration!r}")
        if not isinstance(document["data"], str):
            raise MalformedEntry("Envelope data must be a string")
        if not isinstance(document["serializer"], str):
            raise MalformedEntry("Envelope serializer must be a string")

        return cls(
            expiration=int(expiration),
            data=document["data"],
            serializer=SerializerTag(document["serializer"]),
        )

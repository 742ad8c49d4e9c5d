"""Closed registry of payload codecs.

Each `Serializer` member carries its tag and its encode/decode pair. Payloads
are always text so they can sit inside the JSON envelope; binary codecs are
base64-encoded.

Note: the 'serialize' codec uses pickle. Only point a store at directories
whose writers you trust.
"""

import base64
import binascii
import json
import logging
import pickle
from enum import Enum
from typing import Any, Callable, Union

import yaml

from shardcache.domain.exceptions import EncodeFailed, UnsupportedSerializer
from shardcache.domain.models.common import SerializerTag

logger = logging.getLogger(__name__)


class PayloadDecodeError(ValueError):
    """Signals that a stored payload cannot be decoded by its recorded codec."""


def _pickle_encode(value: Any) -> str:
    return base64.b64encode(pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)).decode("ascii")


def _pickle_decode(data: str) -> Any:
    try:
        raw = base64.b64decode(data.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise PayloadDecodeError(f"Invalid base64 payload: {e}") from e
    return pickle.loads(raw)


def _json_encode(value: Any) -> str:
    return json.dumps(value)


def _json_decode(data: str) -> Any:
    return json.loads(data)


def _yaml_encode(value: Any) -> str:
    return yaml.safe_dump(value, allow_unicode=True, sort_keys=False)


def _yaml_decode(data: str) -> Any:
    return yaml.safe_load(data)


class Serializer(Enum):
    """Supported codecs, addressed by tag."""

    SERIALIZE = ("serialize", _pickle_encode, _pickle_decode)
    JSON = ("json", _json_encode, _json_decode)
    YAML = ("yaml", _yaml_encode, _yaml_decode)

    def __init__(
        self,
        tag: str,
        encoder: Callable[[Any], str],
        decoder: Callable[[str], Any],
    ):
        self.tag = SerializerTag(tag)
        self._encoder = encoder
        self._decoder = decoder

    @classmethod
    def from_tag(cls, tag: Union["Serializer", str]) -> "Serializer":
        """Resolves a tag (or a member) to a registry member.

        Raises:
            UnsupportedSerializer: If the tag is not registered.
        """
        if isinstance(tag, cls):
            return tag
        for member in cls:
            if member.tag == tag:
                return member
        raise UnsupportedSerializer(tag)

    @classmethod
    def tags(cls) -> list:
        return [member.tag for member in cls]

    def encode(self, value: Any) -> str:
        """Encodes a value to payload text.

        Raises:
            EncodeFailed: If the codec rejects the value.
        """
        try:
            return self._encoder(value)
        except Exception as e:
            logger.error(f"Serializer '{self.tag}' could not encode {type(value).__name__}: {e}")
            raise EncodeFailed(self.tag, original_error=e) from e

    def decode(self, data: str) -> Any:
        """Decodes payload text back into a value.

        Raises:
            PayloadDecodeError: If the payload is not valid for this codec.
        """
        try:
            return self._decoder(data)
        except PayloadDecodeError:
            raise
        except Exception as e:
            raise PayloadDecodeError(f"Serializer '{self.tag}' could not decode payload: {e}") from e

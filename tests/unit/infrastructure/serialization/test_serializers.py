import base64
import pickle

import pytest

from shardcache.domain.exceptions import EncodeFailed, UnsupportedSerializer
from shardcache.infrastructure.serialization.serializers import PayloadDecodeError, Serializer


def test_registry_is_closed_to_the_known_tags():
    assert Serializer.tags() == ["serialize", "json", "yaml"]


@pytest.mark.parametrize("tag, member", [
    ("serialize", Serializer.SERIALIZE),
    ("json", Serializer.JSON),
    ("yaml", Serializer.YAML),
])
def test_from_tag_resolves_members(tag, member):
    assert Serializer.from_tag(tag) is member
    assert Serializer.from_tag(member) is member


@pytest.mark.parametrize("tag", ["nope", "JSON", "", "pickle"])
def test_from_tag_rejects_unknown_tags(tag):
    with pytest.raises(UnsupportedSerializer) as exc_info:
        Serializer.from_tag(tag)
    assert exc_info.value.tag == tag
    assert exc_info.value.details == {"serializer": tag}


def test_serialize_payload_is_base64_text():
    payload = Serializer.SERIALIZE.encode({"a": (1, 2)})
    assert isinstance(payload, str)
    assert pickle.loads(base64.b64decode(payload)) == {"a": (1, 2)}


def test_json_payload_is_plain_json():
    assert Serializer.JSON.encode({"a": [1, 2]}) == '{"a": [1, 2]}'
    assert Serializer.JSON.decode('{"a": [1, 2]}') == {"a": [1, 2]}


def test_yaml_payload_round_trips_unicode():
    payload = Serializer.YAML.encode({"city": "Zürich"})
    assert "Zürich" in payload
    assert Serializer.YAML.decode(payload) == {"city": "Zürich"}


@pytest.mark.parametrize("member, value", [
    (Serializer.JSON, object()),
    (Serializer.JSON, {"set": {1, 2}}),
    (Serializer.YAML, object()),
    (Serializer.SERIALIZE, lambda: None),
])
def test_encode_failures_raise_encode_failed(member, value):
    with pytest.raises(EncodeFailed) as exc_info:
        member.encode(value)
    assert exc_info.value.details["serializer"] == member.tag
    assert exc_info.value.__cause__ is not None


@pytest.mark.parametrize("member, data", [
    (Serializer.JSON, "{"),
    (Serializer.SERIALIZE, "not base64!"),
    (Serializer.SERIALIZE, base64.b64encode(b"garbage bytes").decode("ascii")),
    (Serializer.YAML, "a: [1, 2"),
])
def test_decode_failures_raise_payload_decode_error(member, data):
    with pytest.raises(PayloadDecodeError):
        member.decode(data)

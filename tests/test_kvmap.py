"""Tests for the map/sequence entry codec."""

from dataclasses import dataclass

import pytest

from apkmeta.dependency import Constraint, Dependency, Op
from apkmeta.errors import CoercionError
from apkmeta.kvmap import KeyValueLike, decode_entries, encode_entries


@dataclass
class Counter(KeyValueLike):
    name: str
    value: int

    @classmethod
    def from_key_value(cls, key, value):
        return cls(name=key, value=int(value))

    def to_key_value(self):
        return self.name, str(self.value)

    @classmethod
    def parse(cls, text):
        key, sep, value = text.partition("=")
        if not sep:
            raise CoercionError("expected key=value")
        return cls.from_key_value(key, value)


COUNTERS = [Counter("foo", 42), Counter("bar", 55)]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def test_decode_mapping():
    assert decode_entries(Counter, {"foo": "42", "bar": "55"}) == COUNTERS


def test_decode_sequence():
    assert decode_entries(Counter, ["foo=42", "bar=55"]) == COUNTERS


def test_decode_tuple():
    assert decode_entries(Counter, ("foo=42", "bar=55")) == COUNTERS


def test_decode_empty():
    assert decode_entries(Counter, {}) == []
    assert decode_entries(Counter, []) == []


def test_decode_lone_string():
    assert decode_entries(Counter, "foo=42") == [Counter("foo", 42)]


def test_decode_lone_string_strict():
    with pytest.raises(CoercionError):
        decode_entries(Counter, "foo=42", strict=True)


@pytest.mark.parametrize("data", [42, None, 1.5])
def test_decode_wrong_shape(data):
    with pytest.raises(CoercionError) as exc:
        decode_entries(Counter, data)
    assert "expected sequence or map" in str(exc.value)


def test_decode_sequence_of_non_strings():
    with pytest.raises(CoercionError):
        decode_entries(Counter, [{"foo": "42"}])


def test_decode_error_from_entry_propagates():
    with pytest.raises(CoercionError, match="expected key=value"):
        decode_entries(Counter, ["foo"])


def test_entry_without_parse_rejects_strings():
    @dataclass
    class Opaque(KeyValueLike):
        key: str

        @classmethod
        def from_key_value(cls, key, value):
            return cls(key)

        def to_key_value(self):
            return self.key, None

    assert decode_entries(Opaque, {"a": None}) == [Opaque("a")]
    with pytest.raises(CoercionError, match="cannot be parsed"):
        decode_entries(Opaque, ["a"])


def test_decode_dependencies_both_shapes():
    expected = [
        Dependency("ruby", Constraint(Op.Greater | Op.Equal, "3.0")),
        Dependency.conflicting("sample-legacy"),
    ]
    assert decode_entries(Dependency, {"ruby": ">= 3.0", "sample-legacy": "!"}) == expected
    assert decode_entries(Dependency, ["ruby>=3.0", "!sample-legacy"]) == expected


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def test_encode_mapping():
    assert encode_entries(COUNTERS) == {"foo": "42", "bar": "55"}


def test_encode_keeps_order():
    assert list(encode_entries(COUNTERS)) == ["foo", "bar"]


def test_encode_last_duplicate_wins():
    assert encode_entries([Counter("foo", 1), Counter("foo", 2)]) == {"foo": "2"}


def test_encode_dependencies():
    deps = [Dependency.parse("ruby>=3.0"), Dependency.parse("!sample-legacy")]
    assert encode_entries(deps) == {"ruby": ">= 3.0", "sample-legacy": "!"}


def test_mapping_round_trip():
    data = {"foo": "42", "bar": "55"}
    assert encode_entries(decode_entries(Counter, data)) == data

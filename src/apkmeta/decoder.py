"""Record assembler: pair streams and mappings → typed dataclass records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Iterable, TypeVar

from .coerce import coerce_scalar, coerce_value
from .errors import ApkMetaError, CoercionError, DecodeError, InvalidField, MissingField
from .kvmap import decode_entries, encode_entries
from .pairs import sort_pairs
from .reader import group_adjacent
from .typedef import MemberDef, PrimitiveKind, RecordKind, TypeDef, typedef_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Pair streams
# ---------------------------------------------------------------------------

def from_pairs(cls: type[T], pairs: Iterable[tuple[str, str]]) -> T:
    """Decode *cls* from pairs in any order.

    The pairs are stable-sorted by key first, so repeated keys become
    contiguous while keeping their relative order.
    """
    return from_ordered_pairs(cls, sort_pairs(pairs))


def from_ordered_pairs(cls: type[T], pairs: Iterable[tuple[str, str]]) -> T:
    """Decode *cls* from pairs whose repeated keys are already contiguous."""
    td = typedef_for(cls)
    logger.debug("decoding %s from ordered pairs", td.name)

    values: dict[str, object] = {}
    for key, raw in group_adjacent(pairs):
        member = td.lookup(key)
        if member is None:
            continue
        if member.name in values:
            logger.warning(
                "%s: key '%s' is not contiguous in the input, keeping its last run",
                td.name, key,
            )
        values[member.name] = _decode_raw(member, key, raw)

    return _build(cls, td, values)


def _decode_raw(member: MemberDef, key: str, raw: list[str]):
    try:
        if member.multi:
            return [coerce_scalar(v, member.kind) for v in raw]
        if len(raw) > 1:
            raise CoercionError("invalid type: sequence, expected a scalar")
        return coerce_scalar(raw[0], member.kind)
    except (ApkMetaError, ValueError) as e:
        raise InvalidField(key, e) from e


# ---------------------------------------------------------------------------
# Structured mappings
# ---------------------------------------------------------------------------

def from_mapping(cls: type[T], data: Mapping, *, strict: bool = False) -> T:
    """Decode *cls* from a plain mapping (e.g. loaded from JSON).

    Entry collections accept both the mapping and the sequence shape; with
    ``strict=True`` a lone string is not accepted as a one-element sequence.
    """
    td = typedef_for(cls)
    logger.debug("decoding %s from mapping", td.name)

    values: dict[str, object] = {}
    for key, raw in data.items():
        member = td.lookup(key)
        if member is None:
            continue
        values[member.name] = _decode_structured(member, key, raw, strict)

    return _build(cls, td, values)


def _decode_structured(member: MemberDef, key: str, raw, strict: bool):
    if raw is None and member.optional:
        return None
    try:
        if member.is_entries:
            return decode_entries(member.kind.entry, raw, strict=strict)
        if isinstance(member.kind, RecordKind):
            return _decode_records(member, raw, strict)
        if member.multi:
            if not isinstance(raw, (list, tuple)):
                raise CoercionError(f"invalid type: {type(raw).__name__}, expected a sequence")
            return [coerce_value(v, member.kind) for v in raw]
        if isinstance(raw, (list, tuple, Mapping)):
            raise CoercionError(f"invalid type: {type(raw).__name__}, expected a scalar")
        return coerce_value(raw, member.kind)
    except (ApkMetaError, ValueError) as e:
        raise InvalidField(key, e) from e


def _decode_records(member: MemberDef, raw, strict: bool):
    if not member.multi:
        return _decode_record(member.kind.record, raw, strict)
    if not isinstance(raw, (list, tuple)):
        raise CoercionError(f"invalid type: {type(raw).__name__}, expected a sequence")
    return [_decode_record(member.kind.record, item, strict) for item in raw]


def _decode_record(cls: type, raw, strict: bool):
    if not isinstance(raw, Mapping):
        raise CoercionError(f"invalid type: {type(raw).__name__}, expected a map")
    return from_mapping(cls, raw, strict=strict)


def to_mapping(record) -> dict[str, object]:
    """Encode *record* into a plain dict.

    Entry collections are written in the mapping shape, nested records as
    plain dicts. ``None`` optional fields are left out, and so are fields
    marked ``skip_default`` that hold their default.
    """
    td = typedef_for(type(record))
    out: dict[str, object] = {}

    for member in td.members:
        value = getattr(record, member.name)
        if value is None:
            continue
        if member.skip_default and member.name in td.defaults and value == td.default_for(member):
            continue
        if member.is_entries:
            out[member.key] = encode_entries(value)
        elif isinstance(member.kind, RecordKind):
            out[member.key] = [to_mapping(v) for v in value] if member.multi else to_mapping(value)
        elif member.multi:
            out[member.key] = [_encode_leaf(v, member) for v in value]
        else:
            out[member.key] = _encode_leaf(value, member)

    return out


def _encode_leaf(value, member: MemberDef):
    if isinstance(value, Enum):
        return value.value
    if member.kind is PrimitiveKind.Octal:
        return f"0{value:o}"
    return value


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

def _build(cls: type[T], td: TypeDef, values: dict[str, object]) -> T:
    for member in td.members:
        if member.name in values:
            continue
        if member.required:
            raise MissingField(member.key)
        values[member.name] = td.default_for(member)
    try:
        return cls(**values)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"cannot construct {td.name}: {e}") from e

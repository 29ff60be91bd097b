"""Field kinds, MemberDef and TypeDef — the declared shape of a record."""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from dataclasses import dataclass, field
from enum import Enum, auto

from .kvmap import KeyValueLike


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class PrimitiveKind(Enum):
    Text = auto()
    Bool = auto()
    Int = auto()
    UInt = auto()
    Float = auto()
    Octal = auto()


@dataclass(slots=True, frozen=True)
class EnumKind:
    """A single-token tag matched against the values of *enum*."""
    enum: type[Enum]

    @property
    def choices(self) -> list[str]:
        return [str(m.value) for m in self.enum]


@dataclass(slots=True, frozen=True)
class EntryKind:
    """A domain type decoded through the map/sequence codec."""
    entry: type[KeyValueLike]


@dataclass(slots=True, frozen=True)
class RecordKind:
    """A nested dataclass record, written as a plain mapping."""
    record: type


Kind = PrimitiveKind | EnumKind | EntryKind | RecordKind

_PRIMITIVES: dict[type, PrimitiveKind] = {
    str: PrimitiveKind.Text,
    bool: PrimitiveKind.Bool,
    int: PrimitiveKind.Int,
    float: PrimitiveKind.Float,
}


# ---------------------------------------------------------------------------
# MemberDef / TypeDef
# ---------------------------------------------------------------------------

@dataclass
class MemberDef:
    name: str          # attribute name on the record
    key: str           # external key in pairs and mappings
    kind: Kind
    multi: bool = False     # list-typed field
    optional: bool = False  # ``X | None`` field
    required: bool = True   # no default and not optional
    aliases: tuple[str, ...] = ()
    skip_default: bool = False  # left out of mappings when equal to its default

    @property
    def is_entries(self) -> bool:
        return self.multi and isinstance(self.kind, EntryKind)


@dataclass
class TypeDef:
    name: str
    members: list[MemberDef]
    defaults: dict[str, typing.Callable[[], object]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._by_key: dict[str, MemberDef] = {}
        for m in self.members:
            self._by_key[m.key] = m
            for alias in m.aliases:
                self._by_key[alias] = m

    def lookup(self, key: str) -> MemberDef | None:
        """Return the member for an external key or alias, if any."""
        return self._by_key.get(key)

    def default_for(self, member: MemberDef) -> object:
        if member.name in self.defaults:
            return self.defaults[member.name]()
        if member.optional:
            return None
        raise KeyError(member.name)


# ---------------------------------------------------------------------------
# Building a TypeDef from a dataclass
# ---------------------------------------------------------------------------

@functools.cache
def typedef_for(cls: type) -> TypeDef:
    """Compile the TypeDef of a dataclass record from its type hints.

    Field metadata understood:
        ``key``     — external key (defaults to the attribute name)
        ``aliases`` — extra keys accepted on decode
        ``kind``    — explicit kind overriding the one derived from the hint
        ``skip_default`` — leave the field out of mappings when it holds its default
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__name__} is not a dataclass")

    hints = typing.get_type_hints(cls)
    members: list[MemberDef] = []
    defaults: dict[str, typing.Callable[[], object]] = {}

    for f in dataclasses.fields(cls):
        hint, optional = _strip_optional(hints[f.name])
        multi = typing.get_origin(hint) is list
        if multi:
            (hint,) = typing.get_args(hint)

        kind = f.metadata.get("kind") or _kind_of(hint, cls, f.name)

        if f.default is not dataclasses.MISSING:
            defaults[f.name] = functools.partial(_identity, f.default)
        elif f.default_factory is not dataclasses.MISSING:
            defaults[f.name] = f.default_factory

        members.append(MemberDef(
            name=f.name,
            key=f.metadata.get("key", f.name),
            kind=kind,
            multi=multi,
            optional=optional,
            required=f.name not in defaults and not optional,
            aliases=tuple(f.metadata.get("aliases", ())),
            skip_default=f.metadata.get("skip_default", False),
        ))

    return TypeDef(name=cls.__name__, members=members, defaults=defaults)


def _identity(value):
    return value


def _strip_optional(hint) -> tuple[object, bool]:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return hint, False


def _kind_of(hint, cls: type, name: str) -> Kind:
    if hint in _PRIMITIVES:
        return _PRIMITIVES[hint]
    if isinstance(hint, type) and issubclass(hint, Enum):
        return EnumKind(hint)
    if isinstance(hint, type) and issubclass(hint, KeyValueLike):
        return EntryKind(hint)
    if dataclasses.is_dataclass(hint):
        return RecordKind(hint)
    raise TypeError(f"unsupported type for {cls.__name__}.{name}: {hint!r}")

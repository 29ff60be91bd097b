"""Dependencies, version constraints and constraint operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag

from .errors import CoercionError, ConstraintParseError
from .kvmap import KeyValueLike

_OP_CHARS = frozenset("<>=~")


def _is_op(c: str) -> bool:
    return c in _OP_CHARS


# ---------------------------------------------------------------------------
# Op
# ---------------------------------------------------------------------------

class Op(Flag):
    """A constraint operator represented as a bit mask.

    Examples::

        Op.parse("=")  == Op.Equal
        Op.parse(">=") == Op.Greater | Op.Equal
        Op.parse("*")  == Op.Any
        Op.Equal in Op.parse("*")
    """

    Equal = 1
    Less = 2
    Greater = 4
    Fuzzy = 8
    Checksum = Less | Greater
    Any = Equal | Less | Greater | Fuzzy

    @classmethod
    def parse(cls, s: str) -> Op:
        if not s or len(s) > 2:
            raise ConstraintParseError(s)
        flags = cls(0)
        for c in s:
            if c == "=":
                flags |= cls.Equal
            elif c == "<":
                flags |= cls.Less
            elif c == ">":
                flags |= cls.Greater
            elif c == "~":
                flags |= cls.Fuzzy | cls.Equal
            elif c == "*":
                flags |= cls.Any
            else:
                raise ConstraintParseError(s)
        return flags

    def __str__(self) -> str:
        if self == Op.Any:
            return "*"
        out = ""
        if Op.Fuzzy in self:
            out += "~"
        if Op.Greater in self:
            out += ">"
        if Op.Less in self:
            out += "<"
        if Op.Equal in self and Op.Fuzzy not in self:
            out += "="
        return out


# ---------------------------------------------------------------------------
# Constraint
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Constraint:
    op: Op
    version: str

    @classmethod
    def parse(cls, s: str) -> Constraint:
        """Parse ``<op><version>``; whitespace around either half is ignored."""
        mid = next((i for i, c in enumerate(s) if not _is_op(c)), None)
        if mid is None:
            raise ConstraintParseError(s)

        op, version = s[:mid].strip(), s[mid:].strip()
        if not op or not version:
            raise ConstraintParseError(s)

        return cls(op=Op.parse(op), version=version)

    def __str__(self) -> str:
        return str(self.op) + self.version


# ---------------------------------------------------------------------------
# Dependency
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Dependency(KeyValueLike):
    """A dependency (or conflict) on a package or provider.

    ``repo_pin`` is the tag of a repository the dependency is pinned to. It
    only exists in the token form (``foo@testing``); the mapping form drops it.
    """

    name: str
    constraint: Constraint | None = None
    conflict: bool = False
    repo_pin: str | None = None

    @classmethod
    def conflicting(cls, name: str, constraint: Constraint | None = None) -> Dependency:
        return cls(name=name, constraint=constraint, conflict=True)

    @classmethod
    def parse(cls, s: str) -> Dependency:
        """Parse a token ``[!]name[<op>[<version>]][@pin]``."""
        repo_pin = None
        if "@" in s:
            s, _, repo_pin = s.partition("@")

        mid = next((i for i, c in enumerate(s) if _is_op(c)), None)
        if mid is None:
            name, constraint = s, None
        else:
            name, constraint = s[:mid], Constraint.parse(s[mid:])

        conflict = name.startswith("!")
        if conflict:
            name = name[1:]

        return cls(name=name, constraint=constraint, conflict=conflict, repo_pin=repo_pin)

    def __str__(self) -> str:
        out = "!" if self.conflict else ""
        out += self.name
        if self.constraint is not None:
            out += str(self.constraint)
        if self.repo_pin is not None:
            out += f"@{self.repo_pin}"
        return out

    # -- KeyValueLike ---------------------------------------------------

    @classmethod
    def from_key_value(cls, key: str, value) -> Dependency:
        if not isinstance(value, str):
            raise CoercionError(
                f"invalid type: {type(value).__name__}, expected a string"
            )
        conflict = value.startswith("!")
        if conflict:
            value = value[1:]

        if value == "*" or (conflict and not value):
            constraint = None
        else:
            constraint = Constraint.parse(value)

        return cls(name=key, constraint=constraint, conflict=conflict)

    def to_key_value(self) -> tuple[str, str]:
        if self.constraint is None:
            value = "!" if self.conflict else "*"
        else:
            value = str(self.constraint.op) + " " + self.constraint.version
            if self.conflict:
                value = "!" + value
        return self.name, value

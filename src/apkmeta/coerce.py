"""Scalar coercion: one raw string → one typed leaf value."""

from __future__ import annotations

import re

from .errors import CoercionError
from .typedef import EntryKind, EnumKind, Kind, PrimitiveKind, RecordKind

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_OCTAL_RE = re.compile(r"[0-7]+")


def coerce_scalar(raw: str, kind: Kind):
    """Convert *raw* to a value of *kind*.

    - Text  → the string unchanged
    - Bool  → ``true`` / ``false`` only
    - Int   → optional sign followed by ASCII digits
    - UInt  → like Int, but never negative
    - Float → decimal or exponent notation, ``inf`` or ``nan``; no
      surrounding whitespace, no ``_`` digit separators
    - Octal → ASCII octal digits (file modes, e.g. ``0644``)
    - EnumKind  → the member whose value is *raw*
    - EntryKind → the entry type's own text-parse rule

    Raises :class:`CoercionError` with the underlying error as ``__cause__``.
    """
    if kind is PrimitiveKind.Text:
        return raw
    if kind is PrimitiveKind.Bool:
        if raw == "true":
            return True
        if raw == "false":
            return False
        raise CoercionError("provided string was not `true` or `false`")
    if kind is PrimitiveKind.Int:
        if not _INT_RE.fullmatch(raw):
            raise CoercionError("invalid digit found in string")
        return int(raw)
    if kind is PrimitiveKind.UInt:
        if not _UINT_RE.fullmatch(raw):
            raise CoercionError("invalid digit found in string")
        return int(raw)
    if kind is PrimitiveKind.Float:
        if not _FLOAT_RE.fullmatch(raw):
            raise CoercionError("invalid float literal")
        return float(raw)
    if kind is PrimitiveKind.Octal:
        if not _OCTAL_RE.fullmatch(raw):
            raise CoercionError(f"invalid value: `{raw}`, expected octal number")
        return int(raw, 8)
    if isinstance(kind, EnumKind):
        try:
            return kind.enum(raw)
        except ValueError as e:
            expected = ", ".join(f"`{c}`" for c in kind.choices)
            raise CoercionError(
                f"unknown variant `{raw}`, expected one of {expected}"
            ) from e
    if isinstance(kind, EntryKind):
        return kind.entry.parse(raw)
    if isinstance(kind, RecordKind):
        raise CoercionError(f"invalid type: string, expected {_describe(kind)}")
    raise CoercionError(f"unsupported kind: {kind!r}")


def coerce_value(value, kind: Kind):
    """Like :func:`coerce_scalar`, but also accepts already-typed values.

    Used for structured input (mappings built by a JSON/YAML layer) where
    numbers and booleans may arrive natively.
    """
    if isinstance(value, str):
        return coerce_scalar(value, kind)

    if kind is PrimitiveKind.Bool and isinstance(value, bool):
        return value
    if kind in (PrimitiveKind.Int, PrimitiveKind.Octal) and _is_int(value):
        return value
    if kind is PrimitiveKind.UInt and _is_int(value):
        if value < 0:
            raise CoercionError(f"invalid value: integer `{value}`, expected a non-negative integer")
        return value
    if kind is PrimitiveKind.Float and (_is_int(value) or isinstance(value, float)):
        return float(value)
    if isinstance(kind, EnumKind) and isinstance(value, kind.enum):
        return value
    if isinstance(kind, EntryKind):
        return kind.entry.from_element(value)

    raise CoercionError(f"invalid type: {type(value).__name__}, expected {_describe(kind)}")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _describe(kind: Kind) -> str:
    if isinstance(kind, PrimitiveKind):
        return kind.name.lower()
    if isinstance(kind, EnumKind):
        return f"one of {', '.join(kind.choices)}"
    if isinstance(kind, RecordKind):
        return kind.record.__name__
    return kind.entry.__name__

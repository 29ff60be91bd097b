"""Map/sequence codec for collections of key/value-like entries.

A collection of entries may come in two shapes:

- a mapping ``{key: value, ...}`` — each item goes through
  :meth:`KeyValueLike.from_key_value`;
- a sequence ``[token, ...]`` — each element goes through
  :meth:`KeyValueLike.from_element`, which by default parses a
  self-contained text token with :meth:`KeyValueLike.parse`.

Encoding always produces the mapping shape.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Iterable, TypeVar

from .errors import CoercionError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="KeyValueLike")


class KeyValueLike(ABC):
    """An entry convertible from/to a single ``(key, value)`` pair."""

    @classmethod
    @abstractmethod
    def from_key_value(cls: type[E], key: str, value) -> E:
        ...

    @abstractmethod
    def to_key_value(self) -> tuple[str, object]:
        ...

    @classmethod
    def parse(cls: type[E], text: str) -> E:
        raise CoercionError(f"{cls.__name__} cannot be parsed from a string")

    @classmethod
    def from_element(cls: type[E], item) -> E:
        """Decode one element of the sequence shape."""
        if isinstance(item, str):
            return cls.parse(item)
        raise CoercionError(
            f"invalid type: {type(item).__name__}, expected a string"
        )


def decode_entries(entry_type: type[E], data, *, strict: bool = False) -> list[E]:
    """Decode *data* (mapping or sequence) into a list of *entry_type*.

    A lone string is taken as a one-element sequence, since some producers
    cannot tell a scalar from a single-element list; pass ``strict=True`` to
    reject it instead.
    """
    if isinstance(data, str):
        if strict:
            raise CoercionError("invalid type: string, expected sequence or map")
        logger.debug("treating lone string as one-element %s sequence", entry_type.__name__)
        data = [data]

    if isinstance(data, Mapping):
        return [entry_type.from_key_value(key, value) for key, value in data.items()]
    if isinstance(data, (list, tuple)):
        return [entry_type.from_element(item) for item in data]

    raise CoercionError(
        f"invalid type: {type(data).__name__}, expected sequence or map"
    )


def encode_entries(entries: Iterable[KeyValueLike]) -> dict[str, object]:
    """Encode entries into the mapping shape; the last duplicate key wins."""
    out: dict[str, object] = {}
    for entry in entries:
        key, value = entry.to_key_value()
        out[key] = value
    return out

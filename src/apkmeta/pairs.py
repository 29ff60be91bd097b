"""Pair stream — the ordered (key, value) source every decode starts from."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple


class Pair(NamedTuple):
    key: str
    value: str


class PairStream:
    """Peekable iterator over pairs.

    Usage::

        stream = PairStream([("arch", "x86"), ("arch", "armv7")])
        stream.peek()           # → Pair("arch", "x86")
        next(stream)            # consumes it
        stream.next_if("arch")  # → Pair("arch", "armv7")
        stream.next_if("arch")  # → None
    """

    _EOF = object()

    def __init__(self, pairs: Iterable[tuple[str, str]]) -> None:
        self._iter = iter(pairs)
        self._peeked: object = None

    def __iter__(self) -> Iterator[Pair]:
        return self

    def __next__(self) -> Pair:
        if self._peeked is not None:
            item, self._peeked = self._peeked, None
        else:
            item = next(self._iter, self._EOF)
        if item is self._EOF:
            raise StopIteration
        return Pair(*item)

    def peek(self) -> Pair | None:
        """Return the next pair without consuming it, or None at the end."""
        if self._peeked is None:
            self._peeked = next(self._iter, self._EOF)
        if self._peeked is self._EOF:
            return None
        return Pair(*self._peeked)

    def next_if(self, key: str) -> Pair | None:
        """Consume and return the next pair only if it has *key*."""
        nxt = self.peek()
        if nxt is not None and nxt.key == key:
            return next(self)
        return None


def sort_pairs(pairs: Iterable[tuple[str, str]]) -> list[Pair]:
    """Stable sort by key; values sharing a key keep their relative order."""
    return sorted((Pair(*p) for p in pairs), key=lambda p: p.key)

"""Reader layer: groups contiguous equal-key pairs into raw value lists."""

from __future__ import annotations

from typing import Iterable, Iterator

from .pairs import PairStream


def group_adjacent(pairs: Iterable[tuple[str, str]]) -> Iterator[tuple[str, list[str]]]:
    """Yield ``(key, values)`` for each run of pairs sharing a key.

    Only the *next* pair is looked at: ``[(a, 1), (a, 2), (b, 3), (a, 4)]``
    yields ``(a, [1, 2])``, ``(b, [3])``, ``(a, [4])``. Whether a run of one
    is a scalar or a one-element list is up to the target field.
    """
    stream = pairs if isinstance(pairs, PairStream) else PairStream(pairs)

    for key, value in stream:
        values = [value]
        nxt = stream.next_if(key)
        while nxt is not None:
            values.append(nxt.value)
            nxt = stream.next_if(key)
        yield key, values

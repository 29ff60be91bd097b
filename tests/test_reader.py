"""Tests for the Reader layer (adjacency grouping)."""

from apkmeta.pairs import PairStream
from apkmeta.reader import group_adjacent


def test_groups_contiguous_keys():
    pairs = [("k", "v1"), ("k", "v2"), ("k", "v3")]
    assert list(group_adjacent(pairs)) == [("k", ["v1", "v2", "v3"])]


def test_single_pair_is_one_element_group():
    assert list(group_adjacent([("k", "v1")])) == [("k", ["v1"])]


def test_mixed_keys_keep_order():
    pairs = [("a", "1"), ("b", "2"), ("b", "3"), ("c", "4")]
    assert list(group_adjacent(pairs)) == [
        ("a", ["1"]),
        ("b", ["2", "3"]),
        ("c", ["4"]),
    ]


def test_only_next_pair_is_looked_at():
    pairs = [("a", "1"), ("a", "2"), ("b", "3"), ("a", "4")]
    assert list(group_adjacent(pairs)) == [
        ("a", ["1", "2"]),
        ("b", ["3"]),
        ("a", ["4"]),
    ]


def test_accepts_pair_stream():
    stream = PairStream([("a", "1"), ("a", "2")])
    assert list(group_adjacent(stream)) == [("a", ["1", "2"])]


def test_empty_input():
    assert list(group_adjacent([])) == []

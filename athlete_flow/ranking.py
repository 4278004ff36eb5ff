"""
athlete_flow.ranking — Top-N Frequency Selector.

Counts items per key and keeps the N most frequent keys. Counting uses an
insertion-ordered dict and ranking uses a stable sort, so keys with equal
counts keep first-seen order and identical inputs always select the same
keys.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def validate_top_n(n: Any, name: str = "n") -> int:
    """Return *n* if it is a non-negative int. Raises ValueError otherwise."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"{name} must be a non-negative integer, got {n!r}")
    if n < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {n!r}")
    return n


def count_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, int]:
    """Occurrences per key, in first-seen key order."""
    counts: dict[K, int] = {}
    for item in items:
        k = key(item)
        counts[k] = counts.get(k, 0) + 1
    return counts


def rank_counts(items: Iterable[T], key: Callable[[T], K]) -> list[tuple[K, int]]:
    """(key, count) pairs by descending count. Ties keep first-seen order."""
    counts = count_by(items, key)
    return sorted(counts.items(), key=lambda kv: -kv[1])


def top_n_keys(items: Iterable[T], key: Callable[[T], K], n: int) -> set[K]:
    """The *n* most frequent keys, as a membership set.

    n == 0 yields an empty set. n larger than the number of distinct keys
    yields every key.
    """
    n = validate_top_n(n)
    return {k for k, _ in rank_counts(items, key)[:n]}

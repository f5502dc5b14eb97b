"""Partitioned fan-out over worker threads."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def partition(items: Sequence[T], parts: int) -> List[List[T]]:
    """Split ``items`` round-robin into at most ``parts`` non-empty chunks."""

    parts = max(1, min(parts, len(items)))
    return [list(items[offset::parts]) for offset in range(parts)]


def map_partitioned(
    func: Callable[[Sequence[T]], List[R]],
    items: Sequence[T],
    workers: int = 1,
) -> List[R]:
    """Run ``func`` over chunks of ``items`` and concatenate the chunk results.

    Each call gets its own chunk and returns its own list, so workers share
    nothing mutable. The concatenation happens after every worker has joined.
    """

    if not items:
        return []
    if workers <= 1 or len(items) == 1:
        return list(func(items))

    chunks = partition(items, workers)
    with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
        results = list(pool.map(func, chunks))
    return [item for chunk in results for item in chunk]

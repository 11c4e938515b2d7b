"""Fan-out helper for the per-root and per-dependency passes."""

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def map_ordered(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> list[R]:
    """Apply ``func`` to every item, results in input order.

    Runs inline unless ``max_workers`` is greater than one. Workers only
    return values; merging them is left to the caller.
    """
    items = list(items)
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(func, items))

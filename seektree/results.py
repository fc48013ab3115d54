"""Speed-ordered collection of peer result trees."""

from __future__ import annotations

from collections.abc import Iterator

from .result_tree import ResultTree


class ResultSet:
    """Result trees kept in non-increasing ``speed_kbps`` order.

    Equal speeds keep arrival order: a new tree lands after every existing
    tree that is at least as fast.
    """

    def __init__(self) -> None:
        self._trees: list[ResultTree] = []

    def insert(self, tree: ResultTree) -> int:
        """Insert ``tree`` by binary search and return its index."""
        lo, hi = 0, len(self._trees)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._trees[mid].speed_kbps >= tree.speed_kbps:
                lo = mid + 1
            else:
                hi = mid
        self._trees.insert(lo, tree)
        return lo

    def clear(self) -> None:
        self._trees.clear()

    def __len__(self) -> int:
        return len(self._trees)

    def __getitem__(self, index: int) -> ResultTree:
        return self._trees[index]

    def __iter__(self) -> Iterator[ResultTree]:
        return iter(self._trees)

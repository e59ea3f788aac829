"""An immutable interval tree stored as a sorted array with subtree maxima."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Element:
    """A half-open interval ``[start, end)`` carrying a value."""

    start: Any
    end: Any
    value: Any


@dataclass
class Node:
    """A tree node: an element and the largest end in its subtree."""

    element: Element
    max: Any = None


def _to_element(item: Element | tuple) -> Element:
    if isinstance(item, Element):
        return item
    (start, end), value = item
    return Element(start, end, value)


class IntervalTree:
    """Interval tree supporting overlap and point queries.

    Elements may be given as ``Element`` objects or ``((start, end), value)``.
    """

    def __init__(self, elements: Iterable[Element | tuple] = ()) -> None:
        self._data: list[Node] = []
        self.refill(elements)

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> IntervalTree:
        """Build a tree from nodes; their ``max`` fields are recomputed."""
        tree = cls()
        tree._build(list(nodes))
        return tree

    def into_nodes(self) -> list[Node]:
        """Take the nodes out of the tree, leaving it empty."""
        nodes, self._data = self._data, []
        return nodes

    def refill(self, elements: Iterable[Element | tuple]) -> None:
        """Replace the contents of the tree with the given elements."""
        self._build([Node(_to_element(item)) for item in elements])

    def _build(self, nodes: list[Node]) -> None:
        for node in nodes:
            node.max = node.element.end
        nodes.sort(key=lambda n: n.element.start)
        self._data = nodes
        if nodes:
            self._update_max(0, len(nodes))

    def _update_max(self, lo: int, hi: int) -> Any:
        mid = lo + (hi - lo) // 2
        node = self._data[mid]
        if hi - lo > 1:
            if mid > lo:
                node.max = max(node.max, self._update_max(lo, mid))
            if mid + 1 < hi:
                node.max = max(node.max, self._update_max(mid + 1, hi))
        return node.max

    def _search(self, point, go_right, intersect) -> Iterator[Element]:
        todo = [(0, len(self._data))] if self._data else []
        while todo:
            s, length = todo.pop()
            i = s + length // 2
            node = self._data[i]
            if point < node.max:
                if i - s > 0:
                    todo.append((s, i - s))
                if go_right(node.element.start):
                    right = length + s - i - 1
                    if right > 0:
                        todo.append((i + 1, right))
                    if intersect(node.element):
                        yield node.element

    def query(self, start: Any, end: Any) -> Iterator[Element]:
        """Yield the elements overlapping ``[start, end)``."""
        return self._search(
            start,
            lambda s: end > s,
            lambda el: end > el.start and start < el.end,
        )

    def query_point(self, point: Any) -> Iterator[Element]:
        """Yield the elements containing ``point``."""
        return self._search(
            point,
            lambda s: point >= s,
            lambda el: point < el.end,
        )

    def __iter__(self) -> Iterator[Element]:
        """Iterate over the elements sorted by start."""
        return (node.element for node in self._data)

    def __len__(self) -> int:
        return len(self._data)
"""A list of half-open intervals with sorting, merging and complement."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

Interval = tuple[Any, Any]


class Intervals:
    """An ordered collection of half-open ``(start, end)`` intervals."""

    def __init__(self, ranges: Iterable[Interval] | None = None) -> None:
        self._ranges: list[Interval] = [(s, e) for s, e in (ranges or ())]

    @classmethod
    def from_tuples(cls, tuples: Iterable[Interval]) -> Intervals:
        return cls(tuples)

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intervals):
            return NotImplemented
        return self._ranges == other._ranges

    def __repr__(self) -> str:
        return f"Intervals({self._ranges!r})"

    def push(self, start: Any, end: Any) -> None:
        self._ranges.append((start, end))

    def extend(self, pairs: Iterable[Interval]) -> None:
        self._ranges.extend((s, e) for s, e in pairs)

    def sort(self) -> None:
        self._ranges.sort()

    def is_sorted(self) -> bool:
        """True if the intervals are in strictly increasing order."""
        return all(a < b for a, b in zip(self._ranges, self._ranges[1:]))

    def merge(self) -> None:
        """Sort and join touching or overlapping intervals, dropping empty ones."""
        if len(self._ranges) < 2:
            return
        if not self.is_sorted():
            self.sort()
        merged: list[Interval] = []
        cur_start, cur_end = self._ranges[0]
        for start, end in self._ranges[1:]:
            if cur_end >= start:
                cur_end = end
            else:
                merged.append((cur_start, cur_end))
                cur_start, cur_end = start, end
        merged.append((cur_start, cur_end))
        self._ranges = [(s, e) for s, e in merged if s != e]

    def complement(self, min_value: Any, max_value: Any) -> None:
        """Replace the intervals by the gaps between them within the bounds."""
        self.merge()
        if not self._ranges:
            self._ranges = [(min_value, max_value)]
            return
        the_min = self._ranges[0][0]
        the_max = self._ranges[-1][1]
        if the_min < min_value or the_max > max_value:
            raise ValueError("intervals extend beyond the complement bounds")
        gaps = [(a[1], b[0]) for a, b in zip(self._ranges, self._ranges[1:])]
        if the_max != max_value:
            gaps.append((the_max, max_value))
        if the_min > min_value:
            gaps.insert(0, (min_value, the_min))
        self._ranges = gaps

    def clear(self) -> None:
        self._ranges.clear()
"""Counting values into bins bounded by sorted lower edges."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable
from typing import Any


class Histogram:
    """Histogram whose bins are given by their lower boundaries.

    A value falls into the bin of the largest boundary that is less than or
    equal to it. Values below the smallest boundary are ignored.
    """

    def __init__(self, bins: Iterable[Any]) -> None:
        edges = sorted(bins)
        if not edges:
            raise ValueError("min length of boundaries is 1")
        if any(a >= b for a, b in zip(edges, edges[1:])):
            raise ValueError("boundaries should be sorted and unique")
        self.bins: list[Any] = edges
        self.counts: list[int] = [0] * len(edges)

    def analyze(self, values: Iterable[Any]) -> None:
        """Add the given values to the bin counts."""
        lowest = self.bins[0]
        for value in values:
            if value < lowest:
                continue
            self.counts[bisect_right(self.bins, value) - 1] += 1

    def __repr__(self) -> str:
        return f"Histogram(bins={self.bins!r}, counts={self.counts!r})"
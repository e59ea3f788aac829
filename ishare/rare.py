"""Sparse genotype records for rare variants, packed into 64-bit integers."""

from __future__ import annotations

import enum
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from itertools import groupby

_POS_BITS = 32
_GENOME_BITS = 24
_ALLELE_BITS = 8
_GENOME_SHIFT = _POS_BITS
_ALLELE_SHIFT = _POS_BITS + _GENOME_BITS
_POS_MASK = (1 << _POS_BITS) - 1
_GENOME_MASK = (1 << _GENOME_BITS) - 1
_ALLELE_MASK = (1 << _ALLELE_BITS) - 1
_U64_MAX = (1 << 64) - 1


def _check_range(name: str, value: int, bits: int) -> int:
    value = int(value)
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} {value} does not fit in {bits} bits")
    return value


@dataclass(frozen=True, order=True)
class GenotypeRecord:
    """One non-reference call: position (32 bits), genome (24 bits), allele (8 bits).

    The fields are packed into a single unsigned 64-bit integer with the
    position in the low bits and the allele in the high bits.
    """

    value: int

    def __init__(self, value: int) -> None:
        object.__setattr__(self, "value", _check_range("value", value, 64))

    @classmethod
    def from_fields(cls, position: int, genome: int, allele: int) -> GenotypeRecord:
        position = _check_range("position", position, _POS_BITS)
        genome = _check_range("genome", genome, _GENOME_BITS)
        allele = _check_range("allele", allele, _ALLELE_BITS)
        return cls(
            position | (genome << _GENOME_SHIFT) | (allele << _ALLELE_SHIFT)
        )

    @classmethod
    def sentinel(cls) -> GenotypeRecord:
        """A record with every bit set, used as an end marker."""
        return cls(_U64_MAX)

    def is_sentinel(self) -> bool:
        return self.value == _U64_MAX

    @property
    def position(self) -> int:
        return self.value & _POS_MASK

    @property
    def genome(self) -> int:
        return (self.value >> _GENOME_SHIFT) & _GENOME_MASK

    @property
    def allele(self) -> int:
        return (self.value >> _ALLELE_SHIFT) & _ALLELE_MASK

    @property
    def fields(self) -> tuple[int, int, int]:
        """``(position, genome, allele)``."""
        return self.position, self.genome, self.allele

    def __repr__(self) -> str:
        return (
            f"GenotypeRecord(position={self.position}, "
            f"genome={self.genome}, allele={self.allele})"
        )


class SortStatus(enum.IntEnum):
    UNSORTED = 0
    BY_POSITION = 1
    BY_GENOME = 2


class GenotypeRecords:
    """A collection of genotype records that tracks how it is sorted."""

    def __init__(
        self,
        records: Iterable[GenotypeRecord] = (),
        sort_status: SortStatus | int = SortStatus.UNSORTED,
    ) -> None:
        self.records: list[GenotypeRecord] = list(records)
        self.sort_status = SortStatus(sort_status)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[GenotypeRecord]:
        return iter(self.records)

    def __repr__(self) -> str:
        return (
            f"GenotypeRecords({len(self.records)} records, "
            f"sort_status={self.sort_status.name})"
        )

    @property
    def is_sorted_by_position(self) -> bool:
        return self.sort_status is SortStatus.BY_POSITION

    @property
    def is_sorted_by_genome(self) -> bool:
        return self.sort_status is SortStatus.BY_GENOME

    def merge(self, other: GenotypeRecords) -> None:
        """Append the records of ``other``; the result is unsorted."""
        self.records.extend(other.records)
        self.sort_status = SortStatus.UNSORTED

    def sort_by_position(self) -> None:
        if self.sort_status is not SortStatus.BY_POSITION:
            self.records.sort(key=lambda r: (r.position, r.genome, r.allele))
            self.sort_status = SortStatus.BY_POSITION

    def sort_by_genome(self) -> None:
        if self.sort_status is not SortStatus.BY_GENOME:
            self.records.sort(key=lambda r: (r.genome, r.position, r.allele))
            self.sort_status = SortStatus.BY_GENOME

    def _genome_block(self, genome: int) -> list[GenotypeRecord]:
        key = _genome_key
        s = bisect_left(self.records, genome, key=key)
        e = bisect_right(self.records, genome, key=key)
        return self.records[s:e]

    def iter_genome_pair_genotypes(
        self, genome1: int, genome2: int
    ) -> Iterator[tuple[int, int | None, int | None]]:
        """Yield ``(position, allele1, allele2)`` over the union of both genomes' calls.

        An allele is ``None`` where that genome has no call at the position.
        The records must be sorted by genome.
        """
        if not self.is_sorted_by_genome:
            raise ValueError("genotype records are not sorted by genome")
        return _merge_join(self._genome_block(genome1), self._genome_block(genome2))

    def filter_multi_allelic_site(self) -> None:
        """Drop every position at which more than one allele is observed."""
        self.sort_by_position()
        kept: list[GenotypeRecord] = []
        for _, group in groupby(self.records, key=lambda r: r.position):
            block = list(group)
            if all(r.allele == block[0].allele for r in block):
                kept.extend(block)
        self.records = kept

    def subset_by_genomes(self, sorted_genome_ids: Sequence[int]) -> GenotypeRecords:
        """Keep only the records of the given genomes (ids must be sorted)."""
        if any(a > b for a, b in zip(sorted_genome_ids, sorted_genome_ids[1:])):
            raise ValueError("the genome ids in `sorted_genome_ids` are not sorted")
        if not self.is_sorted_by_genome:
            raise ValueError("genotype are not sorted by genomes")
        wanted = set(sorted_genome_ids)
        return GenotypeRecords(
            (r for r in self.records if r.genome in wanted), self.sort_status
        )


def _genome_key(record: GenotypeRecord) -> int:
    return record.genome


def _merge_join(
    left: list[GenotypeRecord], right: list[GenotypeRecord]
) -> Iterator[tuple[int, int | None, int | None]]:
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a.position < b.position:
            yield a.position, a.allele, None
            i += 1
        elif a.position > b.position:
            yield b.position, None, b.allele
            j += 1
        else:
            yield a.position, a.allele, b.allele
            i += 1
            j += 1
    for a in left[i:]:
        yield a.position, a.allele, None
    for b in right[j:]:
        yield b.position, None, b.allele
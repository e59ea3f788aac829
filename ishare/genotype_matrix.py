"""A dense 0/1 genotype matrix stored row by row."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class GenotypeMatrix:
    """Matrix of biallelic genotype calls (``True`` for the alternative allele).

    Multiallelic sites must be given as several biallelic rows.
    """

    def __init__(self, ncols: int) -> None:
        if ncols <= 0:
            raise ValueError("number of columns must be positive")
        self.ncols = ncols
        self._bits = bytearray()

    @property
    def nrows(self) -> int:
        nrow, rem = divmod(len(self._bits), self.ncols)
        if rem:
            raise ValueError("matrix holds an incomplete row")
        return nrow

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenotypeMatrix):
            return NotImplemented
        return self.ncols == other.ncols and self._bits == other._bits

    def __repr__(self) -> str:
        return f"GenotypeMatrix(ncols={self.ncols}, cells={len(self._bits)})"

    def extend_gt_calls(self, calls: Iterable[bool]) -> None:
        self._bits.extend(1 if c else 0 for c in calls)

    def get_at(self, row: int, col: int) -> bool:
        return bool(self._bits[row * self.ncols + col])

    def get_row(self, row: int) -> list[bool]:
        return self.get_slice(row, 0, self.ncols)

    def get_slice(self, row: int, col1: int, col2: int) -> list[bool]:
        base = row * self.ncols
        return [bool(b) for b in self._bits[base + col1 : base + col2]]

    def has_too_many_discord_sites(
        self, ind_pair: tuple[int, int], col1: int, col2: int, max_ndiscord: int
    ) -> bool:
        """True if two diploid individuals are opposite homozygotes too often.

        Individual ``i`` occupies rows ``2*i`` and ``2*i + 1``.
        """
        i, j = ind_pair
        rows = (
            self.get_slice(2 * i, col1, col2),
            self.get_slice(2 * i + 1, col1, col2),
            self.get_slice(2 * j, col1, col2),
            self.get_slice(2 * j + 1, col1, col2),
        )
        ndiscord = 0
        for a, b, c, d in zip(*rows):
            if a == b and c == d and a != c:
                ndiscord += 1
                if ndiscord > max_ndiscord:
                    return True
        return False

    def transpose(self) -> GenotypeMatrix:
        nrows = self.nrows
        out = GenotypeMatrix(nrows)
        out._bits = bytearray(
            self._bits[r * self.ncols + c] for c in range(self.ncols) for r in range(nrows)
        )
        return out

    def append_row(self, row: Sequence[bool]) -> None:
        if len(row) != self.ncols:
            raise ValueError(f"row length {len(row)} does not match {self.ncols} columns")
        self.extend_gt_calls(row)

    def reorder_rows(self, row_orders: Sequence[int]) -> GenotypeMatrix:
        if len(row_orders) != self.nrows:
            raise ValueError("row order length does not match the number of rows")
        out = GenotypeMatrix(self.ncols)
        for idx in row_orders:
            out.append_row(self.get_row(idx))
        return out

    def merge(self, other: GenotypeMatrix) -> None:
        """Append the rows of ``other``."""
        if self.ncols != other.ncols:
            raise ValueError("matrices differ in number of columns")
        self._bits.extend(other._bits)

    def get_afreq(self) -> list[float]:
        """Fraction of ``True`` calls in each row."""
        n = self.ncols
        return [sum(self._bits[r * n : (r + 1) * n]) / n for r in range(self.nrows)]
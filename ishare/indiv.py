"""Sample (individual) lists and haploid/diploid conversion maps."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path


class PloidyConvertDirection(enum.Enum):
    DIPLOID_TO_HAPLOID = "diploid_to_haploid"
    HAPLOID_TO_DIPLOID = "haploid_to_diploid"


@dataclass
class PloidyConverter:
    """Maps haploid ids to ``(diploid id, haplotype index)`` and back."""

    h2dm: dict[int, tuple[int, int]] = field(default_factory=dict)
    d2hm: dict[tuple[int, int], int] = field(default_factory=dict)

    def h2d(self, h: int) -> tuple[int, int] | None:
        return self.h2dm.get(h)

    def d2h(self, d: int, which: int) -> int:
        return self.d2hm[(d, which)]


class Individuals:
    """An ordered list of sample names with a name-to-index lookup."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self.names: list[str] = []
        self._index: dict[str, int] = {}
        for name in names:
            self._index[name] = len(self.names)
            self.names.append(name)

    @classmethod
    def _from_parts(cls, names: list[str], index: dict[str, int]) -> Individuals:
        inds = cls()
        inds.names = names
        inds._index = index
        return inds

    @classmethod
    def from_txt_file(
        cls, path: str | PathLike[str]
    ) -> tuple[
        Individuals,
        tuple[PloidyConverter, Individuals, PloidyConvertDirection] | None,
    ]:
        """Read samples from a text file.

        One column lists sample names. Two tab-separated columns map haploid
        names to diploid names (haploid to diploid). Three columns list a
        diploid name followed by its two haplotype names (diploid to haploid).
        Returns the "from" individuals and, for two or three columns, the
        converter, the "to" individuals and the direction.
        """
        lines = Path(path).read_text(encoding="utf-8").strip().splitlines()
        if not lines:
            raise ValueError("samples/individuals file is empty")
        ncolumns = len(lines[0].split("\t"))
        if ncolumns == 1:
            return cls(lines), None
        if ncolumns == 2:
            return cls._read_hap_to_dip(lines)
        if ncolumns == 3:
            return cls._read_dip_to_hap(lines)
        raise ValueError("samples/individuals file format error")

    @staticmethod
    def _fields(line: str, n: int) -> list[str]:
        fields = line.split("\t")
        if len(fields) < n:
            raise ValueError(f"samples/individuals file format error: {line!r}")
        return fields[:n]

    @classmethod
    def _read_hap_to_dip(cls, lines):
        v_h: list[str] = []
        m_h: dict[str, int] = {}
        v_d: list[str] = []
        m_d: dict[str, int] = {}
        conv = PloidyConverter()
        for line in lines:
            h, d = cls._fields(line, 2)
            v_h.append(h)
            m_h[h] = len(m_h)
            if d not in m_d:
                v_d.append(d)
                m_d[d] = len(m_d)
                which = 0
            else:
                did = m_d[d]
                if (did, 0) not in conv.d2hm or (did, 1) in conv.d2hm:
                    raise ValueError(f"diploid sample {d} must have exactly two haplotypes")
                which = 1
            conv.h2dm[m_h[h]] = (m_d[d], which)
            conv.d2hm[(m_d[d], which)] = m_h[h]
        return (
            cls._from_parts(v_h, m_h),
            (conv, cls._from_parts(v_d, m_d), PloidyConvertDirection.HAPLOID_TO_DIPLOID),
        )

    @classmethod
    def _read_dip_to_hap(cls, lines):
        v_d: list[str] = []
        m_d: dict[str, int] = {}
        v_h: list[str] = []
        m_h: dict[str, int] = {}
        conv = PloidyConverter()
        for line in lines:
            d, h1, h2 = cls._fields(line, 3)
            v_d.append(d)
            m_d[d] = len(m_d)
            for which, h in enumerate((h1, h2)):
                v_h.append(h)
                m_h[h] = len(m_h)
            for which, h in enumerate((h1, h2)):
                conv.h2dm[m_h[h]] = (m_d[d], which)
                conv.d2hm[(m_d[d], which)] = m_h[h]
        return (
            cls._from_parts(v_d, m_d),
            (conv, cls._from_parts(v_h, m_h), PloidyConvertDirection.DIPLOID_TO_HAPLOID),
        )

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __getitem__(self, i: int) -> str:
        return self.names[i]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"Individuals({self.names!r})"

    def index(self, name: str) -> int:
        """Index of ``name``; raises KeyError if absent."""
        return self._index[name]

    def get(self, name: str) -> int | None:
        return self._index.get(name)

    def get_ploidy_converter(self) -> tuple[Individuals, PloidyConverter]:
        """Pair consecutive samples into diploids named ``first|second``.

        With an odd number of samples the last one is left out.
        """
        paired = [f"{a}|{b}" for a, b in zip(self.names[0::2], self.names[1::2])]
        n = len(self.names) // 2 * 2
        conv = PloidyConverter(
            h2dm={x: (x // 2, x % 2) for x in range(n)},
            d2hm={(x // 2, x % 2): x for x in range(n)},
        )
        return Individuals(paired), conv
"""Genome layout (chromosome names and sizes) and genome-wide coordinates."""

from __future__ import annotations

import enum
import tomllib
from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from itertools import accumulate
from os import PathLike
from pathlib import Path

import msgpack
import tomli_w

from .gmap import GeneticMap

PF3D7CHRLENS: tuple[int, ...] = (
    640851, 947102, 1067971, 1200490, 1343557, 1418242, 1445207, 1472805,
    1541735, 1687656, 2038340, 2271494, 2925236, 3291936,
)


def _chromosome_starts(chromsize: Sequence[int]) -> list[int]:
    if not chromsize:
        raise ValueError("a genome needs at least one chromosome")
    return [0, *accumulate(chromsize[:-1])]


def _check_parts(
    chromsize: Sequence[int],
    chromnames: Sequence[str],
    idx: dict[str, int],
    gmaps: Sequence[str],
) -> None:
    if len(chromsize) != len(chromnames):
        raise ValueError("chromsize and chromnames differ in length")
    if len(chromsize) != len(gmaps):
        raise ValueError("chromsize and gmaps differ in length")
    missing = [name for name in chromnames if name not in idx]
    if missing:
        raise ValueError(f"chromosomes missing from idx: {missing}")


@dataclass
class GenomeInfo:
    """Chromosome names, sizes and genome-wide start positions."""

    name: str = ""
    chromsize: list[int] = field(default_factory=list)
    chromnames: list[str] = field(default_factory=list)
    idx: dict[str, int] = field(default_factory=dict)
    gwstarts: list[int] = field(default_factory=list)
    gmaps: list[str] = field(default_factory=list)

    @classmethod
    def _from_checked_parts(
        cls,
        name: str,
        chromsize: Sequence[int],
        chromnames: Sequence[str],
        idx: dict[str, int],
        gmaps: Sequence[str],
    ) -> GenomeInfo:
        _check_parts(chromsize, chromnames, idx, gmaps)
        return cls(
            name=name,
            chromsize=list(chromsize),
            chromnames=list(chromnames),
            idx=dict(idx),
            gwstarts=_chromosome_starts(chromsize),
            gmaps=list(gmaps),
        )

    def to_toml_file(self, path: str | PathLike[str]) -> None:
        doc = {
            "name": self.name,
            "chromsize": list(self.chromsize),
            "idx": dict(self.idx),
            "chromnames": list(self.chromnames),
            "gmaps": list(self.gmaps),
        }
        with open(path, "wb") as f:
            tomli_w.dump(doc, f)

    @classmethod
    def from_toml_file(cls, path: str | PathLike[str]) -> GenomeInfo:
        with open(path, "rb") as f:
            doc = tomllib.load(f)
        try:
            return cls._from_checked_parts(
                doc["name"],
                [int(x) for x in doc["chromsize"]],
                list(doc["chromnames"]),
                {k: int(v) for k, v in doc["idx"].items()},
                list(doc["gmaps"]),
            )
        except KeyError as exc:
            raise ValueError(f"genome file {path} lacks key {exc}") from exc

    def to_gw_pos(self, chrid: int, pos: int) -> int:
        """Genome-wide position of a 0-based position on chromosome ``chrid``."""
        return self.gwstarts[chrid] + pos

    def to_chr_pos(self, gw_pos: int) -> tuple[int, str, int]:
        """Split a genome-wide position into ``(chrid, chrname, pos)``."""
        chrid = bisect_right(self.gwstarts, gw_pos) - 1
        if chrid < 0:
            raise ValueError(f"invalid genome-wide position {gw_pos}")
        return chrid, self.chromnames[chrid], gw_pos - self.gwstarts[chrid]

    def total_len_bp(self) -> int:
        return sum(self.chromsize)

    def split_chromosomes_by_regions(
        self, regions: Iterable[tuple[int, int]]
    ) -> GenomeInfo:
        """Cut chromosomes at region boundaries into new pseudo-chromosomes.

        Each piece is named ``<chrname>_<pos>`` after where it starts.
        """
        total = self.total_len_bp()
        bounds = set(self.gwstarts)
        for start, end in regions:
            bounds.update((start, end))
        starts = sorted(b for b in bounds if b < total)

        chromnames = []
        for gw in starts:
            _, chrname, pos = self.to_chr_pos(gw)
            chromnames.append(f"{chrname}_{pos}")
        ends = [*starts[1:], total]
        return GenomeInfo(
            name=f"{self.name}_rmpeaks",
            chromsize=[e - s for s, e in zip(starts, ends)],
            chromnames=chromnames,
            idx={name: i for i, name in enumerate(chromnames)},
            gwstarts=starts,
            gmaps=[],
        )

    def partition_genome(
        self, max_len_bp: int | None
    ) -> list[tuple[int, int, int] | None]:
        """Cover the genome with chunks ``(chrid, start, end)`` of bounded length.

        Without a maximum length the single entry ``None`` stands for the
        whole genome.
        """
        if max_len_bp is None:
            return [None]
        regions: list[tuple[int, int, int] | None] = []
        for chrid, chrlen in enumerate(self.chromsize):
            s = 0
            while s < chrlen:
                e = min(s + max_len_bp, chrlen)
                regions.append((chrid, s, e))
                s = e + 1
        return regions


class BuiltinGenome(enum.Enum):
    PF3D7_CONST15K = "pf3d7-const15k"
    SIM14CHR100CM_CONST15K = "sim14chr100cm-const15k"


@dataclass
class Genome:
    """Genome info together with its genome-wide genetic map."""

    ginfo: GenomeInfo
    gmap: GeneticMap

    @classmethod
    def from_builtin(cls, builtin: BuiltinGenome) -> Genome:
        rate = 0.01 / 15000.0
        if builtin is BuiltinGenome.PF3D7_CONST15K:
            return cls.from_constant_recombination_rate(
                "pf3d7_const15k",
                PF3D7CHRLENS,
                [f"Pf3D7_{i:02}_v3" for i in range(1, 15)],
                rate,
            )
        if builtin is BuiltinGenome.SIM14CHR100CM_CONST15K:
            return cls.from_constant_recombination_rate(
                "sim14chr100cm_const15k",
                [1_500_000] * 14,
                [str(i) for i in range(1, 15)],
                rate,
            )
        raise ValueError(f"unknown builtin genome {builtin!r}")

    @classmethod
    def from_constant_recombination_rate(
        cls,
        genome_name: str,
        chromsizes: Sequence[int],
        chromnames: Sequence[str],
        rate: float,
    ) -> Genome:
        """Build a genome whose map has a constant rate (per bp, in Morgans)."""
        ginfo = GenomeInfo(
            name=genome_name,
            chromsize=list(chromsizes),
            chromnames=list(chromnames),
            idx={name: i for i, name in enumerate(chromnames)},
            gwstarts=_chromosome_starts(chromsizes),
            gmaps=[],
        )
        gmap_vec = [
            [(0, 0.0), (chrlen - 1, (chrlen - 1) * 100.0 * rate)]
            for chrlen in chromsizes
        ]
        return cls(ginfo, GeneticMap.from_gmap_vec(gmap_vec, chromsizes))

    @classmethod
    def from_plink_gmaps(
        cls,
        genome_name: str,
        chromsizes: Sequence[int],
        chromnames: Sequence[str],
        plink_files: Sequence[str],
    ) -> Genome:
        ginfo = GenomeInfo._from_checked_parts(
            genome_name,
            chromsizes,
            chromnames,
            {name: i for i, name in enumerate(chromnames)},
            plink_files,
        )
        return cls(ginfo, GeneticMap.from_genome_info(ginfo))

    @classmethod
    def load_binary(cls, path: str | PathLike[str]) -> Genome:
        data = msgpack.unpackb(Path(path).read_bytes(), raw=False)
        g = data["ginfo"]
        ginfo = GenomeInfo(
            name=g["name"],
            chromsize=list(g["chromsize"]),
            chromnames=list(g["chromnames"]),
            idx=dict(g["idx"]),
            gwstarts=list(g["gwstarts"]),
            gmaps=list(g["gmaps"]),
        )
        return cls(ginfo, GeneticMap((bp, cm) for bp, cm in data["gmap"]))

    def save_binary(self, path: str | PathLike[str]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "ginfo": {
                "name": self.ginfo.name,
                "chromsize": self.ginfo.chromsize,
                "chromnames": self.ginfo.chromnames,
                "idx": self.ginfo.idx,
                "gwstarts": self.ginfo.gwstarts,
                "gmaps": self.ginfo.gmaps,
            },
            "gmap": [list(p) for p in self.gmap.points],
        }
        path.write_bytes(msgpack.packb(data, use_bin_type=True))

    def save_to_text_files(self, ginfo_path: str | PathLike[str]) -> None:
        """Write the genome TOML file and one plink map per chromosome.

        The map paths come from ``ginfo.gmaps``, which must follow the
        ``<prefix>_<chrname>.map`` pattern.
        """
        Path(ginfo_path).parent.mkdir(parents=True, exist_ok=True)
        self.ginfo.to_toml_file(ginfo_path)
        if not self.ginfo.gmaps:
            raise ValueError("genome has no genetic map paths")
        suffix = f"_{self.ginfo.chromnames[0]}.map"
        first = self.ginfo.gmaps[0]
        if not first.endswith(suffix):
            raise ValueError(f"map path {first!r} does not end with {suffix!r}")
        self.gmap.to_plink_map_files(self.ginfo, first[: -len(suffix)])

    @classmethod
    def load_from_text_file(cls, ginfo_path: str | PathLike[str]) -> Genome:
        ginfo = GenomeInfo.from_toml_file(ginfo_path)
        return cls(ginfo, GeneticMap.from_genome_info(ginfo))

    def set_gmap_path_prefix(self, prefix: str) -> None:
        self.ginfo.gmaps = [f"{prefix}_{name}.map" for name in self.ginfo.chromnames]
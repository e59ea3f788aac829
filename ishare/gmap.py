"""Genetic maps: piecewise-linear mapping between base pairs and centimorgans."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Sequence
from os import PathLike
from pathlib import Path
from typing import Any

Point = tuple[int, float]


def _format_float(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


class GeneticMap:
    """A genetic map as ordered ``(bp, cM)`` points with 0-based positions."""

    def __init__(self, points: Iterable[Point] = ()) -> None:
        self.points: list[Point] = [(int(bp), float(cm)) for bp, cm in points]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneticMap):
            return NotImplemented
        return self.points == other.points

    def __repr__(self) -> str:
        return f"GeneticMap({self.points!r})"

    @classmethod
    def from_constant_rate(cls, rate: float, chrlen: int) -> GeneticMap:
        """Two-point map from bp 0 to ``chrlen - 1`` at ``rate`` bp per cM."""
        end = chrlen - 1
        return cls([(0, 0.0), (end, end / rate)])

    @classmethod
    def from_genome_info(cls, ginfo: Any) -> GeneticMap:
        """Build a genome-wide map from the per-chromosome plink map files."""
        start_bp = 0
        start_cm = 0.0
        merged: list[Point] = []
        for chrlen, plink_path in zip(ginfo.chromsize, ginfo.gmaps):
            chrmap = cls.from_plink_map(plink_path, chrlen)
            chrlen_cm = chrmap.get_size_cm()
            chrmap.update_to_genome_wide_coords(start_bp, start_cm)
            merged.extend(chrmap.points)
            start_bp += chrlen
            start_cm += chrlen_cm
        return cls(merged)

    @classmethod
    def from_gmap_vec(
        cls, gmap_vec: Sequence[Sequence[Point]], chromsizes: Sequence[int]
    ) -> GeneticMap:
        """Merge per-chromosome maps into one genome-wide map.

        Each chromosome map is extended to start at bp 0 and end at
        ``chrlen - 1``; points at or beyond the chromosome length are dropped.
        """
        start_bp = 0
        start_cm = 0.0
        merged: list[Point] = []
        for chrlen, gmap_chr in zip(chromsizes, gmap_vec):
            chr_points: list[Point] = []
            if gmap_chr[0][0] != 0:
                chr_points.append((0, 0.0))
            chr_points.extend(gmap_chr)
            chr_points = [(bp, cm) for bp, cm in chr_points if bp < chrlen]
            last_bp, last_cm = chr_points[-1]
            if last_bp != chrlen - 1:
                avg_rate = last_cm / last_bp if last_bp else 0.0
                chr_points.append((chrlen - 1, avg_rate * (chrlen - 1)))

            chrmap = cls(chr_points)
            chrlen_cm = chrmap.get_size_cm()
            chrmap.update_to_genome_wide_coords(start_bp, start_cm)
            merged.extend(chrmap.points)
            start_bp += chrlen
            start_cm += chrlen_cm
        return cls(merged)

    @classmethod
    def from_plink_map(cls, path: str | PathLike[str], chrlen: int) -> GeneticMap:
        """Read a single-chromosome plink map file (space separated).

        Column 3 holds cM and column 4 the 1-based position.
        """
        points: list[Point] = [(0, 0.0)]
        try:
            handle = open(path, encoding="utf-8")
        except OSError as exc:
            raise OSError(f"can not open file {path}") from exc
        with handle:
            for line in handle:
                line = line.rstrip("\r\n")
                if not line:
                    continue
                fields = line.split(" ")
                if len(fields) < 4:
                    raise ValueError(f"malformed plink map line: {line!r}")
                cm = float(fields[2])
                bp = int(fields[3]) - 1
                if bp == 0:
                    continue
                if not (bp, cm) > points[-1]:
                    raise ValueError("genetic map should be ordered by position")
                points.append((bp, cm))
        points.sort(key=lambda p: p[0])

        bp, cm = points[-1]
        if bp == 0:
            raise ValueError(f"genetic map {path} has no records")
        if bp > chrlen:
            raise ValueError("illegal chromosome end bp in the genetic map")
        avg_rate = cm / bp
        end_bp = chrlen - 1
        end_cm = max((end_bp - bp) * avg_rate + cm, cm)
        if bp == chrlen:
            points.pop()
        if bp != chrlen - 1:
            points.append((end_bp, end_cm))
        return cls(points)

    def get_gw_chr_start_cm_from_chrid(self, chrid: int, ginfo: Any) -> float:
        """Genome-wide cM at the start of chromosome ``chrid``."""
        return self.get_cm(ginfo.gwstarts[chrid])

    def get_gw_chr_start_cm_vec(self, ginfo: Any) -> list[float]:
        """Genome-wide starting cM of every chromosome, in name order."""
        return [
            self.get_cm(ginfo.gwstarts[ginfo.idx[chrname]])
            for chrname in ginfo.chromnames
        ]

    def get_cm(self, bp: int) -> float:
        """Interpolate the cM coordinate of a bp position."""
        idx = bisect_right(self.points, bp, key=lambda p: p[0]) - 1
        if idx < 0 or idx + 1 >= len(self.points):
            raise ValueError(f"position out of map range: idx={idx}, bp={bp}")
        x1, y1 = self.points[idx]
        x2, y2 = self.points[idx + 1]
        slope = (y2 - y1) / (x2 - x1)
        cm = (bp - x1) * slope + y1
        return min(max(cm, y1), y2)

    def get_cm_len(self, s: int, e: int) -> float:
        return self.get_cm(e) - self.get_cm(s)

    def get_bp(self, cm: float) -> int:
        """Interpolate the bp position of a cM coordinate."""
        idx = bisect_right(self.points, cm, key=lambda p: p[1]) - 1
        if idx < 0 or idx + 1 >= len(self.points):
            raise ValueError(f"cM out of map range: idx={idx}, cm={cm}")
        x1, y1 = self.points[idx]
        x2, y2 = self.points[idx + 1]
        slope = (x2 - x1) / (y2 - y1)
        offset = max(int((cm - y1) * slope), 0)
        return min(max(offset + x1, x1), x2)

    def get_size_cm(self) -> float:
        return self.points[-1][1] - self.points[0][1]

    def update_to_genome_wide_coords(self, bp_offset: int, cm_offset: float) -> None:
        """Shift every point by the given bp and cM offsets."""
        self.points = [(bp + bp_offset, cm + cm_offset) for bp, cm in self.points]

    def to_plink_map_files(self, ginfo: Any, prefix: str | PathLike[str]) -> None:
        """Write one plink map file per chromosome named ``<prefix>_<chr>.map``."""
        prefix = Path(prefix)
        parent = prefix.parent
        parent.mkdir(parents=True, exist_ok=True)
        stem = prefix.name
        for i, chrname in enumerate(ginfo.chromnames):
            gwstart = ginfo.gwstarts[i]
            if i + 1 < len(ginfo.gwstarts):
                gwend = ginfo.gwstarts[i + 1]
            else:
                gwend = ginfo.total_len_bp()
            s = bisect_left(self.points, gwstart, key=lambda p: p[0])
            e = bisect_left(self.points, gwend, key=lambda p: p[0])
            pos_offset, cm_offset = self.points[s]
            with open(parent / f"{stem}_{chrname}.map", "w", encoding="utf-8") as f:
                for pos, cm in self.points[s:e]:
                    f.write(
                        f"{chrname} . {_format_float(cm - cm_offset)} "
                        f"{pos - pos_offset + 1}\n"
                    )
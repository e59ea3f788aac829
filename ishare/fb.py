"""Reading forward-backward ancestry probability tables and local-ancestry segments."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from itertools import islice
from os import PathLike
from typing import Any

from .indiv import Individuals
from .intervaltree import Element, IntervalTree, Node

_MISSING = 255
UNKNOWN_ANCESTRY = "Unknown"


def _chunks(seq: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(seq), size):
        yield seq[start : start + size]


def _last_argmax(values: Sequence[float]) -> tuple[int, float]:
    best = max(values)
    return len(values) - 1 - values[::-1].index(best), best


@dataclass
class FbMatrix:
    """Most likely ancestry of every haplotype in every window.

    ``mat[h][w]`` is the ancestry index of haplotype ``h`` (``2 * sample + m``)
    in window ``w``; the index ``len(ancestry) - 1`` means unknown.
    ``samples`` maps each sample column of the file to its individual index,
    or ``None`` for samples that are not among the individuals.
    """

    windows: list[tuple[int, int]]
    ancestry: list[str]
    samples: list[int | None]
    mat: list[bytes]

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.mat), len(self.windows)

    @classmethod
    def from_fb_file(
        cls,
        path: str | PathLike[str],
        pos: Sequence[int],
        ginfo: Any,
        inds: Individuals,
        min_prob: float,
    ) -> FbMatrix:
        """Read a tab-separated forward-backward file.

        ``pos`` holds the sorted genome-wide 0-based positions of all markers;
        every position in the file must be among them. A haplotype whose
        largest probability is below ``min_prob`` gets the unknown ancestry.
        """
        with open(path, encoding="utf-8") as handle:
            ancestry = handle.readline().strip().split("\t")[1:]
            k_anc = len(ancestry)
            if k_anc == 0:
                raise ValueError("no ancestries listed in the first line")
            if k_anc >= _MISSING:
                raise ValueError("max number of ancestry should be less than 255")
            ancestry.append(UNKNOWN_ANCESTRY)

            header = handle.readline().strip().split("\t")
            samples = [
                inds.get(field.split(":::")[0]) for field in header[4 :: k_anc * 2]
            ]

            nhap = len(inds) * 2
            site_rows: list[bytearray] = []
            site_pos: list[int] = []
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                fields = line.split("\t")
                if len(fields) < 4:
                    raise ValueError(f"malformed line: {line!r}")
                chrname = fields[0]
                if chrname not in ginfo.idx:
                    raise ValueError(f"unknown chromosome {chrname!r}")
                chr_pos = int(fields[1]) - 1
                site_pos.append(ginfo.to_gw_pos(ginfo.idx[chrname], chr_pos))
                int(fields[3])

                row = bytearray([_MISSING]) * nhap
                n_chunks = 0
                n_valid = 0
                for n, chunk in enumerate(_chunks(fields[4:], k_anc)):
                    n_chunks = n + 1
                    i, m = divmod(n, 2)
                    if i >= len(samples):
                        raise ValueError("Invalid number of columns!")
                    sid = samples[i]
                    if sid is None:
                        continue
                    n_valid += 1
                    imax, best = _last_argmax([float(p) for p in chunk])
                    row[sid * 2 + m] = imax if best >= min_prob else k_anc
                if n_chunks != len(samples) * 2 or n_valid != nhap:
                    raise ValueError("Invalid number of columns!")
                site_rows.append(row)

        if not site_rows:
            raise ValueError(f"no ancestry records in {path}")

        win_snp_idx = []
        for p in site_pos:
            k = bisect_left(pos, p)
            if k == len(pos) or pos[k] != p:
                raise ValueError(f"position {p} is not among the marker positions")
            win_snp_idx.append(k)

        windows: list[tuple[int, int]] = []
        s = 0
        for a, b in zip(win_snp_idx, win_snp_idx[1:]):
            e = (a + b) // 2
            windows.append((pos[s], pos[e]))
            s = e
        windows.append((pos[s], pos[len(pos) - 1]))

        mat = [bytes(col) for col in zip(*site_rows)]
        return cls(windows=windows, ancestry=ancestry, samples=samples, mat=mat)

    def get_ancestries(self) -> list[str]:
        return self.ancestry


@dataclass(frozen=True)
class LASeg:
    """A run of windows with constant ancestry, starting at ``win_start``."""

    win_start: int
    ancestry: int


def _merge_join(
    left: Sequence[LASeg], right: Sequence[LASeg]
) -> Iterator[tuple[int, LASeg | None, LASeg | None]]:
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a.win_start < b.win_start:
            yield a.win_start, a, None
            i += 1
        elif a.win_start > b.win_start:
            yield b.win_start, None, b
            j += 1
        else:
            yield a.win_start, a, b
            i += 1
            j += 1
    for a in left[i:]:
        yield a.win_start, a, None
    for b in right[j:]:
        yield b.win_start, None, b


@dataclass
class LASet:
    """Local-ancestry segments of every haplotype."""

    windows: list[tuple[int, int]]
    hap_start_idx: list[int]
    segs: list[LASeg]

    @classmethod
    def from_fbmat(cls, fbmat: FbMatrix) -> LASet:
        hap_start_idx: list[int] = []
        segs: list[LASeg] = []
        for hap in fbmat.mat:
            hap_start_idx.append(len(segs))
            previous = None
            for w, anc in enumerate(hap):
                if anc != previous:
                    segs.append(LASeg(w, anc))
                    previous = anc
        return cls(list(fbmat.windows), hap_start_idx, segs)

    def get_lasegs(self, hap_idx: int) -> list[LASeg]:
        s = self.hap_start_idx[hap_idx]
        if hap_idx + 1 < len(self.hap_start_idx):
            e = self.hap_start_idx[hap_idx + 1]
        else:
            e = len(self.segs)
        return self.segs[s:e]

    def get_hap_pair_tree(self, hap1: int, hap2: int) -> IntervalTree:
        """Intervals over which both haplotypes keep a constant ancestry.

        Each element's value is ``(ancestry of hap1, ancestry of hap2)``.
        """
        segs1 = self.get_lasegs(hap1)
        segs2 = self.get_lasegs(hap2)
        if not segs1 or not segs2:
            raise ValueError("haplotype has no ancestry segments")
        last1 = segs1[0].ancestry
        last2 = segs2[0].ancestry
        prev_start = self.windows[0][0]
        nodes: list[Node] = []
        for win_start, s1, s2 in islice(_merge_join(segs1, segs2), 1, None):
            end = self.windows[win_start][0]
            nodes.append(Node(Element(prev_start, end, (last1, last2))))
            prev_start = end
            if s1 is not None:
                last1 = s1.ancestry
            if s2 is not None:
                last2 = s2.ancestry
        nodes.append(
            Node(Element(prev_start, self.windows[-1][1], (last1, last2)))
        )
        return IntervalTree.from_nodes(nodes)
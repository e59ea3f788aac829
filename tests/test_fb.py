import pytest

from ishare.fb import FbMatrix, LASeg, LASet
from ishare.genome import GenomeInfo
from ishare.indiv import Individuals

ANCS = ["AFR", "EUR"]
POS = [9, 19, 29, 39, 49]
ROW_POS = [10, 30, 50]
CALLS = {
    "S1": [(0, 1), (0, 1), (1, 1)],
    "S2": [(1, 0), (1, 1), (0, 0)],
    "X9": [(0, 0), (0, 0), (0, 0)],
}


def _ginfo():
    return GenomeInfo(
        name="g",
        chromsize=[1000],
        chromnames=["chr1"],
        idx={"chr1": 0},
        gwstarts=[0],
        gmaps=[],
    )


def _probs(call, p):
    return [f"{p:.5f}" if k == call else f"{1 - p:.5f}" for k in range(len(ANCS))]


def _write_fb(path, file_samples, calls=CALLS, row_pos=ROW_POS, p=1.0, extra=""):
    lines = ["#reference_panel_population:\t" + "\t".join(ANCS)]
    header = ["#chromosome", "physical_position", "genetic_position", "genetic_marker_index"]
    for name in file_samples:
        for hap in ("hap1", "hap2"):
            header.extend(f"{name}:::{hap}:::{a}" for a in ANCS)
    lines.append("\t".join(header))
    for w, pos1 in enumerate(row_pos):
        fields = ["chr1", str(pos1), "0.1", str(w * 5)]
        for name in file_samples:
            for m in range(2):
                fields.extend(_probs(calls[name][w][m], p))
        line = "\t".join(fields)
        if extra:
            line += "\t" + extra
        lines.append(line)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def fbmat(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S2", "X9", "S1"])
    inds = Individuals(["S1", "S2"])
    return FbMatrix.from_fb_file(path, POS, _ginfo(), inds, 0.5), inds


def test_matrix_follows_individual_order(fbmat):
    mat, inds = fbmat
    assert mat.shape == (2 * len(inds), len(ROW_POS))
    for name in inds:
        for m in range(2):
            h = 2 * inds.index(name) + m
            assert list(mat.mat[h]) == [CALLS[name][w][m] for w in range(len(ROW_POS))]


def test_samples_and_ancestry(fbmat):
    mat, inds = fbmat
    assert mat.samples == [inds.index("S2"), None, inds.index("S1")]
    assert mat.get_ancestries()[: len(ANCS)] == ANCS
    assert mat.ancestry[-1] == "Unknown"


def test_windows_cover_positions_contiguously(fbmat):
    mat, _ = fbmat
    assert len(mat.windows) == len(ROW_POS)
    assert mat.windows[0][0] == POS[0]
    assert mat.windows[-1][1] == POS[-1]
    for a, b in zip(mat.windows, mat.windows[1:]):
        assert a[1] == b[0]


def test_low_probability_becomes_unknown(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S1"], p=0.6)
    inds = Individuals(["S1"])
    confident = FbMatrix.from_fb_file(path, POS, _ginfo(), inds, 0.5)
    unsure = FbMatrix.from_fb_file(path, POS, _ginfo(), inds, 0.9)
    assert list(confident.mat[0]) == [c[0] for c in CALLS["S1"]]
    assert all(a == len(ANCS) for row in unsure.mat for a in row)
    assert unsure.ancestry[len(ANCS)] == "Unknown"


def test_ties_pick_last_ancestry(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S1"], p=0.5)
    inds = Individuals(["S1"])
    mat = FbMatrix.from_fb_file(path, POS, _ginfo(), inds, 0.5)
    assert all(a == len(ANCS) - 1 for row in mat.mat for a in row)


def test_position_not_in_marker_list(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S1"], row_pos=[10, 31, 50])
    with pytest.raises(ValueError):
        FbMatrix.from_fb_file(path, POS, _ginfo(), Individuals(["S1"]), 0.5)


def test_extra_columns_rejected(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S1"], extra="0.5\t0.5")
    with pytest.raises(ValueError):
        FbMatrix.from_fb_file(path, POS, _ginfo(), Individuals(["S1"]), 0.5)


def test_individual_missing_from_file(tmp_path):
    path = _write_fb(tmp_path / "fb.tsv", ["S1"])
    with pytest.raises(ValueError):
        FbMatrix.from_fb_file(path, POS, _ginfo(), Individuals(["S1", "S2"]), 0.5)


def test_laset_segments_are_runs(fbmat):
    mat, _ = fbmat
    laset = LASet.from_fbmat(mat)
    for h, row in enumerate(mat.mat):
        segs = laset.get_lasegs(h)
        assert segs[0].win_start == 0
        for a, b in zip(segs, segs[1:]):
            assert a.ancestry != b.ancestry
            assert a.win_start < b.win_start
        for seg in segs:
            assert row[seg.win_start] == seg.ancestry
        assert len(segs) == 1 + sum(x != y for x, y in zip(row, row[1:]))


def test_laset_from_small_matrix():
    mat = FbMatrix(
        windows=[(0, 10), (10, 20), (20, 30)],
        ancestry=["A", "B", "Unknown"],
        samples=[0],
        mat=[bytes([0, 0, 1]), bytes([1, 1, 1])],
    )
    laset = LASet.from_fbmat(mat)
    assert laset.get_lasegs(0) == [LASeg(0, 0), LASeg(2, 1)]
    assert laset.get_lasegs(1) == [LASeg(0, 1)]


def test_hap_pair_tree_matches_matrix(fbmat):
    mat, _ = fbmat
    laset = LASet.from_fbmat(mat)
    nhap = mat.shape[0]
    for h1 in range(nhap):
        for h2 in range(nhap):
            tree = laset.get_hap_pair_tree(h1, h2)
            elems = list(tree)
            assert elems[0].start == mat.windows[0][0]
            assert elems[-1].end == mat.windows[-1][1]
            for a, b in zip(elems, elems[1:]):
                assert a.end == b.start
            for w, (start, _end) in enumerate(mat.windows):
                found = list(tree.query_point(start))
                assert [e.value for e in found] == [(mat.mat[h1][w], mat.mat[h2][w])]


def test_hap_pair_tree_small():
    mat = FbMatrix(
        windows=[(0, 10), (10, 20), (20, 30)],
        ancestry=["A", "B", "Unknown"],
        samples=[0],
        mat=[bytes([0, 0, 1]), bytes([1, 0, 0])],
    )
    tree = LASet.from_fbmat(mat).get_hap_pair_tree(0, 1)
    got = [(e.start, e.end, e.value) for e in tree]
    assert got == [(0, 10, (0, 1)), (10, 20, (0, 0)), (20, 30, (1, 0))]
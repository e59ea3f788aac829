import pytest

from ishare.rare import GenotypeRecord, GenotypeRecords, SortStatus


def rec(pos, genome, allele):
    return GenotypeRecord.from_fields(pos, genome, allele)


def test_fields_round_trip():
    r = rec(123456, 789, 3)
    assert r.fields == (123456, 789, 3)
    assert GenotypeRecord(r.value) == r


def test_position_occupies_low_bits():
    r = rec(5, 0, 0)
    assert r.value == 5


def test_max_fields_round_trip():
    r = rec(2**32 - 1, 2**24 - 1, 255)
    assert r.fields == (2**32 - 1, 2**24 - 1, 255)
    assert r.is_sentinel()


def test_sentinel():
    s = GenotypeRecord.sentinel()
    assert s.is_sentinel()
    assert not rec(1, 1, 1).is_sentinel()


@pytest.mark.parametrize(
    "pos,genome,allele",
    [(2**32, 0, 0), (0, 2**24, 0), (0, 0, 256), (-1, 0, 0)],
)
def test_out_of_range_fields_raise(pos, genome, allele):
    with pytest.raises(ValueError):
        rec(pos, genome, allele)


def test_repr_shows_fields():
    assert "genome=2" in repr(rec(1, 2, 3))


def test_invalid_sort_status():
    with pytest.raises(ValueError):
        GenotypeRecords([], 7)


def test_sort_by_position_and_genome():
    data = [rec(30, 1, 1), rec(10, 2, 1), rec(20, 0, 1), rec(10, 0, 1)]
    recs = GenotypeRecords(data, SortStatus.UNSORTED)
    recs.sort_by_position()
    assert recs.is_sorted_by_position
    keys = [(r.position, r.genome) for r in recs]
    assert keys == sorted(keys)
    recs.sort_by_genome()
    assert recs.is_sorted_by_genome
    keys = [(r.genome, r.position) for r in recs]
    assert keys == sorted(keys)
    assert sorted(recs.records) == sorted(data)


def test_merge_marks_unsorted():
    a = GenotypeRecords([rec(1, 0, 1)], SortStatus.BY_GENOME)
    b = GenotypeRecords([rec(2, 1, 1)], SortStatus.BY_GENOME)
    a.merge(b)
    assert len(a) == 2
    assert a.sort_status is SortStatus.UNSORTED


def test_iter_genome_pair_requires_genome_sort():
    recs = GenotypeRecords([rec(1, 0, 1)], SortStatus.BY_POSITION)
    with pytest.raises(ValueError):
        recs.iter_genome_pair_genotypes(0, 1)


def test_iter_genome_pair_genotypes():
    recs = GenotypeRecords(
        [rec(10, 0, 1), rec(20, 0, 2), rec(20, 1, 3), rec(30, 1, 1), rec(15, 2, 1)]
    )
    recs.sort_by_genome()
    out = list(recs.iter_genome_pair_genotypes(0, 1))
    assert out == [(10, 1, None), (20, 2, 3), (30, None, 1)]


def test_iter_genome_pair_missing_genome():
    recs = GenotypeRecords([rec(10, 0, 1)])
    recs.sort_by_genome()
    assert list(recs.iter_genome_pair_genotypes(0, 5)) == [(10, 1, None)]


def test_filter_multi_allelic_site():
    recs = GenotypeRecords(
        [rec(10, 0, 1), rec(10, 1, 2), rec(20, 0, 1), rec(20, 2, 1), rec(30, 3, 4)]
    )
    recs.filter_multi_allelic_site()
    assert recs.is_sorted_by_position
    assert [r.position for r in recs] == [20, 20, 30]


def test_subset_by_genomes():
    recs = GenotypeRecords([rec(1, 0, 1), rec(2, 1, 1), rec(3, 2, 1), rec(4, 1, 1)])
    recs.sort_by_genome()
    sub = recs.subset_by_genomes([1, 2])
    assert {r.genome for r in sub} == {1, 2}
    assert len(sub) == 3
    assert sub.sort_status is SortStatus.BY_GENOME


def test_subset_requires_sorted_ids():
    recs = GenotypeRecords([rec(1, 0, 1)])
    recs.sort_by_genome()
    with pytest.raises(ValueError):
        recs.subset_by_genomes([2, 1])


def test_subset_requires_genome_sort():
    recs = GenotypeRecords([rec(1, 0, 1)], SortStatus.UNSORTED)
    with pytest.raises(ValueError):
        recs.subset_by_genomes([0])
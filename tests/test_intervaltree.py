import pytest

from ishare.intervaltree import Element, IntervalTree, Node


def _verify(tree, i, expected):
    v1 = sorted(e.value for e in tree.query_point(i))
    v2 = sorted(e.value for e in tree.query(i, i + 1))
    assert v1 == expected
    assert v2 == expected


@pytest.fixture
def tree():
    return IntervalTree(
        [
            ((0, 3), 1),
            ((1, 4), 2),
            ((2, 5), 3),
            ((3, 6), 4),
            ((4, 7), 5),
            ((5, 8), 6),
            ((4, 5), 7),
            ((2, 7), 8),
        ]
    )


@pytest.mark.parametrize(
    "point,expected",
    [
        (0, [1]),
        (1, [1, 2]),
        (2, [1, 2, 3, 8]),
        (3, [2, 3, 4, 8]),
        (4, [3, 4, 5, 7, 8]),
        (5, [4, 5, 6, 8]),
        (6, [5, 6, 8]),
        (7, [6]),
        (8, []),
        (9, []),
    ],
)
def test_it_works(tree, point, expected):
    _verify(tree, point, expected)


def test_empty():
    _verify(IntervalTree([]), 42, [])


def test_range_query(tree):
    assert sorted(e.value for e in tree.query(6, 9)) == [5, 6, 8]


def test_iter_sorted_by_start(tree):
    starts = [e.start for e in tree]
    assert starts == sorted(starts)
    assert len(tree) == 8


def test_into_nodes_and_from_nodes(tree):
    nodes = tree.into_nodes()
    assert len(tree) == 0
    assert len(nodes) == 8
    for node in nodes:
        node.max = 0
    rebuilt = IntervalTree.from_nodes(nodes)
    _verify(rebuilt, 4, [3, 4, 5, 7, 8])


def test_from_nodes_with_elements():
    nodes = [Node(Element(10, 20, "a")), Node(Element(0, 5, "b"))]
    tree = IntervalTree.from_nodes(nodes)
    assert [e.value for e in tree.query_point(12)] == ["a"]
    assert [e.value for e in tree.query_point(5)] == []


def test_refill_replaces_contents(tree):
    tree.refill([Element(100, 200, "x")])
    assert len(tree) == 1
    assert [e.value for e in tree.query(150, 151)] == ["x"]
    assert list(tree.query_point(4)) == []
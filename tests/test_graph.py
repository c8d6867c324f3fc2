import pytest

from sphys.graph import Graph, GraphVertex, half_edge_collapse


def _square_graph():
    # A cycle 1-2-3-4-1
    return Graph(
        [
            GraphVertex(1, "a", [2, 4]),
            GraphVertex(2, "b", [1, 3]),
            GraphVertex(3, "c", [2, 4]),
            GraphVertex(4, "d", [1, 3]),
        ]
    )


def _is_symmetric(graph):
    for vertex in graph.vertices:
        for neighbour_id in vertex.neighbours:
            neighbour = graph.find(neighbour_id)
            if neighbour is None or vertex.id not in neighbour.neighbours:
                return False
    return True


def test_find_existing_and_missing():
    graph = _square_graph()
    assert graph.find(3).data == "c"
    assert graph.find(7) is None


def test_vertex_ordering_by_id():
    vertices = [GraphVertex(5), GraphVertex(2), GraphVertex(9)]
    assert [v.id for v in sorted(vertices)] == [2, 5, 9]
    assert GraphVertex(3) < 4
    assert GraphVertex(3, "x") == GraphVertex(3, "y")


def test_collapse_removes_second_vertex():
    graph = _square_graph()
    half_edge_collapse(1, 2, graph)
    assert [v.id for v in graph.vertices] == [1, 3, 4]
    assert all(2 not in v.neighbours for v in graph.vertices)


def test_collapse_transfers_neighbours():
    graph = _square_graph()
    half_edge_collapse(1, 2, graph)
    assert graph.find(1).neighbours == [3, 4]
    assert 1 in graph.find(3).neighbours


def test_collapse_keeps_invariants():
    graph = _square_graph()
    half_edge_collapse(3, 1, graph)
    assert _is_symmetric(graph)
    for vertex in graph.vertices:
        assert vertex.neighbours == sorted(vertex.neighbours)
        assert vertex.id not in vertex.neighbours
        assert len(set(vertex.neighbours)) == len(vertex.neighbours)


@pytest.mark.parametrize("pair", [(1, 9), (9, 1)])
def test_collapse_with_missing_vertex_is_noop(pair):
    graph = _square_graph()
    before = [(v.id, list(v.neighbours)) for v in graph.vertices]
    half_edge_collapse(*pair, graph)
    assert [(v.id, list(v.neighbours)) for v in graph.vertices] == before


def test_repeated_collapse_leaves_single_vertex():
    graph = _square_graph()
    for vertex_id in (2, 3, 4):
        half_edge_collapse(1, vertex_id, graph)
    assert [v.id for v in graph.vertices] == [1]
    assert graph.find(1).neighbours == []
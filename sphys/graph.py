"""A small undirected graph whose vertices and adjacency lists are kept sorted by id."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(eq=False)
class GraphVertex(Generic[T]):
    """A vertex of a Graph: an id, its payload and the sorted ids of its neighbours."""

    id: int = -1
    data: Any = None
    neighbours: list[int] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GraphVertex):
            return self.id == other.id
        return NotImplemented

    def __lt__(self, other: GraphVertex | int) -> bool:
        if isinstance(other, GraphVertex):
            return self.id < other.id
        if isinstance(other, int):
            return self.id < other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


@dataclass
class Graph(Generic[T]):
    """A generic graph whose vertices are sorted by id from lowest to highest."""

    vertices: list[GraphVertex[T]] = field(default_factory=list)

    def _index_of(self, vertex_id: int) -> int | None:
        index = bisect.bisect_left(self.vertices, vertex_id, key=lambda v: v.id)
        if index < len(self.vertices) and self.vertices[index].id == vertex_id:
            return index
        return None

    def find(self, vertex_id: int) -> GraphVertex[T] | None:
        """Return the vertex with the given id, or None if there is none."""
        index = self._index_of(vertex_id)
        return None if index is None else self.vertices[index]


def _remove_sorted(values: list[int], value: int) -> None:
    index = bisect.bisect_left(values, value)
    if index < len(values) and values[index] == value:
        del values[index]


def half_edge_collapse(vertex1: int, vertex2: int, graph: Graph[Any]) -> None:
    """Collapse the vertex ``vertex2`` into ``vertex1``.

    The second vertex is removed and its relationships are given to the first.
    Nothing happens if either vertex is not in the graph.
    """
    first = graph.find(vertex1)
    second_index = graph._index_of(vertex2)
    if first is None or second_index is None:
        return
    second = graph.vertices[second_index]

    first_neighbours = set(first.neighbours)
    difference = [n for n in second.neighbours if n not in first_neighbours]

    for neighbour_id in second.neighbours:
        neighbour = graph.find(neighbour_id)
        if neighbour is not None:
            _remove_sorted(neighbour.neighbours, vertex2)

    for vertex_id in difference:
        if vertex_id == vertex1:
            continue
        vertex = graph.find(vertex_id)
        if vertex is not None:
            bisect.insort(first.neighbours, vertex_id)
            bisect.insort(vertex.neighbours, vertex1)

    del graph.vertices[second_index]
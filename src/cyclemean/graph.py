"""Directed weighted pseudograph used as input to the solvers.

The solver only *borrows* a graph: it enumerates vertices, incoming
arcs and arc weights, and never mutates anything.  :class:`DirectedGraph`
is the concrete container shipped with the package; parallel arcs and
self-loops are allowed, and vertices keep their insertion order so that
every traversal is deterministic.

Usage
-----
>>> g = DirectedGraph.from_edges([("a", "b", 1.0), ("b", "a", 3.0)])
>>> [a.weight for a in g.incoming_arcs("a")]
[3.0]
>>> g.subgraph(["a"]).number_of_arcs
0
"""

from __future__ import annotations

import csv
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Hashable, Iterable, Iterator, List, Sequence, Tuple, Union

__all__ = [
    "Arc",
    "DirectedGraph",
]


@dataclass(frozen=True)
class Arc:
    """A directed arc ``tail → head``.

    ``key`` is unique within the graph that created the arc, so two
    parallel arcs with the same endpoints and weight stay distinct.
    """

    tail: Hashable
    head: Hashable
    weight: float = 1.0
    key: int = 0

    def opposite(self, vertex: Hashable) -> Hashable:
        """Return the endpoint that is not *vertex*."""
        if vertex == self.tail:
            return self.head
        if vertex == self.head:
            return self.tail
        raise ValueError(f"{vertex!r} is not an endpoint of {self!r}")


class DirectedGraph:
    """Directed weighted pseudograph with insertion-ordered vertices."""

    def __init__(self):
        self._incoming: Dict[Hashable, List[Arc]] = {}
        self._outgoing: Dict[Hashable, List[Arc]] = {}
        self._arcs: List[Arc] = []
        self._next_key = 0

    # ── construction ────────────────────────────────────────────

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Union[Tuple[Hashable, Hashable], Tuple[Hashable, Hashable, float]]],
    ) -> "DirectedGraph":
        """Build a graph from ``(tail, head)`` or ``(tail, head, weight)`` tuples."""
        graph = cls()
        for edge in edges:
            if len(edge) == 2:
                graph.add_arc(edge[0], edge[1])
            else:
                graph.add_arc(edge[0], edge[1], edge[2])
        return graph

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        src_col: str = "src",
        dst_col: str = "dst",
        weight_col: str = "weight",
    ) -> "DirectedGraph":
        """Read a header-based CSV edge list.

        Vertex labels are kept as strings; weights are parsed as floats.

        Raises
        ------
        ValueError
            If a requested column is missing from a row.
        """
        graph = cls()
        with open(Path(path).expanduser(), newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                try:
                    u = row[src_col]
                    v = row[dst_col]
                    w = float(row[weight_col])
                except KeyError as exc:
                    raise ValueError(
                        f"Missing column in CSV: {exc}. "
                        f"Available columns: {list(row.keys())}"
                    ) from exc
                graph.add_arc(u, v, w)
        return graph

    def add_vertex(self, vertex: Hashable) -> bool:
        """Add *vertex*; return False if it was already present."""
        if vertex in self._incoming:
            return False
        self._incoming[vertex] = []
        self._outgoing[vertex] = []
        return True

    def add_arc(self, tail: Hashable, head: Hashable, weight: float = 1.0) -> Arc:
        """Add an arc, creating missing endpoints, and return it."""
        weight = float(weight)
        if math.isnan(weight):
            raise ValueError(f"Arc {tail!r} -> {head!r} has NaN weight")
        self.add_vertex(tail)
        self.add_vertex(head)
        arc = Arc(tail, head, weight, self._next_key)
        self._next_key += 1
        self._attach(arc)
        return arc

    def _attach(self, arc: Arc) -> None:
        self._arcs.append(arc)
        self._outgoing[arc.tail].append(arc)
        self._incoming[arc.head].append(arc)

    # ── read ────────────────────────────────────────────────────

    def vertices(self) -> List[Hashable]:
        return list(self._incoming)

    def arcs(self) -> List[Arc]:
        return list(self._arcs)

    def incoming_arcs(self, vertex: Hashable) -> List[Arc]:
        """Arcs whose head is *vertex*, in insertion order."""
        return list(self._incoming[vertex])

    def outgoing_arcs(self, vertex: Hashable) -> List[Arc]:
        """Arcs whose tail is *vertex*, in insertion order."""
        return list(self._outgoing[vertex])

    def arc_weight(self, arc: Arc) -> float:
        return arc.weight

    def has_vertex(self, vertex: Hashable) -> bool:
        return vertex in self._incoming

    def has_arc(self, arc: Arc) -> bool:
        return arc.tail in self._outgoing and arc in self._outgoing[arc.tail]

    @property
    def number_of_arcs(self) -> int:
        return len(self._arcs)

    def __contains__(self, vertex: Hashable) -> bool:
        return self.has_vertex(vertex)

    def __len__(self) -> int:
        return len(self._incoming)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._incoming)

    def __repr__(self) -> str:
        return f"DirectedGraph({len(self)} vertices, {self.number_of_arcs} arcs)"

    # ── views ───────────────────────────────────────────────────

    def subgraph(self, vertices: Iterable[Hashable]) -> "DirectedGraph":
        """Induced subgraph on *vertices*.

        The result shares this graph's :class:`Arc` objects and keeps
        this graph's vertex order, regardless of the order of *vertices*.
        """
        keep = set(vertices)
        missing = [v for v in keep if v not in self._incoming]
        if missing:
            raise KeyError(f"Vertices not in graph: {missing!r}")
        sub = DirectedGraph()
        for v in self._incoming:
            if v in keep:
                sub.add_vertex(v)
        for arc in self._arcs:
            if arc.tail in keep and arc.head in keep:
                sub._attach(arc)
        sub._next_key = self._next_key
        return sub

    def index(self) -> Tuple[Sequence[Hashable], Dict[Hashable, int]]:
        """Return ``(vertices, {vertex: position})`` in insertion order."""
        vertices = self.vertices()
        return vertices, {v: i for i, v in enumerate(vertices)}

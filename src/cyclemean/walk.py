"""GraphWalk — the closed walk reported by the solver."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Tuple

from .graph import Arc, DirectedGraph

__all__ = [
    "GraphWalk",
]


@dataclass(frozen=True)
class GraphWalk:
    """A walk through a graph, given by its vertices and arcs.

    Attributes
    ----------
    vertices : tuple
        Visited vertices in order.  For a closed walk the start vertex
        appears again at the end, so ``len(vertices) == len(arcs) + 1``.
    arcs : tuple[Arc, ...]
        Traversed arcs in order.
    weight : float
        Total weight of the walk.
    """

    vertices: Tuple[Hashable, ...]
    arcs: Tuple[Arc, ...]
    weight: float

    @property
    def start(self) -> Hashable:
        return self.vertices[0]

    @property
    def end(self) -> Hashable:
        return self.vertices[-1]

    @property
    def length(self) -> int:
        """Number of arcs."""
        return len(self.arcs)

    @property
    def mean(self) -> float:
        """Weight per arc; ``inf`` for an empty walk."""
        if not self.arcs:
            return math.inf
        return self.weight / len(self.arcs)

    @property
    def is_closed(self) -> bool:
        return bool(self.arcs) and self.start == self.end

    def verify(self, graph: DirectedGraph, tol: float = 1e-9) -> None:
        """Check that this walk really exists in *graph*.

        Raises
        ------
        ValueError
            If the vertex and arc sequences disagree, an arc is missing
            from *graph*, or ``weight`` differs from the sum of arc weights.
        """
        if len(self.vertices) != len(self.arcs) + 1:
            raise ValueError(
                f"Walk has {len(self.vertices)} vertices for "
                f"{len(self.arcs)} arcs")
        for i, arc in enumerate(self.arcs):
            if not graph.has_arc(arc):
                raise ValueError(f"Arc {arc!r} is not in the graph")
            if arc.tail != self.vertices[i] or arc.head != self.vertices[i + 1]:
                raise ValueError(
                    f"Arc {i} ({arc.tail!r} -> {arc.head!r}) does not "
                    f"join {self.vertices[i]!r} to {self.vertices[i + 1]!r}")
        total = math.fsum(graph.arc_weight(a) for a in self.arcs)
        if abs(total - self.weight) > tol * max(1.0, abs(total)):
            raise ValueError(
                f"Walk weight {self.weight} disagrees with arc sum {total}")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation (vertices rendered with ``str``
        unless they are already JSON scalars)."""
        def _safe(v):
            return v if isinstance(v, (int, float, str, bool)) else str(v)

        return {
            "vertices": [_safe(v) for v in self.vertices],
            "arcs": [
                {"tail": _safe(a.tail), "head": _safe(a.head),
                 "weight": a.weight}
                for a in self.arcs
            ],
            "weight": self.weight,
            "length": self.length,
            "mean": self.mean,
        }

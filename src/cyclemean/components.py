"""Strongly connected components and dense component indexing.

A minimum mean cycle always lies inside one strongly connected
component, so the solver works one component at a time.  Decomposition
is a pluggable capability: anything with a
``decompose(graph) -> Iterable[DirectedGraph]`` method can be injected.

Implementations
---------------
:class:`ScipyStrongComponents`
    Default.  Builds a CSR adjacency matrix and delegates to
    :func:`scipy.sparse.csgraph.connected_components` with
    ``connection="strong"``.
:class:`KosarajuStrongComponents`
    Pure-Python two-pass Kosaraju with explicit stacks, so deep graphs
    never hit the recursion limit.

Both yield components in order of their earliest vertex (graph insertion
order) so that results do not depend on the provider.

:class:`IndexedComponent` then maps one component onto dense integer
indices backed by numpy arrays, which is what the policy iteration in
:mod:`cyclemean.policy` operates on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from .graph import Arc, DirectedGraph

logger = logging.getLogger(__name__)

__all__ = [
    "StrongConnectivityAlgorithm",
    "ScipyStrongComponents",
    "KosarajuStrongComponents",
    "IndexedComponent",
]


# ═══════════════════════════════════════════════════════════════════
# Capability
# ═══════════════════════════════════════════════════════════════════

@runtime_checkable
class StrongConnectivityAlgorithm(Protocol):
    """Partition a graph into strongly connected induced subgraphs."""

    def decompose(self, graph: DirectedGraph) -> Iterable[DirectedGraph]:
        ...


def _group_by_label(vertices: Sequence[Hashable],
                    labels: Sequence[int]) -> List[List[Hashable]]:
    """Group *vertices* by component label, ordered by first occurrence."""
    groups: dict = {}
    for v, lab in zip(vertices, labels):
        groups.setdefault(int(lab), []).append(v)
    return list(groups.values())


# ═══════════════════════════════════════════════════════════════════
# scipy.sparse.csgraph
# ═══════════════════════════════════════════════════════════════════

class ScipyStrongComponents:
    """Strong components via :func:`scipy.sparse.csgraph.connected_components`."""

    def labels(self, graph: DirectedGraph) -> Tuple[int, np.ndarray]:
        """Return ``(n_components, labels)`` aligned with ``graph.vertices()``."""
        vertices, index = graph.index()
        n = len(vertices)
        if n == 0:
            return 0, np.zeros(0, dtype=np.int32)
        arcs = graph.arcs()
        rows = np.fromiter((index[a.tail] for a in arcs), dtype=np.int64,
                           count=len(arcs))
        cols = np.fromiter((index[a.head] for a in arcs), dtype=np.int64,
                           count=len(arcs))
        # Connectivity only: weights of zero must still count as arcs.
        adj = csr_matrix((np.ones(len(arcs)), (rows, cols)), shape=(n, n))
        return connected_components(adj, directed=True, connection="strong")

    def decompose(self, graph: DirectedGraph) -> List[DirectedGraph]:
        n_comp, labels = self.labels(graph)
        groups = _group_by_label(graph.vertices(), labels)
        logger.debug(f"scipy: {len(graph)} vertices -> {n_comp} components")
        return [graph.subgraph(g) for g in groups]

    def __repr__(self) -> str:
        return "ScipyStrongComponents()"


# ═══════════════════════════════════════════════════════════════════
# Kosaraju (pure Python, iterative)
# ═══════════════════════════════════════════════════════════════════

class KosarajuStrongComponents:
    """Two-pass Kosaraju with explicit stacks."""

    def labels(self, graph: DirectedGraph) -> Tuple[int, List[int]]:
        vertices, index = graph.index()
        n = len(vertices)
        succ: List[List[int]] = [[] for _ in range(n)]
        pred: List[List[int]] = [[] for _ in range(n)]
        for a in graph.arcs():
            u, v = index[a.tail], index[a.head]
            succ[u].append(v)
            pred[v].append(u)

        # Pass 1: finishing order on the forward graph.
        seen = [False] * n
        order: List[int] = []
        for root in range(n):
            if seen[root]:
                continue
            seen[root] = True
            stack = [(root, 0)]
            while stack:
                u, i = stack[-1]
                if i < len(succ[u]):
                    stack[-1] = (u, i + 1)
                    v = succ[u][i]
                    if not seen[v]:
                        seen[v] = True
                        stack.append((v, 0))
                else:
                    stack.pop()
                    order.append(u)

        # Pass 2: flood the reversed graph in reverse finishing order.
        comp_id = [-1] * n
        cid = 0
        for root in reversed(order):
            if comp_id[root] != -1:
                continue
            comp_id[root] = cid
            stack = [root]
            while stack:
                u = stack.pop()
                for v in pred[u]:
                    if comp_id[v] == -1:
                        comp_id[v] = cid
                        stack.append(v)
            cid += 1
        return cid, comp_id

    def decompose(self, graph: DirectedGraph) -> List[DirectedGraph]:
        n_comp, labels = self.labels(graph)
        groups = _group_by_label(graph.vertices(), labels)
        logger.debug(f"kosaraju: {len(graph)} vertices -> {n_comp} components")
        return [graph.subgraph(g) for g in groups]

    def __repr__(self) -> str:
        return "KosarajuStrongComponents()"


# ═══════════════════════════════════════════════════════════════════
# IndexedComponent: dense integer view of one component
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class IndexedComponent:
    """One component renumbered to ``0 .. n-1``.

    Arcs are stored grouped by head, in vertex order and then in
    incoming-arc order, so the incoming arcs of vertex ``v`` occupy
    positions ``in_offsets[v] : in_offsets[v + 1]``.

    Attributes
    ----------
    vertices : tuple
        Original vertex objects; position = dense index.
    arcs : tuple[Arc, ...]
        Original arc objects; position = arc index.
    arc_tail, arc_head : np.ndarray[int64]
        Dense endpoint indices per arc.
    arc_weight : np.ndarray[float64]
        Weight per arc.
    in_offsets : np.ndarray[int64]
        CSR offsets of shape ``(n + 1,)``.
    """

    vertices: Tuple[Hashable, ...]
    arcs: Tuple[Arc, ...]
    arc_tail: np.ndarray
    arc_head: np.ndarray
    arc_weight: np.ndarray
    in_offsets: np.ndarray

    @classmethod
    def from_graph(cls, component: DirectedGraph) -> "IndexedComponent":
        vertices, index = component.index()
        arcs: List[Arc] = []
        counts = np.zeros(len(vertices), dtype=np.int64)
        for i, v in enumerate(vertices):
            incoming = component.incoming_arcs(v)
            counts[i] = len(incoming)
            arcs.extend(incoming)
        m = len(arcs)
        in_offsets = np.zeros(len(vertices) + 1, dtype=np.int64)
        np.cumsum(counts, out=in_offsets[1:])
        return cls(
            vertices=tuple(vertices),
            arcs=tuple(arcs),
            arc_tail=np.fromiter((index[a.tail] for a in arcs),
                                 dtype=np.int64, count=m),
            arc_head=np.fromiter((index[a.head] for a in arcs),
                                 dtype=np.int64, count=m),
            arc_weight=np.fromiter((component.arc_weight(a) for a in arcs),
                                   dtype=np.float64, count=m),
            in_offsets=in_offsets,
        )

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    @property
    def n_arcs(self) -> int:
        return len(self.arcs)

    def incoming(self, v: int) -> range:
        """Arc indices entering dense vertex *v*."""
        return range(int(self.in_offsets[v]), int(self.in_offsets[v + 1]))

    def may_contain_cycle(self) -> bool:
        """False for an empty component or a lone vertex without a self-loop."""
        if self.n_vertices == 0:
            return False
        if self.n_vertices == 1 and self.n_arcs == 0:
            return False
        return True

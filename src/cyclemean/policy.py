"""Policy iteration steps of Howard's minimum-mean-cycle algorithm.

All state for one component lives in a :class:`PolicyContext` made
fresh by the controller in :mod:`cyclemean.howard`; nothing here keeps
state between calls.

Vocabulary
----------
policy
    For every vertex ``u`` one chosen arc leaving ``u``
    (``policy[u]`` is an arc index of the :class:`IndexedComponent`).
    Following policy arcs forward from any vertex must revisit a vertex,
    so the policy graph always contains a cycle.
distance
    Per-vertex potential.  After :func:`relax_potentials` it satisfies
    ``distance[u] <= distance[v] + w(u→v) * L - W`` for every arc, up to
    the tolerance, exactly when the current cycle ``(W, L)`` is optimal.
level
    Walk label used by :func:`find_policy_cycle`; ``-1`` = unvisited.

The four steps:

1. :func:`build_policy` — cheapest outgoing arc per vertex.
2. :func:`find_policy_cycle` — minimum-mean cycle of the policy graph.
3. :func:`relax_potentials` — recompute potentials against that cycle
   and switch arcs that lower a potential.  Returns whether anything
   switched.
4. :func:`reconstruct_cycle` — turn the final ``(vertex, policy)`` pair
   into the graph's own vertex and arc sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, List, Optional, Tuple

import numpy as np

from .components import IndexedComponent
from .errors import DecompositionError
from .graph import Arc
from .tolerance import ToleranceComparator, mean_is_smaller

__all__ = [
    "PolicyContext",
    "PolicyCycle",
    "build_policy",
    "find_policy_cycle",
    "relax_potentials",
    "reconstruct_cycle",
]

UNVISITED = -1
NO_ARC = -1


# ═══════════════════════════════════════════════════════════════════
# State
# ═══════════════════════════════════════════════════════════════════

class PolicyContext:
    """Mutable per-component working arrays.

    Parameters
    ----------
    component : IndexedComponent
        The component the arrays are indexed by.
    """

    def __init__(self, component: IndexedComponent):
        n = component.n_vertices
        self.component = component
        self.policy = np.full(n, NO_ARC, dtype=np.int64)
        self.distance = np.full(n, np.inf, dtype=np.float64)
        self.level = np.full(n, UNVISITED, dtype=np.int64)
        self.reached = np.zeros(n, dtype=bool)

    def __repr__(self) -> str:
        return (f"PolicyContext(n={self.component.n_vertices}, "
                f"arcs={self.component.n_arcs})")


@dataclass(frozen=True, eq=False)
class PolicyCycle:
    """A cycle of the policy graph: total weight, arc count, one vertex.

    ``policy`` is the policy array the cycle was found under; walking it
    from ``vertex`` traces the cycle even if the context has moved on.
    """

    weight: float
    length: int
    vertex: int
    policy: np.ndarray

    @property
    def mean(self) -> float:
        return self.weight / self.length

    def improves_on(self, other: Optional["PolicyCycle"]) -> bool:
        """Strictly smaller mean than *other*, compared without division."""
        if other is None:
            return True
        return mean_is_smaller(self.weight, self.length,
                               other.weight, other.length)


# ═══════════════════════════════════════════════════════════════════
# 1. Policy Builder
# ═══════════════════════════════════════════════════════════════════

def build_policy(ctx: PolicyContext) -> bool:
    """Give every vertex its cheapest outgoing arc.

    ``distance[u]`` is set to that arc's weight.  Among equally cheap
    arcs the one met last in the scan (vertices in order, then their
    incoming arcs) wins.

    Returns
    -------
    bool
        False if the component cannot contain a cycle (empty, or a
        single vertex without a self-loop); the context is untouched.

    Raises
    ------
    DecompositionError
        If some vertex has no arc leaving it inside the component.
    """
    comp = ctx.component
    if not comp.may_contain_cycle():
        return False

    tails = comp.arc_tail
    weights = comp.arc_weight
    scan = np.arange(comp.n_arcs)
    # Sort by tail, then weight, then latest scan position first.
    perm = np.lexsort((-scan, weights, tails))
    first = np.ones(perm.size, dtype=bool)
    first[1:] = tails[perm][1:] != tails[perm][:-1]
    chosen = perm[first]

    ctx.distance[:] = np.inf
    ctx.policy[:] = NO_ARC
    ctx.policy[tails[chosen]] = chosen
    ctx.distance[tails[chosen]] = weights[chosen]

    stranded = np.flatnonzero(ctx.policy == NO_ARC)
    if stranded.size:
        names = [comp.vertices[i] for i in stranded[:5]]
        raise DecompositionError(
            f"{stranded.size} vertices have no outgoing arc inside their "
            f"component (e.g. {names!r}); the component is not strongly "
            f"connected"
        )
    return True


# ═══════════════════════════════════════════════════════════════════
# 2. Policy Cycle Finder
# ═══════════════════════════════════════════════════════════════════

def find_policy_cycle(ctx: PolicyContext) -> Optional[PolicyCycle]:
    """Return the minimum-mean cycle of the current policy graph.

    Each unvisited vertex starts a walk along policy arcs that labels
    vertices with the walk's number.  Meeting a vertex with the current
    number closes a new cycle; meeting an older number means the walk
    drained into a cycle found earlier.  Ties keep the first cycle.
    """
    comp = ctx.component
    heads = comp.arc_head
    weights = comp.arc_weight
    policy = ctx.policy
    level = ctx.level
    level[:] = UNVISITED

    best_weight = 0.0
    best_length = 0
    best_vertex = -1
    i = 0
    for start in range(comp.n_vertices):
        if level[start] != UNVISITED:
            continue
        u = start
        while level[u] == UNVISITED:
            level[u] = i
            u = int(heads[policy[u]])

        if level[u] == i:
            weight = float(weights[policy[u]])
            length = 1
            v = int(heads[policy[u]])
            while v != u:
                weight += float(weights[policy[v]])
                length += 1
                v = int(heads[policy[v]])
            if best_vertex < 0 or mean_is_smaller(weight, length,
                                                  best_weight, best_length):
                best_weight = weight
                best_length = length
                best_vertex = u
        i += 1

    if best_vertex < 0:
        return None
    return PolicyCycle(best_weight, best_length, best_vertex, policy.copy())


# ═══════════════════════════════════════════════════════════════════
# 3. Potential Relaxer
# ═══════════════════════════════════════════════════════════════════

def relax_potentials(
    ctx: PolicyContext,
    cycle: PolicyCycle,
    comparator: ToleranceComparator,
) -> bool:
    """Recompute potentials against *cycle* and improve the policy.

    1. Breadth-first from ``cycle.vertex`` (potential 0) backwards over
       policy arcs: ``distance[u] = distance[v] + w * L - W``.
    2. Vertices the policy does not lead to ``cycle.vertex`` are reached
       backwards over arbitrary arcs, which become their policy arcs.
    3. One pass over all arcs lowers ``distance[u]`` and switches
       ``policy[u]`` wherever the formula beats it beyond the tolerance.

    Returns
    -------
    bool
        True if any policy arc was switched in step 3.

    Raises
    ------
    DecompositionError
        If step 2 cannot reach every vertex.
    """
    comp = ctx.component
    n = comp.n_vertices
    tails = comp.arc_tail
    weights = comp.arc_weight
    offsets = comp.in_offsets
    policy = ctx.policy
    dist = ctx.distance
    reached = ctx.reached
    length = cycle.length
    weight = cycle.weight

    reached[:] = False
    queue = np.empty(n, dtype=np.int64)
    front = 0
    back = 0
    queue[0] = cycle.vertex
    reached[cycle.vertex] = True
    dist[cycle.vertex] = 0.0

    while front <= back:
        v = int(queue[front])
        front += 1
        for e in range(offsets[v], offsets[v + 1]):
            u = int(tails[e])
            if policy[u] == e and not reached[u]:
                reached[u] = True
                dist[u] = dist[v] + weights[e] * length - weight
                back += 1
                queue[back] = u

    front = 0
    while back < n - 1:
        if front > back:
            raise DecompositionError(
                f"Only {back + 1} of {n} vertices reach the policy cycle; "
                f"the component is not strongly connected"
            )
        v = int(queue[front])
        front += 1
        for e in range(offsets[v], offsets[v + 1]):
            u = int(tails[e])
            if not reached[u]:
                reached[u] = True
                policy[u] = e
                dist[u] = dist[v] + weights[e] * length - weight
                back += 1
                queue[back] = u

    improved = False
    for e in range(comp.n_arcs):
        u = int(tails[e])
        v = int(comp.arc_head[e])
        delta = dist[v] + weights[e] * length - weight
        if comparator.compare(delta, dist[u]) < 0:
            dist[u] = delta
            policy[u] = e
            improved = True
    return improved


# ═══════════════════════════════════════════════════════════════════
# 4. Path Reconstructor
# ═══════════════════════════════════════════════════════════════════

def reconstruct_cycle(
    component: IndexedComponent,
    cycle: PolicyCycle,
) -> Tuple[List[Hashable], List[Arc]]:
    """Walk ``cycle.policy`` from ``cycle.vertex`` back to itself.

    Returns
    -------
    vertices : list
        Original vertices, starting and ending at the representative.
    arcs : list[Arc]
        Original arcs in traversal order.
    """
    start = cycle.vertex
    vertices: List[Hashable] = [component.vertices[start]]
    arcs: List[Arc] = []
    v = start
    while True:
        e = int(cycle.policy[v])
        arcs.append(component.arcs[e])
        v = int(component.arc_head[e])
        vertices.append(component.vertices[v])
        if v == start:
            break
    return vertices, arcs

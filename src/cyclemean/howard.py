"""Howard's policy iteration for the minimum mean cycle.

The graph is split into strongly connected components.  For each one
the controller builds the cheapest-arc policy and then alternates
:func:`~cyclemean.policy.find_policy_cycle` and
:func:`~cyclemean.policy.relax_potentials` until the relaxation stops
switching arcs.  The best cycle over all components is compared by
cross-multiplication and reconstructed only once, at the end.

Iterations are counted across all components of one solve.  Hitting
``maximum_iterations`` stops everything early but is not an error: each
iteration can only lower or keep a component's mean, so the best cycle
seen so far is still a valid (possibly suboptimal) answer.

Reference: A. Dasdan, S. Irani, R. Gupta, "Efficient algorithms for
optimum cycle mean and optimum cost to time ratio problems", DAC 1999.

Usage
-----
>>> from cyclemean import DirectedGraph, HowardMinimumMeanCycle
>>> g = DirectedGraph.from_edges([(0, 1, 2.0), (1, 2, 3.0), (2, 0, 4.0)])
>>> mmc = HowardMinimumMeanCycle(g)
>>> mmc.get_cycle_mean()
3.0
>>> mmc.get_cycle().vertices
(0, 1, 2, 0)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .components import IndexedComponent, ScipyStrongComponents, StrongConnectivityAlgorithm
from .config import DEFAULT_SETTINGS, SolverSettings
from .errors import ConfigurationError
from .graph import DirectedGraph
from .policy import (
    PolicyContext,
    PolicyCycle,
    build_policy,
    find_policy_cycle,
    reconstruct_cycle,
    relax_potentials,
)
from .tolerance import ToleranceComparator
from .trace import HowardTrace, IterationRecord
from .walk import GraphWalk

logger = logging.getLogger(__name__)

__all__ = [
    "MinimumCycleMeanAlgorithm",
    "MeanCycleResult",
    "HowardMinimumMeanCycle",
    "minimum_mean_cycle",
]


class MinimumCycleMeanAlgorithm(Protocol):
    """Anything that reports a minimum mean cycle of a fixed graph."""

    def get_cycle_mean(self) -> float:
        ...

    def get_cycle(self) -> Optional[GraphWalk]:
        ...


@dataclass(frozen=True)
class MeanCycleResult:
    """Outcome of one solve.

    Attributes
    ----------
    cycle : GraphWalk or None
        A closed walk realising ``mean``; None if the graph has no cycle.
    mean : float
        Minimum cycle mean, or ``math.inf`` if there is no cycle.
    trace : HowardTrace
        Iteration-level audit trail.
    """

    cycle: Optional[GraphWalk]
    mean: float
    trace: HowardTrace

    @property
    def has_cycle(self) -> bool:
        return self.cycle is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "cycle": self.cycle.to_dict() if self.cycle is not None else None,
            "trace": self.trace.to_dict(),
        }


class HowardMinimumMeanCycle:
    """Minimum mean cycle of a directed weighted graph.

    Parameters
    ----------
    graph : DirectedGraph
        Borrowed for the duration of each call and never modified.
        If it changes, simply call again; nothing is cached.
    maximum_iterations : int, optional
        Overrides ``settings["maximum_iterations"]``.
    strong_connectivity : StrongConnectivityAlgorithm, optional
        Decomposition provider.  Defaults to :class:`ScipyStrongComponents`.
    tolerance_epsilon : float, optional
        Overrides ``settings["tolerance_epsilon"]``.
    settings : SolverSettings, optional
        Base settings; defaults to :data:`DEFAULT_SETTINGS`.

    Raises
    ------
    ConfigurationError
        If *graph* is None, the decomposition provider has no
        ``decompose`` method, or a setting is invalid.
    """

    def __init__(
        self,
        graph: DirectedGraph,
        maximum_iterations: Optional[int] = None,
        strong_connectivity: Optional[StrongConnectivityAlgorithm] = None,
        tolerance_epsilon: Optional[float] = None,
        settings: Optional[SolverSettings] = None,
    ):
        if graph is None:
            raise ConfigurationError("graph should not be None")
        if strong_connectivity is None:
            strong_connectivity = ScipyStrongComponents()
        if not callable(getattr(strong_connectivity, "decompose", None)):
            raise ConfigurationError(
                f"strong_connectivity must provide decompose(graph), "
                f"got {type(strong_connectivity).__name__}"
            )

        overrides: Dict[str, Any] = {}
        if maximum_iterations is not None:
            overrides["maximum_iterations"] = maximum_iterations
        if tolerance_epsilon is not None:
            overrides["tolerance_epsilon"] = tolerance_epsilon
        base = settings if settings is not None else DEFAULT_SETTINGS
        self.settings = base.replace(overrides) if overrides else base

        self.graph = graph
        self.strong_connectivity = strong_connectivity
        self.comparator = ToleranceComparator(self.settings.tolerance_epsilon)

    @property
    def maximum_iterations(self) -> int:
        return self.settings.maximum_iterations

    @property
    def tolerance_epsilon(self) -> float:
        return self.settings.tolerance_epsilon

    # ── public API ──────────────────────────────────────────────

    def get_cycle_mean(self) -> float:
        """Minimum cycle mean, or ``math.inf`` if the graph is acyclic."""
        return self.solve().mean

    def get_cycle(self) -> Optional[GraphWalk]:
        """A closed walk with minimum mean, or None if the graph is acyclic."""
        return self.solve().cycle

    def solve(self) -> MeanCycleResult:
        """Run the full computation from scratch."""
        cap = self.settings.maximum_iterations
        best: Optional[PolicyCycle] = None
        best_component: Optional[IndexedComponent] = None
        records: List[IterationRecord] = []
        n_components = 0
        n_skipped = 0
        n_iterations = 0
        truncated = False

        for index, sub in enumerate(self.strong_connectivity.decompose(self.graph)):
            n_components += 1
            component = IndexedComponent.from_graph(sub)
            ctx = PolicyContext(component)
            if not build_policy(ctx):
                n_skipped += 1
                logger.debug(
                    f"component {index}: |V|={component.n_vertices} "
                    f"skipped (no cycle possible)")
                continue

            cycle: Optional[PolicyCycle] = None
            while True:
                n_iterations += 1
                if n_iterations > cap:
                    truncated = True
                    break
                cycle = find_policy_cycle(ctx)
                improved = relax_potentials(ctx, cycle, self.comparator)
                records.append(IterationRecord(
                    component=index,
                    iteration=n_iterations,
                    cycle_weight=cycle.weight,
                    cycle_length=cycle.length,
                    improved=improved,
                ))
                logger.debug(
                    f"component {index} | |V|={component.n_vertices} "
                    f"iter={n_iterations} weight={cycle.weight} "
                    f"length={cycle.length} mean={cycle.mean} "
                    f"improved={improved}")
                if not improved:
                    break

            if cycle is not None and cycle.improves_on(best):
                best = cycle
                best_component = component

            if truncated:
                logger.info(
                    f"iteration cap {cap} reached in component {index}; "
                    f"reporting best cycle found so far")
                break

        trace = HowardTrace(
            iterations=tuple(records),
            n_components=n_components,
            n_skipped=n_skipped,
            truncated=truncated,
            maximum_iterations=cap,
            tolerance_epsilon=self.settings.tolerance_epsilon,
        )
        if best is None:
            logger.info(f"no cycle found ({trace.summary()})")
            return MeanCycleResult(cycle=None, mean=math.inf, trace=trace)

        walk = self._build_walk(best_component, best)
        logger.info(f"minimum cycle mean {walk.mean} ({trace.summary()})")
        return MeanCycleResult(cycle=walk, mean=walk.mean, trace=trace)

    # ── internals ───────────────────────────────────────────────

    @staticmethod
    def _build_walk(component: IndexedComponent, cycle: PolicyCycle) -> GraphWalk:
        vertices, arcs = reconstruct_cycle(component, cycle)
        return GraphWalk(tuple(vertices), tuple(arcs), cycle.weight)

    def __repr__(self) -> str:
        return (
            f"HowardMinimumMeanCycle({self.graph!r}, "
            f"maximum_iterations={self.maximum_iterations}, "
            f"tolerance_epsilon={self.tolerance_epsilon})"
        )


def minimum_mean_cycle(graph: DirectedGraph, **kwargs) -> MeanCycleResult:
    """Solve once with :class:`HowardMinimumMeanCycle` and return the result.

    Keyword arguments are passed to the constructor.
    """
    return HowardMinimumMeanCycle(graph, **kwargs).solve()

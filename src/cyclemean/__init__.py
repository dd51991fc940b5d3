"""cyclemean: Minimum Mean Cycle via Howard's Policy Iteration.

Finds, in a directed graph with real arc weights, a cycle whose
weight-to-length ratio is smallest.  The graph is decomposed into
strongly connected components (scipy.sparse.csgraph by default) and
each component is solved by policy iteration over dense numpy arrays.

>>> from cyclemean import DirectedGraph, minimum_mean_cycle
>>> g = DirectedGraph.from_edges([(1, 3, 7.0), (3, 2, 3.0), (2, 0, 7.0), (2, 1, 5.0)])
>>> minimum_mean_cycle(g).mean
5.0
"""
from .errors import CycleMeanError, ConfigurationError, DecompositionError
from .config import (
    SolverSettings, DEFAULT_SETTINGS,
    DEFAULT_MAXIMUM_ITERATIONS, DEFAULT_TOLERANCE_EPSILON,
)
from .tolerance import ToleranceComparator, compare_means, mean_is_smaller
from .graph import Arc, DirectedGraph
from .walk import GraphWalk
from .components import (
    StrongConnectivityAlgorithm, ScipyStrongComponents,
    KosarajuStrongComponents, IndexedComponent,
)
from .policy import (
    PolicyContext, PolicyCycle,
    build_policy, find_policy_cycle, relax_potentials, reconstruct_cycle,
)
from .trace import IterationRecord, HowardTrace
from .howard import (
    MinimumCycleMeanAlgorithm, MeanCycleResult,
    HowardMinimumMeanCycle, minimum_mean_cycle,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "CycleMeanError", "ConfigurationError", "DecompositionError",
    # Configuration
    "SolverSettings", "DEFAULT_SETTINGS",
    "DEFAULT_MAXIMUM_ITERATIONS", "DEFAULT_TOLERANCE_EPSILON",
    # Numerics
    "ToleranceComparator", "compare_means", "mean_is_smaller",
    # Graph collaborators
    "Arc", "DirectedGraph", "GraphWalk",
    "StrongConnectivityAlgorithm", "ScipyStrongComponents",
    "KosarajuStrongComponents", "IndexedComponent",
    # Policy iteration steps
    "PolicyContext", "PolicyCycle",
    "build_policy", "find_policy_cycle", "relax_potentials",
    "reconstruct_cycle",
    # Solver
    "IterationRecord", "HowardTrace",
    "MinimumCycleMeanAlgorithm", "MeanCycleResult",
    "HowardMinimumMeanCycle", "minimum_mean_cycle",
]

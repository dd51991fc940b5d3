"""HowardTrace — audit trail for one solve.

Captures every ``FindCycle → Relax`` iteration of the controller
together with the component bookkeeping and the settings in force, in
frozen dataclasses suitable for debugging and serialisation.

Usage
-----
>>> result = minimum_mean_cycle(graph)
>>> trace = result.trace
>>> trace.n_iterations                 # 4
>>> trace.component_means(0)           # [2.5, 2.0, 2.0]
>>> trace.summary()
'4 iterations over 3 components (1 skipped), converged'
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

__all__ = [
    "IterationRecord",
    "HowardTrace",
]


# ═══════════════════════════════════════════════════════════════════
# IterationRecord: one FindCycle → Relax step
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class IterationRecord:
    """What one iteration saw.

    Attributes
    ----------
    component : int
        Position of the component in decomposition order.
    iteration : int
        Global iteration number (1-based, shared by all components).
    cycle_weight : float
        Total weight of the policy cycle found in this iteration.
    cycle_length : int
        Number of arcs on that cycle.
    improved : bool
        Whether the relaxation switched any policy arc afterwards.
    """

    component: int
    iteration: int
    cycle_weight: float
    cycle_length: int
    improved: bool

    @property
    def mean(self) -> float:
        return self.cycle_weight / self.cycle_length

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "iteration": self.iteration,
            "cycle_weight": self.cycle_weight,
            "cycle_length": self.cycle_length,
            "mean": self.mean,
            "improved": self.improved,
        }


# ═══════════════════════════════════════════════════════════════════
# HowardTrace: the full audit trail
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HowardTrace:
    """Complete record of one solve.

    ``truncated`` is True when the iteration cap stopped the controller
    before every component converged; the reported cycle is then the
    best one seen so far rather than a certified optimum.
    """

    iterations: Tuple[IterationRecord, ...]
    n_components: int
    n_skipped: int
    truncated: bool
    maximum_iterations: int
    tolerance_epsilon: float

    # ── Derived properties ──────────────────────────────────────

    @property
    def n_iterations(self) -> int:
        return len(self.iterations)

    @property
    def converged(self) -> bool:
        return not self.truncated

    def component_means(self, component: int) -> List[float]:
        """Cycle mean found in each iteration of *component*, in order."""
        return [r.mean for r in self.iterations if r.component == component]

    @property
    def best_mean(self) -> float:
        """Smallest mean seen in any iteration; ``inf`` if none ran."""
        return min((r.mean for r in self.iterations), default=math.inf)

    # ── Serialisation ───────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe dict of the full trace."""
        return {
            "iterations": [r.to_dict() for r in self.iterations],
            "n_iterations": self.n_iterations,
            "n_components": self.n_components,
            "n_skipped": self.n_skipped,
            "truncated": self.truncated,
            "maximum_iterations": self.maximum_iterations,
            "tolerance_epsilon": self.tolerance_epsilon,
        }

    def summary(self) -> str:
        """One-line human-readable summary."""
        state = "truncated" if self.truncated else "converged"
        return (
            f"{self.n_iterations} iterations over {self.n_components} "
            f"components ({self.n_skipped} skipped), {state}"
        )

    def __repr__(self) -> str:
        return (
            f"HowardTrace(iterations={self.n_iterations}, "
            f"components={self.n_components}, truncated={self.truncated})"
        )

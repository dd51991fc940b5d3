"""Exception taxonomy for cyclemean.

Two kinds of failure exist:

* :class:`ConfigurationError` — bad constructor arguments or settings,
  raised synchronously before any computation starts.
* :class:`DecompositionError` — an injected strong-connectivity provider
  yielded a component that is not strongly connected.  This is a
  programming-contract violation and is never caught internally.

A graph without any cycle is *not* an error: the solver reports a mean
of ``math.inf`` and no cycle.
"""

from __future__ import annotations

__all__ = [
    "CycleMeanError",
    "ConfigurationError",
    "DecompositionError",
]


class CycleMeanError(Exception):
    """Base class for all errors raised by cyclemean."""


class ConfigurationError(CycleMeanError, ValueError):
    """Invalid solver configuration."""


class DecompositionError(CycleMeanError, RuntimeError):
    """A component handed to the solver is not strongly connected."""

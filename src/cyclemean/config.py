"""SolverSettings — every tunable knob of the Howard solver in one place.

The solver has two knobs:

* ``maximum_iterations`` — cap on the number of ``FindCycle → Relax``
  iterations shared by all components of one solve.  Reaching it is
  not an error; the best cycle seen so far is reported.
* ``tolerance_epsilon`` — width of the band inside which two potentials
  are considered equal by the relaxation step.

Settings live in an immutable registry that can be:

* **inspected** — ``settings["tolerance_epsilon"]``
* **overridden** — ``settings.replace({"maximum_iterations": 50})``
* **diffed** — ``settings.diff(other)``

Usage
-----
>>> from cyclemean.config import DEFAULT_SETTINGS
>>> DEFAULT_SETTINGS["tolerance_epsilon"]          # 1e-09
>>> capped = DEFAULT_SETTINGS.replace({"maximum_iterations": 10})
>>> capped.diff(DEFAULT_SETTINGS)                  # {'maximum_iterations': (10, 9223372036854775807)}
"""

from __future__ import annotations

import math
import numbers
import sys
from typing import Any, Dict, Iterator, Optional, Tuple

from .errors import ConfigurationError

__all__ = [
    "SolverSettings",
    "DEFAULT_SETTINGS",
    "DEFAULT_MAXIMUM_ITERATIONS",
    "DEFAULT_TOLERANCE_EPSILON",
]

DEFAULT_MAXIMUM_ITERATIONS: int = sys.maxsize
DEFAULT_TOLERANCE_EPSILON: float = 1e-9


# ═══════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════

def _check_maximum_iterations(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(
            f"maximum_iterations must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(
            f"maximum_iterations should be non-negative, got {value}")
    return int(value)


def _check_tolerance_epsilon(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(
            f"tolerance_epsilon must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise ConfigurationError(
            f"tolerance_epsilon must be positive and finite, got {value}")
    return value


_VALIDATORS = {
    "maximum_iterations": _check_maximum_iterations,
    "tolerance_epsilon": _check_tolerance_epsilon,
}


# ═══════════════════════════════════════════════════════════════════
# SolverSettings
# ═══════════════════════════════════════════════════════════════════

class SolverSettings:
    """Immutable validated mapping of setting name → value.

    Parameters
    ----------
    data : dict[str, Any], optional
        Overrides for the defaults.  Keys not given keep their default.
    name : str, optional
        Human-readable label (e.g. ``"production"``, ``"capped-10"``).

    Raises
    ------
    KeyError
        If *data* contains an unknown key.
    ConfigurationError
        If a value fails validation.

    Notes
    -----
    * Read-only: ``__setitem__`` raises ``TypeError``.
    * ``replace()`` returns a new registry.
    * Iteration yields keys.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, *,
                 name: str = "custom"):
        merged: Dict[str, Any] = {
            "maximum_iterations": DEFAULT_MAXIMUM_ITERATIONS,
            "tolerance_epsilon": DEFAULT_TOLERANCE_EPSILON,
        }
        for k, v in (data or {}).items():
            if k not in _VALIDATORS:
                raise KeyError(
                    f"Unknown setting {k!r}. "
                    f"Valid keys: {sorted(_VALIDATORS)}"
                )
            merged[k] = v
        self._data: Dict[str, Any] = {
            k: _VALIDATORS[k](v) for k, v in merged.items()
        }
        self._name = name

    # ── read ────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def maximum_iterations(self) -> int:
        return self._data["maximum_iterations"]

    @property
    def tolerance_epsilon(self) -> float:
        return self._data["tolerance_epsilon"]

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._data.items())
        return f"SolverSettings({self._name!r}, {body})"

    def get(self, key: str, default: Any = None) -> Any:
        """Return value for *key*, or *default* if missing."""
        return self._data.get(key, default)

    def keys(self):
        return self._data.keys()

    def values(self):
        return self._data.values()

    def items(self):
        return self._data.items()

    def to_dict(self) -> Dict[str, Any]:
        """Return a mutable copy of the data."""
        return dict(self._data)

    # ── immutable mutation ──────────────────────────────────────

    def __setitem__(self, key: str, value: Any):
        raise TypeError(
            "SolverSettings is immutable — use .replace() instead")

    def replace(
        self,
        overrides: Dict[str, Any],
        *,
        name: Optional[str] = None,
    ) -> "SolverSettings":
        """Return a new registry with selected keys overridden.

        Parameters
        ----------
        overrides : dict
            ``{key: new_value}`` for keys to change.
        name : str, optional
            Name for the new registry.  Defaults to ``self.name + "+"``.

        Raises
        ------
        KeyError
            If any key in *overrides* is not a known setting.
        ConfigurationError
            If an overridden value is invalid.
        """
        merged = dict(self._data)
        merged.update(overrides)
        return SolverSettings(merged, name=name or (self._name + "+"))

    # ── comparison ──────────────────────────────────────────────

    def diff(
        self, other: "SolverSettings",
    ) -> Dict[str, Tuple[Any, Any]]:
        """Return ``{key: (self_value, other_value)}`` for differing keys."""
        return {
            k: (self._data[k], other._data[k])
            for k in sorted(self._data)
            if self._data[k] != other._data[k]
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SolverSettings):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._data.items())))


DEFAULT_SETTINGS = SolverSettings(name="production")

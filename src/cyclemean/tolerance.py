"""Floating-point comparison helpers.

Two different comparisons are used by the solver and they must not be
confused:

* :class:`ToleranceComparator` treats values within ``epsilon`` of each
  other as equal.  Every "did this potential improve?" decision in the
  relaxation step goes through it.
* :func:`compare_means` orders two cycles by mean *without dividing*:
  ``w1 / l1 < w2 / l2`` is evaluated as ``w1 * l2 < w2 * l1``.  Lengths
  are positive arc counts, so the direction of the inequality is kept.
"""

from __future__ import annotations

from .config import DEFAULT_TOLERANCE_EPSILON

__all__ = [
    "ToleranceComparator",
    "compare_means",
    "mean_is_smaller",
]


class ToleranceComparator:
    """Three-way comparator with an absolute tolerance band.

    Parameters
    ----------
    epsilon : float
        Two values are equal when ``abs(a - b) <= epsilon``.
    """

    def __init__(self, epsilon: float = DEFAULT_TOLERANCE_EPSILON):
        self.epsilon = float(epsilon)

    def compare(self, a: float, b: float) -> int:
        """Return -1, 0 or 1 as *a* is below, within or above *b*."""
        if a == b or abs(a - b) <= self.epsilon:
            return 0
        return -1 if a < b else 1

    def __call__(self, a: float, b: float) -> int:
        return self.compare(a, b)

    def __repr__(self) -> str:
        return f"ToleranceComparator(epsilon={self.epsilon!r})"


def compare_means(weight_a: float, length_a: int,
                  weight_b: float, length_b: int) -> int:
    """Three-way comparison of ``weight_a/length_a`` and ``weight_b/length_b``."""
    lhs = weight_a * length_b
    rhs = weight_b * length_a
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return 0


def mean_is_smaller(weight_a: float, length_a: int,
                    weight_b: float, length_b: int) -> bool:
    """True iff the first cycle has a strictly smaller mean."""
    return weight_a * length_b < weight_b * length_a

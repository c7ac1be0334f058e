"""
Triangular possibility distributions.

A triangular distribution is given by three control points (left base, peak,
right base). Zero-width ramps are allowed: the distribution then has a
vertical edge at the peak, and a singleton puts possibility 1 at exactly one
point. Neither case divides by zero.
"""

from __future__ import annotations

from typing import List

import numpy as np

from poss.exceptions import InvalidParameterError
from poss.types import Sample, TriangularParams

DEFAULT_NUM_POINTS = 101


def triangular_possibility(x: float, left_base: float, peak: float, right_base: float) -> float:
    """
    Possibility degree of `x` under a triangular distribution.

    Args:
        x: Point to evaluate.
        left_base: Left base (possibility 0).
        peak: Peak (possibility 1).
        right_base: Right base (possibility 0).

    Returns:
        Degree in [0, 1]. The peak always evaluates to 1, including for
        singleton and one-sided triangles.
    """
    x = float(x)
    if x == peak:
        return 1.0
    if x <= left_base or x >= right_base:
        return 0.0
    if x < peak:
        return float((x - left_base) / (peak - left_base))
    return float((right_base - x) / (right_base - peak))


def triangular_possibility_array(
    xs: np.ndarray, left_base: float, peak: float, right_base: float
) -> np.ndarray:
    """
    Vectorised `triangular_possibility` over an array of points.
    """
    xs = np.asarray(xs, dtype=float)
    out = np.zeros_like(xs)

    rising = (xs > left_base) & (xs < peak)
    if peak > left_base:
        out[rising] = (xs[rising] - left_base) / (peak - left_base)

    falling = (xs > peak) & (xs < right_base)
    if right_base > peak:
        out[falling] = (right_base - xs[falling]) / (right_base - peak)

    out[xs == peak] = 1.0
    return out


def axis_values(domain: tuple, num_points: int) -> np.ndarray:
    """
    Evenly spaced points spanning `domain` inclusive of both ends.

    Uses lo + (hi - lo) * i / (n - 1) so the last point is exactly hi.
    """
    n = int(num_points)
    if n < 2:
        raise InvalidParameterError(f"num_points must be >= 2, got {num_points!r}")
    lo, hi = float(domain[0]), float(domain[1])
    return lo + (hi - lo) * np.arange(n, dtype=float) / (n - 1)


def sample_triangular(params: TriangularParams, num_points: int = DEFAULT_NUM_POINTS) -> List[Sample]:
    """
    Sample a triangular distribution evenly over its domain.

    Args:
        params: Distribution control points and domain.
        num_points: Number of samples, including both domain ends.

    Returns:
        Samples ordered by x.
    """
    xs = axis_values(params.domain, num_points)
    ys = triangular_possibility_array(xs, params.left_base, params.peak, params.right_base)
    return [Sample(float(x), float(y)) for x, y in zip(xs, ys)]

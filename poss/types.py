from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from poss.exceptions import DegenerateDistributionError, InvalidParameterError

AXES: Tuple[str, ...] = ("x", "y")


def normalize_axis(axis: str) -> str:
    """
    Normalise an axis token to "x" or "y".
    """
    a = str(axis).strip().lower()
    if a not in AXES:
        raise ValueError(f"Unknown axis: {axis!r} (expected 'x' or 'y')")
    return a


def _finite(name: str, value: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(v):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return v


@dataclass(frozen=True)
class TriangularParams:
    """
    Control points of a triangular possibility distribution.

    The distribution rises linearly from 0 at `left_base` to 1 at `peak` and
    falls back to 0 at `right_base`. `domain` is the axis span the
    distribution is sampled over; it need not be centred on the triangle.

    Invariant: domain[0] <= left_base <= peak <= right_base <= domain[1].
    A singleton (left_base == peak == right_base) is valid.
    """

    left_base: float
    peak: float
    right_base: float
    domain: Tuple[float, float]

    def __init__(
        self,
        left_base: float,
        peak: float,
        right_base: float,
        domain: Tuple[float, float],
    ) -> None:
        left = _finite("left_base", left_base)
        mid = _finite("peak", peak)
        right = _finite("right_base", right_base)
        if len(tuple(domain)) != 2:
            raise InvalidParameterError(f"domain must be a (lo, hi) pair, got {domain!r}")
        lo = _finite("domain lower bound", domain[0])
        hi = _finite("domain upper bound", domain[1])
        if not lo < hi:
            raise InvalidParameterError(f"domain must satisfy lo < hi, got {domain!r}")
        if not (lo <= left <= mid <= right <= hi):
            raise InvalidParameterError(
                "Control points must satisfy lo <= left_base <= peak <= right_base <= hi, "
                f"got ({left}, {mid}, {right}) in domain ({lo}, {hi})"
            )
        object.__setattr__(self, "left_base", left)
        object.__setattr__(self, "peak", mid)
        object.__setattr__(self, "right_base", right)
        object.__setattr__(self, "domain", (lo, hi))

    @property
    def is_singleton(self) -> bool:
        return self.left_base == self.peak == self.right_base

    def require_proper(self) -> "TriangularParams":
        """
        Return self, or raise DegenerateDistributionError for a singleton.
        """
        if self.is_singleton:
            raise DegenerateDistributionError(
                f"Singleton triangle at {self.peak!r} has no ramps"
            )
        return self

    def with_points(self, left_base: float, peak: float, right_base: float) -> "TriangularParams":
        """
        Return a copy with new control points over the same domain.
        """
        return TriangularParams(left_base, peak, right_base, self.domain)


@dataclass(frozen=True)
class Sample:
    """One evaluated point (x, possibility) of a 1-D distribution."""

    x: float
    y: float


@dataclass(frozen=True)
class GridCell:
    """One evaluated point of a joint distribution."""

    x: float
    y: float
    value: float


@dataclass(frozen=True)
class Contributor:
    """A grid cell attaining (or nearly attaining) the maximum for one z value."""

    x: float
    y: float
    possibility: float


@dataclass(frozen=True)
class ForwardPoint:
    """
    One point of the propagated distribution over z = x + y.

    `key` is the quantized integer grouping key, z == key / 10**precision.
    """

    z: float
    possibility: float
    key: int

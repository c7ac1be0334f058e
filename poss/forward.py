"""
Forward propagation of a joint possibility grid through z = x + y.

The propagated distribution is the max-convolution
    pi_Z(z) = sup { pi_{X,Y}(x, y) : x + y = z }
evaluated on the grid. Sums are grouped by an integer key obtained by
quantizing z, so cells whose sums agree up to floating-point jitter fall into
the same output point. For each key the cells attaining the maximum are kept
for highlighting.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from poss.joint import JointGrid
from poss.types import Contributor, ForwardPoint

DEFAULT_PRECISION = 3
DEFAULT_TIE_TOLERANCE = 1e-4
DEFAULT_MIN_TIE_POSSIBILITY = 0.01


def z_key(z: float, precision: int = DEFAULT_PRECISION) -> int:
    """
    Quantize z to an integer grouping key (round half up at `precision` decimals).
    """
    return int(math.floor(float(z) * 10 ** int(precision) + 0.5))


@dataclass(frozen=True)
class ForwardResult:
    """
    Propagated distribution over z = x + y.

    Attributes:
        points: Output points sorted ascending by z.
        contributors: Map from z key to the (x, y, possibility) cells that
            attain (or tie within tolerance) the maximum for that key.
        z_min: Lower end of the z range (sum of the axis lower bounds).
        z_max: Upper end of the z range (sum of the axis upper bounds).
        precision: Decimal digits used to quantize z.
    """

    points: List[ForwardPoint]
    contributors: Dict[int, List[Contributor]]
    z_min: float
    z_max: float
    precision: int = DEFAULT_PRECISION
    _by_key: Dict[int, ForwardPoint] = field(init=False, default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_key", {p.key: p for p in self.points})

    def possibility_at(self, z: float) -> float:
        """
        Possibility of the output point whose key matches z, or 0.0 if none.
        """
        p = self._by_key.get(z_key(z, self.precision))
        return float(p.possibility) if p is not None else 0.0

    def max_points(self, z: float) -> List[Contributor]:
        return list(self.contributors.get(z_key(z, self.precision), []))

    def peak(self) -> Optional[ForwardPoint]:
        """
        First point (lowest z) with the maximal possibility.
        """
        if not self.points:
            return None
        best = self.points[0]
        for p in self.points[1:]:
            if p.possibility > best.possibility:
                best = p
        return best

    def max_possibility(self) -> float:
        # Absent z values have possibility 0.
        if not self.points:
            return 0.0
        return float(max(p.possibility for p in self.points))

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        z = np.array([p.z for p in self.points], dtype=float)
        poss = np.array([p.possibility for p in self.points], dtype=float)
        return z, poss


def forward_propagate(
    grid: JointGrid,
    *,
    precision: int = DEFAULT_PRECISION,
    tie_tolerance: float = DEFAULT_TIE_TOLERANCE,
    min_tie_possibility: float = DEFAULT_MIN_TIE_POSSIBILITY,
) -> ForwardResult:
    """
    Propagate a joint grid through z = x + y by max-convolution.

    Cells are visited with the x index outer and the y index inner. For each
    z key the running maximum starts at 0. A cell strictly above the maximum
    becomes the new maximum and the only contributor; a cell within
    `tie_tolerance` of the maximum and above `min_tie_possibility` is appended
    as a near-tie. Keys whose cells are all 0 are left out of the output;
    `z_min` and `z_max` still give the full axis range.

    Args:
        grid: Joint grid to propagate.
        precision: Decimal digits for the z grouping key. Finer grids may
            need more digits to avoid merging distinct sums.
        tie_tolerance: Absolute tolerance for near-tie contributors.
        min_tie_possibility: Near-ties at or below this level are not recorded.

    Returns:
        ForwardResult with points sorted by z.

    Raises:
        ValueError: If precision is negative or tolerances are negative.
    """
    precision = int(precision)
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")
    tie_tolerance = float(tie_tolerance)
    min_tie_possibility = float(min_tie_possibility)
    if tie_tolerance < 0 or min_tie_possibility < 0:
        raise ValueError("tie_tolerance and min_tie_possibility must be non-negative")

    scale = 10 ** precision
    xs = grid.x_values.tolist()
    ys = grid.y_values.tolist()
    values = grid.values

    best: Dict[int, float] = {}
    contributors: Dict[int, List[Contributor]] = {}

    for i, x in enumerate(xs):
        row = values[i].tolist()
        for j, y in enumerate(ys):
            v = row[j]
            key = z_key(x + y, precision)
            # A key enters the output only once some cell lifts it above 0.
            current = best.get(key, 0.0)
            if v > current:
                best[key] = v
                contributors[key] = [Contributor(x, y, v)]
            elif key in best and abs(v - current) < tie_tolerance and v > min_tie_possibility:
                contributors[key].append(Contributor(x, y, v))

    keys = sorted(best)
    points = [ForwardPoint(z=k / scale, possibility=float(best[k]), key=k) for k in keys]

    x_lo, x_hi = grid.x_domain
    y_lo, y_hi = grid.y_domain
    return ForwardResult(
        points=points,
        contributors={k: contributors[k] for k in keys},
        z_min=x_lo + y_lo,
        z_max=x_hi + y_hi,
        precision=precision,
    )

"""
Supremum marginalization of a joint possibility grid.

pi_X(x) = sup_y pi_{X,Y}(x, y), and symmetrically for Y. Projections re-scan
the full grid and do not depend on how the grid was built.
"""

from __future__ import annotations

from typing import List

import numpy as np

from poss.joint import JointGrid
from poss.types import Sample, normalize_axis


def supremum_marginal(grid: JointGrid, axis: str) -> List[Sample]:
    """
    Project a joint grid onto one axis by taking the maximum over the other.

    Args:
        grid: Joint grid to project.
        axis: "x" (maximise over y for each x) or "y" (maximise over x for each y).

    Returns:
        One Sample per grid point on the chosen axis, ordered by that axis.

    Raises:
        ValueError: If axis is not "x" or "y".
    """
    axis = normalize_axis(axis)
    if axis == "x":
        coords = grid.x_values
        sup = np.max(grid.values, axis=1)
    else:
        coords = grid.y_values
        sup = np.max(grid.values, axis=0)
    return [Sample(float(c), float(v)) for c, v in zip(coords, sup)]


def supremum_marginal_x(grid: JointGrid) -> List[Sample]:
    return supremum_marginal(grid, "x")


def supremum_marginal_y(grid: JointGrid) -> List[Sample]:
    return supremum_marginal(grid, "y")

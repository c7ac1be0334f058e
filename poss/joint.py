from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

import numpy as np

from poss.copula import Copula, CopulaSelection, get_copula, parse_copula
from poss.exceptions import InvalidParameterError
from poss.triangular import axis_values, triangular_possibility_array
from poss.types import GridCell, TriangularParams

DEFAULT_RESOLUTION = 100


@dataclass(frozen=True)
class JointGrid:
    """
    Joint possibility distribution sampled on a dense grid.

    `values[i, j]` is the joint degree at (x_values[i], y_values[j]). Arrays are
    copied and made read-only on construction.
    """

    x_values: np.ndarray  # shape (N,)
    y_values: np.ndarray  # shape (M,)
    values: np.ndarray  # shape (N, M)
    copula: Optional[CopulaSelection] = None

    def __post_init__(self) -> None:
        xs = np.array(self.x_values, dtype=float)
        ys = np.array(self.y_values, dtype=float)
        vals = np.array(self.values, dtype=float)
        if xs.ndim != 1 or ys.ndim != 1:
            raise ValueError("x_values and y_values must be 1D")
        if vals.shape != (xs.shape[0], ys.shape[0]):
            raise ValueError(
                f"values has shape {vals.shape}, expected {(xs.shape[0], ys.shape[0])}"
            )
        for arr in (xs, ys, vals):
            arr.setflags(write=False)
        object.__setattr__(self, "x_values", xs)
        object.__setattr__(self, "y_values", ys)
        object.__setattr__(self, "values", vals)

    @property
    def shape(self) -> Tuple[int, int]:
        return (int(self.values.shape[0]), int(self.values.shape[1]))

    @property
    def x_domain(self) -> Tuple[float, float]:
        return (float(self.x_values[0]), float(self.x_values[-1]))

    @property
    def y_domain(self) -> Tuple[float, float]:
        return (float(self.y_values[0]), float(self.y_values[-1]))

    def cell(self, i: int, j: int) -> GridCell:
        return GridCell(
            x=float(self.x_values[i]),
            y=float(self.y_values[j]),
            value=float(self.values[i, j]),
        )

    def cells(self) -> Iterator[GridCell]:
        """
        Iterate all cells, x index outer and y index inner.
        """
        n, m = self.shape
        for i in range(n):
            for j in range(m):
                yield self.cell(i, j)

    def max_value(self) -> float:
        return float(np.max(self.values)) if self.values.size else float("nan")


def build_joint_grid(
    marginal_x: TriangularParams,
    marginal_y: TriangularParams,
    copula: Union[str, CopulaSelection, Copula] = CopulaSelection.INDEPENDENCE,
    resolution: int = DEFAULT_RESOLUTION,
) -> JointGrid:
    """
    Evaluate a copula over a resolution x resolution grid.

    Each axis is sampled at `resolution` evenly spaced points spanning its own
    marginal's domain; the two domains are independent of each other. The grid
    is always rebuilt from scratch.

    Args:
        marginal_x: Triangular marginal along x.
        marginal_y: Triangular marginal along y.
        copula: Selection token, CopulaSelection, or a combinator callable.
        resolution: Points per axis (>= 2). Cost is O(resolution**2).

    Returns:
        A read-only JointGrid.

    Raises:
        InvalidParameterError: If resolution is not an integer >= 2.
        UnknownCopulaError: If copula is an unrecognised token.
    """
    if isinstance(resolution, bool) or int(resolution) != resolution or int(resolution) < 2:
        raise InvalidParameterError(f"resolution must be an integer >= 2, got {resolution!r}")
    n = int(resolution)

    selection: Optional[CopulaSelection] = None
    if callable(copula) and not isinstance(copula, str):
        func = copula
    else:
        selection = parse_copula(copula)
        func = get_copula(selection)

    xs = axis_values(marginal_x.domain, n)
    ys = axis_values(marginal_y.domain, n)
    pi_x = triangular_possibility_array(xs, marginal_x.left_base, marginal_x.peak, marginal_x.right_base)
    pi_y = triangular_possibility_array(ys, marginal_y.left_base, marginal_y.peak, marginal_y.right_base)

    # Broadcast to (N, N): rows follow x, columns follow y.
    values = np.asarray(func(pi_x[:, None], pi_y[None, :]), dtype=float)
    return JointGrid(x_values=xs, y_values=ys, values=values, copula=selection)

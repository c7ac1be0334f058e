"""
Possibility engine facade.

The engine owns the two triangular marginals and the copula selection, and
rebuilds every derived structure from scratch on `recompute()`. Mutations go
through validated setters; a rejected mutation leaves the previous state in
place.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from poss.copula import CopulaSelection, parse_copula
from poss.exceptions import InvalidParameterError
from poss.forward import (
    DEFAULT_MIN_TIE_POSSIBILITY,
    DEFAULT_PRECISION,
    DEFAULT_TIE_TOLERANCE,
    ForwardResult,
    forward_propagate,
)
from poss.joint import DEFAULT_RESOLUTION, JointGrid, build_joint_grid
from poss.marginal import supremum_marginal
from poss.triangular import DEFAULT_NUM_POINTS, sample_triangular
from poss.types import Contributor, ForwardPoint, Sample, TriangularParams, normalize_axis

logger = logging.getLogger(__name__)

HANDLES = ("left", "peak", "right")


def default_marginal_x() -> TriangularParams:
    return TriangularParams(2.3, 3.0, 3.7, (2.0, 4.0))


def default_marginal_y() -> TriangularParams:
    return TriangularParams(3.4, 4.0, 4.6, (3.0, 5.0))


@dataclass(frozen=True)
class RecomputeResult:
    """
    Everything derived from one recompute cycle.

    Attributes:
        joint_grid: Joint distribution on the grid.
        marginal_x: Supremum projection of the grid onto x.
        marginal_y: Supremum projection of the grid onto y.
        forward: Propagated distribution over z = x + y.
        input_x: The x marginal sampled over its domain, for overlaying.
        input_y: The y marginal sampled over its domain, for overlaying.
        copula: Copula the grid was built with.
        params_x: X marginal control points the grid was built from.
        params_y: Y marginal control points the grid was built from.
    """

    joint_grid: JointGrid
    marginal_x: List[Sample]
    marginal_y: List[Sample]
    forward: ForwardResult
    input_x: List[Sample]
    input_y: List[Sample]
    copula: CopulaSelection
    params_x: TriangularParams
    params_y: TriangularParams

    @property
    def forward_distribution(self) -> List[ForwardPoint]:
        return self.forward.points

    @property
    def contributing_points(self) -> Dict[int, List[Contributor]]:
        return self.forward.contributors


def clamp_control_points(
    domain: tuple, left_base: float, peak: float, right_base: float
) -> tuple:
    """
    Clamp control points into `domain` and restore their ordering.

    Left and right bases are clamped into the domain, then the peak is clamped
    between them.

    Raises:
        InvalidParameterError: If a value is not finite, or if the bases are
            out of order after clamping.
    """
    values = []
    for name, v in (("left_base", left_base), ("peak", peak), ("right_base", right_base)):
        try:
            fv = float(v)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(f"{name} must be a number, got {v!r}") from exc
        if not math.isfinite(fv):
            raise InvalidParameterError(f"{name} must be finite, got {v!r}")
        values.append(fv)
    left, mid, right = values

    lo, hi = float(domain[0]), float(domain[1])
    left = min(max(left, lo), hi)
    right = min(max(right, lo), hi)
    if left > right:
        raise InvalidParameterError(
            f"left_base {left_base!r} exceeds right_base {right_base!r} "
            f"after clamping to domain ({lo}, {hi})"
        )
    mid = min(max(mid, left), right)
    return left, mid, right


class PossibilityEngine:
    """
    Owns two triangular marginals and a copula selection.

    Example:
        >>> engine = PossibilityEngine()
        >>> engine.set_copula("unknown")
        >>> result = engine.recompute()
        >>> result.forward.peak().z  # doctest: +SKIP
    """

    def __init__(
        self,
        marginal_x: Optional[TriangularParams] = None,
        marginal_y: Optional[TriangularParams] = None,
        copula: Union[str, CopulaSelection] = CopulaSelection.INDEPENDENCE,
        resolution: int = DEFAULT_RESOLUTION,
        *,
        precision: int = DEFAULT_PRECISION,
        tie_tolerance: float = DEFAULT_TIE_TOLERANCE,
        min_tie_possibility: float = DEFAULT_MIN_TIE_POSSIBILITY,
        num_points: int = DEFAULT_NUM_POINTS,
        min_separation: float = 0.0,
    ) -> None:
        """
        Initialize the engine.

        Args:
            marginal_x: X marginal. Defaults to (2.3, 3.0, 3.7) over [2, 4].
            marginal_y: Y marginal. Defaults to (3.4, 4.0, 4.6) over [3, 5].
            copula: Initial copula selection.
            resolution: Grid points per axis; cost grows as resolution**2 and
                coarser grids merge more sums into one z key.
            precision: Decimal digits for grouping z values.
            tie_tolerance: Near-tie tolerance for contributor tracking.
            min_tie_possibility: Floor for recording near-tie contributors.
            num_points: Samples used for the input-curve overlays.
            min_separation: Minimum gap kept between control points by
                `update_handle`. 0 allows singletons.

        Raises:
            InvalidParameterError: If a marginal is not a TriangularParams or
                a numeric option is out of range.
            UnknownCopulaError: If copula is not recognised.
        """
        for name, params in (("marginal_x", marginal_x), ("marginal_y", marginal_y)):
            if params is not None and not isinstance(params, TriangularParams):
                raise InvalidParameterError(
                    f"{name} must be a TriangularParams, got {type(params).__name__}"
                )
        if isinstance(resolution, bool) or int(resolution) != resolution or int(resolution) < 2:
            raise InvalidParameterError(f"resolution must be an integer >= 2, got {resolution!r}")
        if int(num_points) < 2:
            raise InvalidParameterError(f"num_points must be >= 2, got {num_points!r}")
        if int(precision) < 0:
            raise InvalidParameterError(f"precision must be non-negative, got {precision!r}")
        if float(tie_tolerance) < 0 or float(min_tie_possibility) < 0:
            raise InvalidParameterError("tie_tolerance and min_tie_possibility must be non-negative")
        if float(min_separation) < 0:
            raise InvalidParameterError(f"min_separation must be non-negative, got {min_separation!r}")

        self._marginals: Dict[str, TriangularParams] = {
            "x": marginal_x if marginal_x is not None else default_marginal_x(),
            "y": marginal_y if marginal_y is not None else default_marginal_y(),
        }
        self._copula: CopulaSelection = parse_copula(copula)
        self.resolution = int(resolution)
        self.precision = int(precision)
        self.tie_tolerance = float(tie_tolerance)
        self.min_tie_possibility = float(min_tie_possibility)
        self.num_points = int(num_points)
        self.min_separation = float(min_separation)

    @property
    def marginal_x(self) -> TriangularParams:
        return self._marginals["x"]

    @property
    def marginal_y(self) -> TriangularParams:
        return self._marginals["y"]

    @property
    def copula(self) -> CopulaSelection:
        return self._copula

    def marginal(self, axis: str) -> TriangularParams:
        return self._marginals[normalize_axis(axis)]

    def set_marginal(
        self, axis: str, left_base: float, peak: float, right_base: float
    ) -> TriangularParams:
        """
        Replace the control points of one marginal.

        Values are clamped into the axis domain and the peak is clamped
        between the bases. The domain itself is unchanged.

        Args:
            axis: "x" or "y".
            left_base: Requested left base.
            peak: Requested peak.
            right_base: Requested right base.

        Returns:
            The accepted TriangularParams.

        Raises:
            InvalidParameterError: If no valid triangle results from clamping;
                the previous marginal is kept.
        """
        axis = normalize_axis(axis)
        current = self._marginals[axis]
        try:
            left, mid, right = clamp_control_points(current.domain, left_base, peak, right_base)
            updated = current.with_points(left, mid, right)
        except InvalidParameterError as exc:
            logger.warning("Rejected marginal %s update: %s", axis, exc)
            raise
        self._marginals[axis] = updated
        logger.debug("Marginal %s set to (%g, %g, %g)", axis, left, mid, right)
        return updated

    def update_handle(self, axis: str, handle: str, value: float) -> TriangularParams:
        """
        Move one control point, bounded by its neighbours and the domain.

        This is the drag rule:
          - left:  max(lo, min(peak - sep, value))
          - peak:  max(left + sep, min(right - sep, value))
          - right: max(peak + sep, min(hi, value))

        The result is then clamped between the neighbours (or the domain
        edge), so `min_separation` gives way when the neighbours are
        already closer than it allows.

        Args:
            axis: "x" or "y".
            handle: "left", "peak" or "right".
            value: Requested position.

        Returns:
            The accepted TriangularParams.

        Raises:
            InvalidParameterError: If the handle is unknown or the value is
                not finite; the previous marginal is kept.
        """
        axis = normalize_axis(axis)
        h = str(handle).strip().lower()
        if h not in HANDLES:
            raise InvalidParameterError(f"Unknown handle: {handle!r} (expected one of {HANDLES})")
        try:
            v = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(f"handle value must be a number, got {value!r}") from exc
        if not math.isfinite(v):
            raise InvalidParameterError(f"handle value must be finite, got {value!r}")

        current = self._marginals[axis]
        lo, hi = current.domain
        sep = self.min_separation
        left, mid, right = current.left_base, current.peak, current.right_base
        if h == "left":
            left = min(mid, max(lo, min(mid - sep, v)))
        elif h == "peak":
            mid = min(right, max(left, max(left + sep, min(right - sep, v))))
        else:
            right = max(mid, min(hi, max(mid + sep, v)))

        try:
            updated = current.with_points(left, mid, right)
        except InvalidParameterError as exc:
            logger.warning("Rejected %s handle move on %s: %s", h, axis, exc)
            raise
        self._marginals[axis] = updated
        logger.debug("Handle %s on %s moved to %g", h, axis, v)
        return updated

    def set_copula(self, selection: Union[str, CopulaSelection]) -> CopulaSelection:
        """
        Select the copula used by future recomputes.

        Raises:
            UnknownCopulaError: If selection is not 'independence' or
                'unknown'; the previous selection is kept.
        """
        self._copula = parse_copula(selection)
        logger.debug("Copula set to %s", self._copula.value)
        return self._copula

    def recompute(self) -> RecomputeResult:
        """
        Rebuild the joint grid and everything derived from it.

        The engine state is not modified; calling this twice without an
        intervening mutation yields equal results.
        """
        mx = self._marginals["x"]
        my = self._marginals["y"]
        copula = self._copula

        grid = build_joint_grid(mx, my, copula, self.resolution)
        forward = forward_propagate(
            grid,
            precision=self.precision,
            tie_tolerance=self.tie_tolerance,
            min_tie_possibility=self.min_tie_possibility,
        )
        result = RecomputeResult(
            joint_grid=grid,
            marginal_x=supremum_marginal(grid, "x"),
            marginal_y=supremum_marginal(grid, "y"),
            forward=forward,
            input_x=sample_triangular(mx, self.num_points),
            input_y=sample_triangular(my, self.num_points),
            copula=copula,
            params_x=mx,
            params_y=my,
        )
        peak = forward.peak()
        logger.debug(
            "Recomputed %dx%d grid with %s copula; %d z points, peak at %s",
            grid.shape[0],
            grid.shape[1],
            copula.value,
            len(forward.points),
            None if peak is None else f"{peak.z:g}",
        )
        return result

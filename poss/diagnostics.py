from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from poss.copula import get_copula
from poss.engine import RecomputeResult
from poss.triangular import triangular_possibility_array
from poss.types import Sample, TriangularParams


def _marginal_errors(
    recovered: Sequence[Sample],
    params: TriangularParams,
    other_axis_peak: float,
    copula,
) -> tuple:
    xs = np.array([s.x for s in recovered], dtype=float)
    got = np.array([s.y for s in recovered], dtype=float)
    analytic = triangular_possibility_array(xs, params.left_base, params.peak, params.right_base)
    # Copulas are monotone, so sup over the other axis equals the copula
    # evaluated at that axis's peak sampled value.
    expected = np.asarray(copula(analytic, other_axis_peak), dtype=float)
    input_err = float(np.max(np.abs(got - analytic))) if got.size else 0.0
    identity_err = float(np.max(np.abs(got - expected))) if got.size else 0.0
    dominance = float(np.min(got - analytic)) if got.size else 0.0
    return input_err, identity_err, dominance


@dataclass(frozen=True)
class DiagnosticsReport:
    """
    Consistency checks over one recompute.

    Attributes:
        grid_min / grid_max: Range of joint grid values.
        forward_min / forward_max: Range of the propagated distribution.
        forward_matches_grid_max: Whether max over z equals the grid maximum.
        marginal_x_input_error / marginal_y_input_error: Max absolute
            difference between the recovered marginal and the analytic input
            triangle at the grid points.
        marginal_x_identity_error / marginal_y_identity_error: Max absolute
            difference between the recovered marginal and
            copula(input, peak of the other axis on the grid).
        marginal_x_dominance / marginal_y_dominance: min(recovered - input);
            non-negative when the recovered marginal dominates the input.
    """

    grid_min: float
    grid_max: float
    forward_min: float
    forward_max: float
    forward_matches_grid_max: bool
    marginal_x_input_error: float
    marginal_y_input_error: float
    marginal_x_identity_error: float
    marginal_y_identity_error: float
    marginal_x_dominance: float
    marginal_y_dominance: float

    @staticmethod
    def from_result(result: RecomputeResult, *, tol: float = 1e-12) -> "DiagnosticsReport":
        """
        Build a report from a recompute, using the marginal params it was
        computed from.
        """
        grid = result.joint_grid
        vals = grid.values
        copula = get_copula(result.copula)
        params_x = result.params_x
        params_y = result.params_y

        _, fwd = result.forward.as_arrays()
        # An empty forward output means every z has possibility 0.
        fwd_min = float(np.min(fwd)) if fwd.size else 0.0
        fwd_max = float(np.max(fwd)) if fwd.size else 0.0
        grid_max = grid.max_value()

        peak_x = float(
            np.max(triangular_possibility_array(grid.x_values, params_x.left_base, params_x.peak, params_x.right_base))
        )
        peak_y = float(
            np.max(triangular_possibility_array(grid.y_values, params_y.left_base, params_y.peak, params_y.right_base))
        )
        x_in, x_id, x_dom = _marginal_errors(result.marginal_x, params_x, peak_y, copula)
        y_in, y_id, y_dom = _marginal_errors(result.marginal_y, params_y, peak_x, copula)

        return DiagnosticsReport(
            grid_min=float(np.min(vals)),
            grid_max=grid_max,
            forward_min=fwd_min,
            forward_max=fwd_max,
            forward_matches_grid_max=bool(abs(fwd_max - grid_max) <= float(tol)),
            marginal_x_input_error=x_in,
            marginal_y_input_error=y_in,
            marginal_x_identity_error=x_id,
            marginal_y_identity_error=y_id,
            marginal_x_dominance=x_dom,
            marginal_y_dominance=y_dom,
        )

    def issues(self, *, tol: float = 1e-9) -> List[str]:
        """
        Human-readable list of violated invariants (empty when all hold).
        """
        out: List[str] = []
        if self.grid_min < -tol or self.grid_max > 1.0 + tol:
            out.append(f"grid values outside [0, 1]: [{self.grid_min}, {self.grid_max}]")
        if self.forward_min < -tol or self.forward_max > 1.0 + tol:
            out.append(f"forward values outside [0, 1]: [{self.forward_min}, {self.forward_max}]")
        if not self.forward_matches_grid_max:
            out.append(f"forward max {self.forward_max} differs from grid max {self.grid_max}")
        if self.marginal_x_identity_error > tol:
            out.append(f"x marginal deviates from copula identity by {self.marginal_x_identity_error}")
        if self.marginal_y_identity_error > tol:
            out.append(f"y marginal deviates from copula identity by {self.marginal_y_identity_error}")
        return out

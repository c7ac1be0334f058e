"""
Possibility distribution engine.

Triangular possibility distributions, two-argument copulas, supremum
marginalization and max-convolution propagation through z = x + y, all on a
finite grid. Here "possibility" obeys Poss(A or B) = max(Poss(A), Poss(B));
nothing in this package is a probability measure.
"""

from poss.copula import CopulaSelection, copula_independence, copula_unknown, get_copula
from poss.diagnostics import DiagnosticsReport
from poss.engine import PossibilityEngine, RecomputeResult
from poss.exceptions import (
    DegenerateDistributionError,
    InvalidParameterError,
    PossibilityError,
    UnknownCopulaError,
)
from poss.forward import ForwardResult, forward_propagate
from poss.joint import JointGrid, build_joint_grid
from poss.marginal import supremum_marginal, supremum_marginal_x, supremum_marginal_y
from poss.triangular import sample_triangular, triangular_possibility, triangular_possibility_array
from poss.types import Contributor, ForwardPoint, GridCell, Sample, TriangularParams

__version__ = "0.1.0"

__all__ = [
    "Contributor",
    "CopulaSelection",
    "DegenerateDistributionError",
    "DiagnosticsReport",
    "ForwardPoint",
    "ForwardResult",
    "GridCell",
    "InvalidParameterError",
    "JointGrid",
    "PossibilityEngine",
    "PossibilityError",
    "RecomputeResult",
    "Sample",
    "TriangularParams",
    "UnknownCopulaError",
    "build_joint_grid",
    "copula_independence",
    "copula_unknown",
    "forward_propagate",
    "get_copula",
    "sample_triangular",
    "supremum_marginal",
    "supremum_marginal_x",
    "supremum_marginal_y",
    "triangular_possibility",
    "triangular_possibility_array",
]

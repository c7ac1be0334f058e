"""
Unit tests for joint grid construction and supremum marginalization.
"""

import numpy as np
import pytest

from poss.copula import CopulaSelection, copula_independence, copula_unknown
from poss.exceptions import InvalidParameterError, UnknownCopulaError
from poss.joint import JointGrid, build_joint_grid
from poss.marginal import supremum_marginal, supremum_marginal_x, supremum_marginal_y
from poss.triangular import triangular_possibility, triangular_possibility_array
from poss.types import GridCell, TriangularParams


def _mx() -> TriangularParams:
    return TriangularParams(2.3, 3.0, 3.7, (2, 4))


def _my() -> TriangularParams:
    return TriangularParams(3.4, 4.0, 4.6, (3, 5))


class TestBuildJointGrid:
    """Test suite for build_joint_grid."""

    def test_shape_and_axes(self) -> None:
        """Each axis spans its own marginal's domain."""
        grid = build_joint_grid(_mx(), _my(), "independence", 100)
        assert grid.shape == (100, 100)
        assert grid.x_domain == (2.0, 4.0)
        assert grid.y_domain == (3.0, 5.0)
        assert grid.copula is CopulaSelection.INDEPENDENCE

    def test_cell_values(self) -> None:
        """Each cell is the copula of the two marginal degrees."""
        mx, my = _mx(), _my()
        grid = build_joint_grid(mx, my, CopulaSelection.UNKNOWN, 25)
        for i, j in [(0, 0), (5, 7), (12, 12), (20, 3), (24, 24)]:
            cell = grid.cell(i, j)
            assert isinstance(cell, GridCell)
            px = triangular_possibility(cell.x, mx.left_base, mx.peak, mx.right_base)
            py = triangular_possibility(cell.y, my.left_base, my.peak, my.right_base)
            assert cell.value == pytest.approx(copula_unknown(px, py))

    def test_values_bounded(self) -> None:
        """Grid values lie in [0, 1]."""
        for copula in ("independence", "unknown"):
            grid = build_joint_grid(_mx(), _my(), copula, 60)
            assert float(np.min(grid.values)) >= 0.0
            assert float(np.max(grid.values)) <= 1.0

    def test_callable_copula(self) -> None:
        """A combinator callable can be passed directly."""
        grid = build_joint_grid(_mx(), _my(), copula_independence, 10)
        assert grid.copula is None
        assert grid.shape == (10, 10)

    def test_non_overlapping_domains(self) -> None:
        """Domains need not overlap."""
        far = TriangularParams(11.0, 12.0, 13.0, (10, 14))
        grid = build_joint_grid(_mx(), far, "unknown", 20)
        assert grid.y_domain == (10.0, 14.0)
        assert float(np.max(grid.values)) > 0.0

    def test_invalid_resolution(self) -> None:
        """Resolution must be an integer >= 2."""
        with pytest.raises(InvalidParameterError):
            build_joint_grid(_mx(), _my(), "independence", 1)
        with pytest.raises(InvalidParameterError):
            build_joint_grid(_mx(), _my(), "independence", 2.5)

    def test_unknown_copula(self) -> None:
        """Unrecognised copula tokens raise UnknownCopulaError."""
        with pytest.raises(UnknownCopulaError):
            build_joint_grid(_mx(), _my(), "frank", 10)

    def test_grid_is_read_only(self) -> None:
        """Grid arrays cannot be mutated after construction."""
        grid = build_joint_grid(_mx(), _my(), "independence", 10)
        with pytest.raises(ValueError):
            grid.values[0, 0] = 0.5
        with pytest.raises(ValueError):
            grid.x_values[0] = 0.0

    def test_shape_mismatch(self) -> None:
        """JointGrid validates array shapes."""
        with pytest.raises(ValueError, match="shape"):
            JointGrid(x_values=np.zeros(3), y_values=np.zeros(4), values=np.zeros((4, 3)))

    def test_cells_iteration(self) -> None:
        """cells() yields every cell with x outer and y inner."""
        grid = build_joint_grid(_mx(), _my(), "independence", 4)
        cells = list(grid.cells())
        assert len(cells) == 16
        assert cells[0].x == cells[3].x
        assert cells[1].y == grid.y_values[1]

    def test_singleton_marginal(self) -> None:
        """A singleton marginal never divides by zero."""
        single = TriangularParams(3.0, 3.0, 3.0, (2, 4))
        grid = build_joint_grid(single, _my(), "independence", 100)
        assert np.all(np.isfinite(grid.values))
        # 3.0 is not on the 100-point axis over [2, 4], so every cell is 0.
        assert float(np.max(grid.values)) == 0.0
        grid_odd = build_joint_grid(single, _my(), "independence", 101)
        assert float(np.max(grid_odd.values)) > 0.0


class TestSupremumMarginal:
    """Test suite for supremum marginalization."""

    def test_length_and_coordinates(self) -> None:
        """One sample per axis point, in axis order."""
        grid = build_joint_grid(_mx(), _my(), "independence", 50)
        mx = supremum_marginal_x(grid)
        my = supremum_marginal_y(grid)
        assert len(mx) == 50 and len(my) == 50
        assert [s.x for s in mx] == list(grid.x_values)
        assert [s.x for s in my] == list(grid.y_values)

    def test_matches_row_and_column_max(self) -> None:
        """Marginals are the row / column maxima of the grid."""
        grid = build_joint_grid(_mx(), _my(), "unknown", 30)
        mx = supremum_marginal(grid, "x")
        my = supremum_marginal(grid, "Y")
        np.testing.assert_array_equal([s.y for s in mx], grid.values.max(axis=1))
        np.testing.assert_array_equal([s.y for s in my], grid.values.max(axis=0))

    def test_unknown_axis(self) -> None:
        """Axis must be x or y."""
        grid = build_joint_grid(_mx(), _my(), "unknown", 5)
        with pytest.raises(ValueError, match="axis"):
            supremum_marginal(grid, "z")

    @pytest.mark.parametrize("copula", ["independence", "unknown"])
    def test_copula_identity(self, copula: str) -> None:
        """
        sup_y J(pi_x, pi_y) equals J(pi_x, max_j pi_y(y_j)) since J is monotone.
        """
        from poss.copula import get_copula

        mx, my = _mx(), _my()
        grid = build_joint_grid(mx, my, copula, 100)
        px = triangular_possibility_array(grid.x_values, mx.left_base, mx.peak, mx.right_base)
        py = triangular_possibility_array(grid.y_values, my.left_base, my.peak, my.right_base)
        expected = get_copula(copula)(px, float(np.max(py)))
        got = np.array([s.y for s in supremum_marginal_x(grid)])
        np.testing.assert_allclose(got, expected, rtol=0, atol=1e-12)

    def test_independence_consistency(self) -> None:
        """
        Under independence the recovered marginal keeps the input's support
        and peak location, and dominates the input pointwise.
        """
        mx, my = _mx(), _my()
        n = 100
        grid = build_joint_grid(mx, my, "independence", n)
        for params, samples in ((mx, supremum_marginal_x(grid)), (my, supremum_marginal_y(grid))):
            coords = np.array([s.x for s in samples])
            got = np.array([s.y for s in samples])
            expected = triangular_possibility_array(coords, params.left_base, params.peak, params.right_base)
            np.testing.assert_array_equal(got == 0.0, expected == 0.0)
            assert np.all(got >= expected - 1e-12)
            step = (params.domain[1] - params.domain[0]) / (n - 1)
            assert abs(coords[int(np.argmax(got))] - params.peak) <= step

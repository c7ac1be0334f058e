import numpy as np
import pytest

from poss.copula import (
    CopulaSelection,
    copula_independence,
    copula_unknown,
    get_copula,
    parse_copula,
)
from poss.exceptions import UnknownCopulaError


def test_boundary_values() -> None:
    assert copula_independence(1.0, 1.0) == 1.0
    assert copula_independence(0.0, 0.0) == 0.0
    assert copula_unknown(1.0, 1.0) == 1.0
    assert copula_unknown(0.0, 0.0) == 0.0


def test_known_values() -> None:
    assert copula_independence(0.5, 0.8) == pytest.approx(0.75)
    assert copula_unknown(0.3, 0.9) == pytest.approx(0.6)
    assert copula_unknown(0.7, 0.9) == 1.0


def test_monotone_in_each_argument() -> None:
    grid = np.linspace(0.0, 1.0, 21)
    for copula in (copula_independence, copula_unknown):
        vals = copula(grid[:, None], grid[None, :])
        assert np.all(np.diff(vals, axis=0) >= 0)
        assert np.all(np.diff(vals, axis=1) >= 0)
        assert np.all((vals >= 0) & (vals <= 1))


def test_unknown_dominates_independence() -> None:
    grid = np.linspace(0.0, 1.0, 41)
    a = copula_independence(grid[:, None], grid[None, :])
    b = copula_unknown(grid[:, None], grid[None, :])
    assert np.all(b >= a)


def test_scalar_inputs_return_float() -> None:
    assert isinstance(copula_independence(0.2, 0.4), float)
    assert isinstance(copula_unknown(0.2, 0.4), float)


def test_selection_parsing() -> None:
    assert parse_copula("independence") is CopulaSelection.INDEPENDENCE
    assert parse_copula(" Unknown ") is CopulaSelection.UNKNOWN
    assert parse_copula(CopulaSelection.UNKNOWN) is CopulaSelection.UNKNOWN
    assert get_copula("independence") is copula_independence
    assert get_copula(CopulaSelection.UNKNOWN) is copula_unknown


def test_unknown_token_rejected() -> None:
    with pytest.raises(UnknownCopulaError, match="Unknown copula"):
        parse_copula("gumbel")
    with pytest.raises(ValueError):
        get_copula("product")

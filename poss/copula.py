"""
Copulas for two possibility distributions.

A copula here is a binary rule that merges two marginal possibility degrees
into a joint degree. Both rules accept scalars or numpy arrays and are
applied elementwise.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

from poss.exceptions import UnknownCopulaError

Degree = Union[float, np.ndarray]
Copula = Callable[[Degree, Degree], Degree]


class CopulaSelection(str, Enum):
    INDEPENDENCE = "independence"
    UNKNOWN = "unknown"


def copula_independence(pi1: Degree, pi2: Degree) -> Degree:
    """
    Independence copula for two arguments.

    J(pi1, pi2) = 1 - (1 - min(pi1, pi2))**2
    """
    m = np.minimum(pi1, pi2)
    out = 1.0 - (1.0 - m) ** 2
    if np.ndim(out) == 0:
        return float(out)
    return out


def copula_unknown(pi1: Degree, pi2: Degree) -> Degree:
    """
    Unknown-dependence copula for two arguments.

    J(pi1, pi2) = min(1, 2 * min(pi1, pi2))
    """
    out = np.minimum(1.0, 2.0 * np.minimum(pi1, pi2))
    if np.ndim(out) == 0:
        return float(out)
    return out


COPULAS: Dict[CopulaSelection, Copula] = {
    CopulaSelection.INDEPENDENCE: copula_independence,
    CopulaSelection.UNKNOWN: copula_unknown,
}


def parse_copula(selection: Union[str, CopulaSelection]) -> CopulaSelection:
    """
    Resolve a selection token.

    Raises:
        UnknownCopulaError: If the token is not 'independence' or 'unknown'.
    """
    if isinstance(selection, CopulaSelection):
        return selection
    token = str(selection).strip().lower()
    try:
        return CopulaSelection(token)
    except ValueError as exc:
        valid = ", ".join(s.value for s in CopulaSelection)
        raise UnknownCopulaError(f"Unknown copula: {selection!r} (expected one of: {valid})") from exc


def get_copula(selection: Union[str, CopulaSelection]) -> Copula:
    return COPULAS[parse_copula(selection)]

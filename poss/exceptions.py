"""
Error types raised by the possibility engine.

All errors derive from ValueError: they signal rejected inputs, and the engine
keeps its last valid state whenever one is raised.
"""

from __future__ import annotations


class PossibilityError(ValueError):
    """Base class for possibility-engine input errors."""


class InvalidParameterError(PossibilityError):
    """Control points violate the ordering or domain invariants."""


class UnknownCopulaError(PossibilityError):
    """A copula selection token is not recognised."""


class DegenerateDistributionError(PossibilityError):
    """
    A singleton triangle was rejected.

    The engine itself evaluates singleton triangles (possibility 1 at the peak
    and 0 elsewhere); this error is only raised by callers that opt into
    strict checking via `TriangularParams.require_proper()`.
    """

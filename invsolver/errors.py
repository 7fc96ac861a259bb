"""Exception taxonomy for the solver core."""
from __future__ import annotations

__all__ = [
    "SolverError",
    "PreconditionError",
    "NotAnalyzedError",
    "SideCountError",
    "TooManyVariablesError",
    "UnsupportedShapeError",
    "NonConvergenceError",
    "DepthLimitError",
    "EquationParseError",
]


class SolverError(Exception):
    """Base class for every error raised by :mod:`invsolver`."""


class PreconditionError(SolverError, ValueError):
    """A caller handed the core a tree or equation it cannot operate on."""


class NotAnalyzedError(PreconditionError):
    """An element without an analysis cache reached a cache-consuming step."""


class SideCountError(PreconditionError):
    """A two-sided operation was invoked on an equation with another side count."""


class TooManyVariablesError(PreconditionError):
    """A side (or product factor) carries more than one distinct variable."""


class UnsupportedShapeError(SolverError):
    """The inverse engine met a shape it knows about but cannot invert."""


class NonConvergenceError(SolverError, RuntimeError):
    """Normalization did not reach a fixpoint within the iteration cap."""


class DepthLimitError(SolverError, RuntimeError):
    """The solve-graph recursion exceeded the configured depth."""


class EquationParseError(SolverError, ValueError):
    """Equation text could not be turned into a tree."""

from __future__ import annotations

"""Named equation strategies used by the solve-graph driver.

A strategy edits an equation in place and returns the constraint strings the
edit relies on.  Normalization strategies never introduce constraints.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import DEFAULT_CONFIG, SolverConfig
from .constants import SOLVE_STRATEGIES
from .inverse import apply_inverse
from .model import Equation
from .normalize import flatten_equation, simplify_equation


class Strategy:
    """Protocol for equation strategies."""

    name: str

    def applicable(self, equation: Equation) -> bool:  # pragma: no cover - interface
        return True

    def apply(
        self,
        equation: Equation,
        *,
        target: Optional[str] = None,
        config: SolverConfig = DEFAULT_CONFIG,
    ) -> List[str]:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class FlattenStrategy(Strategy):
    """Remove redundant nesting via :func:`flatten_equation`."""

    name: str = "flatten"

    def apply(self, equation: Equation, *, target: Optional[str] = None, config: SolverConfig = DEFAULT_CONFIG) -> List[str]:
        flatten_equation(equation)
        return []


@dataclass
class SimplifyStrategy(Strategy):
    """Fold numbers and drop neutral elements; sides must be analyzed."""

    name: str = "simplify"

    def apply(self, equation: Equation, *, target: Optional[str] = None, config: SolverConfig = DEFAULT_CONFIG) -> List[str]:
        simplify_equation(equation)
        return []


@dataclass
class ApplyInverseStrategy(Strategy):
    """Peel one operation off the variable side with :func:`apply_inverse`."""

    name: str = "apply_inverse"

    def applicable(self, equation: Equation) -> bool:
        # needs analysis; an equation without variables has nothing to isolate
        return any(side.cache is not None and side.cache.variables for side in equation.sides)

    def apply(self, equation: Equation, *, target: Optional[str] = None, config: SolverConfig = DEFAULT_CONFIG) -> List[str]:
        return apply_inverse(
            equation,
            target=target,
            unknown_inverse_format=config.unknown_inverse_format,
        )


STRATEGIES: Dict[str, Strategy] = {
    s.name: s for s in (FlattenStrategy(), SimplifyStrategy(), ApplyInverseStrategy())
}


def get_strategy(name: str) -> Strategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"unknown strategy {name!r}; choose from {sorted(STRATEGIES)}") from None


DEFAULT_STRATEGIES: List[Strategy] = [STRATEGIES[name] for name in SOLVE_STRATEGIES]

__all__ = [
    "Strategy",
    "FlattenStrategy",
    "SimplifyStrategy",
    "ApplyInverseStrategy",
    "STRATEGIES",
    "DEFAULT_STRATEGIES",
    "get_strategy",
]

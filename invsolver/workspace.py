"""Handle-based store for equations and their solve results.

A :class:`Workspace` owns :class:`Context` objects keyed by UUID; a context
owns its equations (also UUID-keyed) together with the most recent
:class:`~invsolver.solver.SolveResult` for each.  Callers hold UUIDs, never
references into another owner's tree.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .config import DEFAULT_CONFIG, SolverConfig
from .model import Equation
from .operators import Strategy
from .solver import SolveResult, solve_equation
from .sym_utils import parse_equation

__all__ = ["Context", "Workspace"]

logger = logging.getLogger("invsolver.workspace")


@dataclass
class Context:
    name: str = ""
    equations: Dict[uuid.UUID, Equation] = field(default_factory=dict)
    results: Dict[uuid.UUID, SolveResult] = field(default_factory=dict)

    def add_equation(self, equation: Union[Equation, str]) -> uuid.UUID:
        if isinstance(equation, str):
            equation = parse_equation(equation)
        key = uuid.uuid4()
        self.equations[key] = equation
        return key

    def get_equation(self, key: uuid.UUID) -> Equation:
        try:
            return self.equations[key]
        except KeyError:
            raise KeyError(f"no equation {key} in context {self.name!r}") from None

    def remove_equation(self, key: uuid.UUID) -> Equation:
        self.results.pop(key, None)
        return self.equations.pop(key)


class Workspace:
    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        strategies: Optional[Sequence[Strategy]] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.strategies = list(strategies) if strategies is not None else None
        self.contexts: Dict[uuid.UUID, Context] = {}

    def add_context(self, context: Optional[Context] = None) -> uuid.UUID:
        key = uuid.uuid4()
        self.contexts[key] = context if context is not None else Context()
        return key

    def get_context(self, key: uuid.UUID) -> Context:
        try:
            return self.contexts[key]
        except KeyError:
            raise KeyError(f"no context {key}") from None

    def remove_context(self, key: uuid.UUID) -> Context:
        return self.contexts.pop(key)

    def add_equation(self, context_id: uuid.UUID, equation: Union[Equation, str]) -> uuid.UUID:
        return self.get_context(context_id).add_equation(equation)

    def get_equation(self, context_id: uuid.UUID, equation_id: uuid.UUID) -> Equation:
        return self.get_context(context_id).get_equation(equation_id)

    def solve(self, context_id: uuid.UUID, *, target: Optional[str] = None) -> Dict[uuid.UUID, SolveResult]:
        """Solve every equation in the context, keeping each result on the context."""
        context = self.get_context(context_id)
        solved: Dict[uuid.UUID, SolveResult] = {}
        for key, equation in context.equations.items():
            result = solve_equation(equation, strategies=self.strategies, config=self.config, target=target)
            context.results[key] = result
            solved[key] = result
            logger.info("solved %s: %d leaf/leaves", key, len(result.leaves))
        return solved

    def equation_ids(self, context_id: uuid.UUID) -> List[uuid.UUID]:
        return list(self.get_context(context_id).equations)

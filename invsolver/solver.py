from __future__ import annotations

"""Solve-graph driver.

Starting from the root equation, every node is normalized and each solving
strategy is tried on a copy.  The result becomes a child node joined by the
constraints the strategy emitted.  A child that is structurally the same as
its parent is terminal (a leaf); any other child is expanded recursively.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, SolverConfig
from .constants import NORMALIZE_STRATEGIES
from .errors import DepthLimitError, TooManyVariablesError, UnsupportedShapeError
from .graph import EquationGraph
from .matcher import IsSameNames, MatchMode, is_same
from .model import Equation
from .normalize import normalize
from .operators import DEFAULT_STRATEGIES, STRATEGIES, Strategy
from .printer import equation_to_infix
from .traversal import analyze_equation

logger = logging.getLogger("invsolver.solver")


@dataclass
class SolveResult:
    graph: EquationGraph
    root: int
    leaves: List[int] = field(default_factory=list)

    def solution_path(self, leaf: int) -> List[Tuple[int, List[str]]]:
        """Nodes from root to ``leaf`` with the constraints gathered so far."""
        path = self.graph.path(self.root, leaf)
        gathered: List[str] = []
        out: List[Tuple[int, List[str]]] = [(path[0], [])]
        for parent, child in zip(path, path[1:]):
            gathered = gathered + [c for c in self.graph.constraints(parent, child) if c not in gathered]
            out.append((child, list(gathered)))
        return out

    def constraints_for(self, leaf: int) -> List[str]:
        return self.solution_path(leaf)[-1][1]

    def solutions(self) -> List[Tuple[Equation, List[str]]]:
        return [(self.graph[leaf], self.constraints_for(leaf)) for leaf in self.leaves]

    def to_dict(self) -> Dict[str, Any]:
        return {"root": self.root, "leaves": list(self.leaves), "graph": self.graph.to_dict()}


def _normalize(equation: Equation, config: SolverConfig) -> int:
    passes = [
        lambda eq, strategy=STRATEGIES[name]: strategy.apply(eq, config=config)
        for name in NORMALIZE_STRATEGIES
    ]
    return normalize(
        equation,
        passes=passes,
        max_iterations=config.max_normalize_iterations,
        mode=MatchMode(config.match_mode),
    )


def process_graph_node(
    graph: EquationGraph,
    index: int,
    *,
    strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    config: SolverConfig = DEFAULT_CONFIG,
    target: Optional[str] = None,
    depth: int = 0,
) -> List[int]:
    """Expand node ``index`` and return the indices of the leaves below it."""
    if depth > config.max_depth:
        raise DepthLimitError(f"solve graph deeper than {config.max_depth} levels")
    mode = MatchMode(config.match_mode)
    equation = graph[index].copy()
    marked: List[int] = []
    leaves: List[int] = []

    for strategy in strategies:
        rounds = _normalize(equation, config)
        analyze_equation(equation)
        logger.debug("node %d normalized in %d round(s): %s", index, rounds, equation_to_infix(equation))
        if not strategy.applicable(equation):
            logger.debug("strategy %s not applicable at node %d", strategy.name, index)
            continue

        candidate = equation.copy()
        try:
            constraints = strategy.apply(candidate, target=target, config=config)
        except (TooManyVariablesError, UnsupportedShapeError) as exc:
            if config.on_unsupported == "raise":
                raise
            logger.warning("strategy %s skipped at node %d: %s", strategy.name, index, exc)
            candidate = equation.copy()
            constraints = []

        child = graph.add_path(candidate, constraints, index)
        names = IsSameNames()
        if is_same(candidate, equation, names, mode) and names.check():
            leaves.append(child)
            continue
        logger.info(
            "node %d -> %d via %s: %s%s",
            index,
            child,
            strategy.name,
            equation_to_infix(candidate),
            f" [{', '.join(constraints)}]" if constraints else "",
        )
        marked.append(child)

    if not leaves and not marked:
        # nothing applied at all; the node stands as its own answer
        leaves.append(index)
    for child in marked:
        leaves.extend(
            process_graph_node(
                graph, child, strategies=strategies, config=config, target=target, depth=depth + 1
            )
        )
    graph[index] = equation
    return leaves


def solve_equation(
    equation: Equation,
    *,
    strategies: Optional[Sequence[Strategy]] = None,
    config: Optional[SolverConfig] = None,
    target: Optional[str] = None,
) -> SolveResult:
    config = config or DEFAULT_CONFIG
    strategies = list(DEFAULT_STRATEGIES if strategies is None else strategies)
    graph, root = EquationGraph.new(equation.copy())
    leaves = process_graph_node(graph, root, strategies=strategies, config=config, target=target)
    logger.debug("solve graph:\n%s", graph.to_dot())
    return SolveResult(graph, root, leaves)


__all__ = ["SolveResult", "process_graph_node", "solve_equation"]

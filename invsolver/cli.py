"""Command-line interface wrapper around :pyfunc:`invsolver.solve_equation`."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import constants as C
from .config import SolverConfig
from .errors import SolverError
from .model import Equation, Variable
from .printer import equation_to_infix, equation_to_rpn
from .solver import SolveResult, solve_equation
from .sym_utils import isolated_value, parse_equation, verify_solution

__all__ = ["main"]


def _parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Isolate a variable in an equation by inverse operations")
    parser.add_argument("equation", nargs="?", help="Equation text, e.g. '2*x + 3 = 7'")
    parser.add_argument("--demo", action="store_true", help=f"Solve the demo equation {C._DEMO_EQUATION!r}")
    parser.add_argument("--target", help="Variable to isolate (default: first side holding a variable)")
    parser.add_argument("--json", dest="json_path", help="Write the solve graph as JSON to this file")
    parser.add_argument("--png", dest="png_path", help="Render the solve graph to this PNG file")
    parser.add_argument("--rpn", action="store_true", help="Print results in reverse Polish notation")
    parser.add_argument("--verify", action="store_true", help="Check each isolated result with SymPy")
    parser.add_argument(
        "--log-level",
        choices=["WARNING", "INFO", "DEBUG"],
        default="WARNING",
        help="Logging level for invsolver",
    )
    parser.add_argument("--max-depth", type=int, help="Maximum solve-graph depth")
    parser.add_argument("--max-iterations", type=int, help="Maximum normalization rounds per node")
    parser.add_argument("--match-mode", choices=["bijective", "any_pair"], help="Multiset matching mode")
    parser.add_argument("--on-unsupported", choices=["raise", "skip"], help="Policy for unsupported shapes")
    return parser.parse_args(argv)


def _setup_logging(level_name: str) -> None:
    level = getattr(logging, level_name)
    pkg_logger = logging.getLogger("invsolver")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
    handler.setLevel(level)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    pkg_logger.setLevel(level)


def _format_leaf(equation: Equation, constraints: list[str], rpn: bool) -> str:
    text = equation_to_rpn(equation) if rpn else equation_to_infix(equation)
    if constraints:
        text += "    where " + ", ".join(constraints)
    return text


def _isolated_name(equation: Equation) -> str | None:
    for side in equation.sides:
        if isinstance(side.body, Variable) and isolated_value(equation, side.body.name) is not None:
            return side.body.name
    return None


def _print_result(original: Equation, result: SolveResult, ns: argparse.Namespace) -> None:
    for leaf_equation, constraints in result.solutions():
        line = _format_leaf(leaf_equation, constraints, ns.rpn)
        if ns.verify:
            name = ns.target or _isolated_name(leaf_equation)
            ok = name is not None and verify_solution(original, leaf_equation, name)
            line += "    [verified]" if ok else "    [unverified]"
        print(line)


def main(argv: list[str] | None = None) -> None:
    ns = _parse_cli(argv)
    _setup_logging(ns.log_level)

    if ns.equation is not None and ns.demo:
        sys.exit("Error: an equation cannot be combined with --demo")
    text = C._DEMO_EQUATION if ns.demo or not (ns.equation or "").strip() else ns.equation

    try:
        config = SolverConfig.from_env().with_overrides(
            max_depth=ns.max_depth,
            max_normalize_iterations=ns.max_iterations,
            match_mode=ns.match_mode,
            on_unsupported=ns.on_unsupported,
        )
    except ValueError as exc:
        sys.exit(f"Error: {exc}")

    try:
        equation = parse_equation(text)
        result = solve_equation(equation, config=config, target=ns.target)
    except SolverError as exc:
        sys.exit(f"Error: {exc}")

    _print_result(equation, result, ns)

    if ns.json_path:
        Path(ns.json_path).write_text(result.graph.to_json(), "utf-8")
    if ns.png_path:
        result.graph.render(ns.png_path, root=result.root)


if __name__ == "__main__":
    main()

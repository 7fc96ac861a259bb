from __future__ import annotations

"""invsolver: isolate a variable in an equation by undoing operations.

Equations are parsed into signed expression trees, normalized to a canonical
shape, and then rewritten one inverse operation at a time.  Every rewrite is a
node in an undirected solve graph whose edges carry the side conditions the
step relies on (``"2 != 0"`` after dividing by 2).  The leaves of the graph are
the equations no strategy can simplify further.
"""

from .model import (  # noqa: F401
    Sign,
    Number,
    Variable,
    Power,
    Modulo,
    Factorial,
    Function,
    Product,
    Expression,
    Element,
    Equation,
    AnalysisCache,
    simple_add,
    simple_sub,
    simple_mul,
    simple_div,
    simple_neg,
)
from .traversal import analyze, walk, walk_mut, transform  # noqa: F401
from .normalize import flatten, simplify, normalize  # noqa: F401
from .matcher import IsSameNames, MatchMode, is_same  # noqa: F401
from .inverse import apply_inverse, get_element_inverse, transform_equation  # noqa: F401
from .operators import Strategy, STRATEGIES, DEFAULT_STRATEGIES  # noqa: F401
from .graph import EquationGraph  # noqa: F401
from .solver import SolveResult, process_graph_node, solve_equation  # noqa: F401
from .workspace import Context, Workspace  # noqa: F401
from .config import SolverConfig, DEFAULT_CONFIG  # noqa: F401
from .sym_utils import parse_equation, verify_solution  # noqa: F401
from .printer import to_infix, equation_to_infix  # noqa: F401
from .errors import (  # noqa: F401
    SolverError,
    PreconditionError,
    NotAnalyzedError,
    SideCountError,
    TooManyVariablesError,
    UnsupportedShapeError,
    NonConvergenceError,
    DepthLimitError,
    EquationParseError,
)

__all__ = [
    "Sign",
    "Number",
    "Variable",
    "Power",
    "Modulo",
    "Factorial",
    "Function",
    "Product",
    "Expression",
    "Element",
    "Equation",
    "AnalysisCache",
    "simple_add",
    "simple_sub",
    "simple_mul",
    "simple_div",
    "simple_neg",
    "analyze",
    "walk",
    "walk_mut",
    "transform",
    "flatten",
    "simplify",
    "normalize",
    "IsSameNames",
    "MatchMode",
    "is_same",
    "apply_inverse",
    "get_element_inverse",
    "transform_equation",
    "Strategy",
    "STRATEGIES",
    "DEFAULT_STRATEGIES",
    "EquationGraph",
    "SolveResult",
    "process_graph_node",
    "solve_equation",
    "Context",
    "Workspace",
    "SolverConfig",
    "DEFAULT_CONFIG",
    "parse_equation",
    "verify_solution",
    "to_infix",
    "equation_to_infix",
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

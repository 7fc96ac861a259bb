"""Package-wide constants and defaults."""

from typing import Any

# Forward function -> (inverse function, constraints emitted when peeling it off)
INVERSE_FUNCTIONS: dict[str, tuple[str, list[str]]] = {
    "sin": ("arcsin", []),
    "cos": ("arccos", []),
    "tan": ("arctan", []),
    "cot": ("arccot", []),
}

# SymPy spells the inverse trig functions differently
SYMPY_FUNCTION_NAMES: dict[str, str] = {
    "asin": "arcsin",
    "acos": "arccos",
    "atan": "arctan",
    "acot": "arccot",
}

NORMALIZE_STRATEGIES: tuple[str, ...] = ("flatten", "simplify")
SOLVE_STRATEGIES: tuple[str, ...] = ("apply_inverse",)

DEFAULTS: dict[str, Any] = {
    "max_normalize_iterations": 64,
    "max_depth": 64,
    "match_mode": "bijective",
    "on_unsupported": "raise",
    "unknown_inverse_format": "{name}",
}

ENV_PREFIX = "INVSOLVER_"

_DEMO_EQUATION = "2*x + 3 = 7"

__all__ = [
    "INVERSE_FUNCTIONS",
    "SYMPY_FUNCTION_NAMES",
    "NORMALIZE_STRATEGIES",
    "SOLVE_STRATEGIES",
    "DEFAULTS",
    "ENV_PREFIX",
    "_DEMO_EQUATION",
]

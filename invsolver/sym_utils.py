from __future__ import annotations

"""SymPy bridge: equation text to trees, trees to SymPy, solution checks.

Parsing keeps SymPy from evaluating anything (``evaluate=False``) so the tree
mirrors what was typed; the normalizer does the folding.
"""

import logging
import re
import tokenize
from typing import Any, Dict, List, Optional

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

from .constants import SYMPY_FUNCTION_NAMES
from .errors import EquationParseError
from .model import (
    Element,
    Equation,
    Expression,
    Factorial,
    Function,
    Modulo,
    Number,
    Power,
    Product,
    Sign,
    Variable,
    negate_product,
)

logger = logging.getLogger("invsolver.sym_utils")

_TRANSFORMATIONS = (*standard_transformations, implicit_multiplication, convert_xor)
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_TO_SYMPY_FUNCTIONS: Dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "cot": sp.cot,
    "arcsin": sp.asin,
    "arccos": sp.acos,
    "arctan": sp.atan,
    "arccot": sp.acot,
    "exp": sp.exp,
    "log": sp.log,
    "sqrt": sp.sqrt,
}


def _symbol_table(text: str) -> Dict[str, Any]:
    """Bind every bare identifier to a plain Symbol so ``E``/``I``/``pi`` stay names."""
    table: Dict[str, Any] = {}
    for match in _IDENTIFIER.finditer(text):
        rest = text[match.end():].lstrip()
        if not rest.startswith("("):
            table[match.group(0)] = sp.Symbol(match.group(0))
    return table


def parse_side(text: str) -> Element:
    if not text.strip():
        raise EquationParseError("empty side")
    try:
        expr = parse_expr(
            text,
            local_dict=_symbol_table(text),
            transformations=_TRANSFORMATIONS,
            evaluate=False,
        )
    except (SyntaxError, TypeError, ValueError, tokenize.TokenError) as exc:
        raise EquationParseError(f"cannot parse {text!r}: {exc}") from exc
    return from_sympy(expr)


def parse_equation(text: str) -> Equation:
    """Parse ``"lhs = rhs"`` (two or more ``=``-separated sides)."""
    parts = text.split("=")
    if len(parts) < 2:
        raise EquationParseError(f"equation must contain '=': {text!r}")
    return Equation([parse_side(part) for part in parts])


def _negative_power(expr: sp.Basic) -> bool:
    return bool(expr.is_Pow and expr.exp.is_Rational and expr.exp.is_negative)


def _reciprocal(expr: sp.Pow) -> sp.Basic:
    if expr.exp == -1:
        return expr.base
    return sp.Pow(expr.base, -expr.exp, evaluate=False)


def _as_product(term: sp.Basic) -> Product:
    factors = term.args if term.is_Mul else (term,)
    product = Product()
    negative = False
    for factor in factors:
        if factor == sp.S.NegativeOne:
            negative = not negative
        elif _negative_power(factor):
            product.denominator.append(from_sympy(_reciprocal(factor)))
        else:
            product.numerator.append(from_sympy(factor))
    if negative:
        negate_product(product)
    return product


def from_sympy(expr: Any) -> Element:
    """Convert an unevaluated SymPy expression into an :class:`Element`."""
    expr = sp.sympify(expr, evaluate=False)
    if expr.is_Rational:
        value = sp.Rational(expr)
        sign = Sign.NEGATIVE if value < 0 else Sign.POSITIVE
        return Element(sign, Number(abs(value)))
    if expr.is_Float:
        value = sp.Rational(str(expr))
        sign = Sign.NEGATIVE if value < 0 else Sign.POSITIVE
        return Element(sign, Number(abs(value)))
    if expr.is_Symbol:
        return Element(Sign.POSITIVE, Variable(expr.name))
    if expr.is_Add:
        return Element(Sign.POSITIVE, Expression([_as_product(arg) for arg in expr.args]))
    if expr.is_Mul:
        return Element(Sign.POSITIVE, Expression([_as_product(expr)]))
    if expr.is_Pow:
        if _negative_power(expr):
            return Element(Sign.POSITIVE, Expression([Product([], [from_sympy(_reciprocal(expr))])]))
        return Element(Sign.POSITIVE, Power(from_sympy(expr.base), from_sympy(expr.exp)))
    if isinstance(expr, sp.Mod):
        return Element(Sign.POSITIVE, Modulo(from_sympy(expr.args[0]), from_sympy(expr.args[1])))
    if isinstance(expr, sp.factorial):
        return Element(Sign.POSITIVE, Factorial(from_sympy(expr.args[0])))
    if isinstance(expr, sp.Function):
        name = expr.func.__name__
        name = SYMPY_FUNCTION_NAMES.get(name, name)
        return Element(Sign.POSITIVE, Function(name, [from_sympy(a) for a in expr.args]))
    raise EquationParseError(f"unsupported construct {sp.srepr(expr)}")


def to_sympy(element: Element) -> sp.Expr:
    body = element.body
    if isinstance(body, Number):
        value: sp.Expr = sp.Rational(body.value)
    elif isinstance(body, Variable):
        value = sp.Symbol(body.name)
    elif isinstance(body, Power):
        value = sp.Pow(to_sympy(body.base), to_sympy(body.power))
    elif isinstance(body, Modulo):
        value = sp.Mod(to_sympy(body.lhs), to_sympy(body.rhs))
    elif isinstance(body, Factorial):
        value = sp.factorial(to_sympy(body.child))
    elif isinstance(body, Function):
        func = _TO_SYMPY_FUNCTIONS.get(body.name) or sp.Function(body.name)
        value = func(*[to_sympy(a) for a in body.arguments])
    else:
        terms: List[sp.Expr] = []
        for product in body.products:
            numerator = sp.Mul(*[to_sympy(f) for f in product.numerator])
            denominator = sp.Mul(*[to_sympy(f) for f in product.denominator])
            terms.append(numerator / denominator)
        value = sp.Add(*terms)
    return -value if element.sign is Sign.NEGATIVE else value


def isolated_value(equation: Equation, variable: str) -> Optional[Element]:
    """The side opposite a bare ``variable`` in a two-sided equation, if any."""
    if len(equation.sides) != 2:
        return None
    for index, side in enumerate(equation.sides):
        if side.sign is Sign.POSITIVE and isinstance(side.body, Variable) and side.body.name == variable:
            return equation.sides[1 - index]
    return None


def verify_solution(original: Equation, solved: Equation, variable: str, *, samples: int = 5) -> bool:
    """Substitute the solved value into ``original`` and check both sides agree.

    Falls back to a numeric spot check at random points for the remaining free
    symbols when symbolic simplification is inconclusive.
    """
    value = isolated_value(solved, variable)
    if value is None or len(original.sides) != 2:
        return False
    symbol = sp.Symbol(variable)
    replacement = to_sympy(value)
    lhs, rhs = (to_sympy(side).subs(symbol, replacement) for side in original.sides)
    difference = sp.simplify(lhs - rhs)
    if difference == 0:
        return True
    if difference.atoms(AppliedUndef):
        logger.debug("cannot verify through undefined functions: %s", difference)
        return False
    free = sorted(difference.free_symbols, key=lambda s: s.name)
    evaluate = sp.lambdify(free, difference, "numpy")
    rng = np.random.default_rng(0)
    points = rng.uniform(0.1, 0.9, size=(samples, len(free)))
    for point in points:
        result = complex(evaluate(*point))
        if not np.isclose(result, 0.0, atol=1e-9):
            return False
    return True


__all__ = [
    "parse_side",
    "parse_equation",
    "from_sympy",
    "to_sympy",
    "isolated_value",
    "verify_solution",
]

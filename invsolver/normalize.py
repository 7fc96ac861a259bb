from __future__ import annotations

"""Structural normalization: flattening, rationalization and simplification.

``flatten`` removes nesting that carries no meaning (a sum inside a single
factor, a single-factor sum).  ``simplify`` folds numeric coefficients, cancels
common factors, combines like terms and drops neutral elements.  ``normalize``
alternates the two until the matcher sees no further change.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import sympy as sp

from .constants import DEFAULTS
from .errors import NonConvergenceError
from .matcher import IsSameNames, MatchMode, is_same
from .model import (
    Element,
    Equation,
    Expression,
    Number,
    Product,
    Sign,
    negate_product,
    number,
    sort_key,
)
from .traversal import analyze, analyze_equation, require_cache, transform, walk_mut

logger = logging.getLogger("invsolver.normalize")

Pass = Callable[[Equation], object]


# ---------------------------------------------------------------------------
# flatten
# ---------------------------------------------------------------------------


def _splice_single_product(factor: Element, into_numerator: bool, numerator: List[Element], denominator: List[Element]) -> None:
    inner = factor.body.products[0]  # type: ignore[union-attr]
    if factor.sign is Sign.NEGATIVE:
        negate_product(inner)
    if into_numerator:
        numerator.extend(inner.numerator)
        denominator.extend(inner.denominator)
    else:
        numerator.extend(inner.denominator)
        denominator.extend(inner.numerator)


def _flatten_product(product: Product) -> Product:
    numerator: List[Element] = []
    denominator: List[Element] = []
    for into_numerator, side in ((True, product.numerator), (False, product.denominator)):
        for factor in side:
            body = factor.body
            if isinstance(body, Expression) and len(body.products) == 1:
                _splice_single_product(factor, into_numerator, numerator, denominator)
            elif into_numerator:
                numerator.append(factor)
            else:
                denominator.append(factor)
    return Product(numerator, denominator)


def _flatten_one(element: Element) -> Element:
    body = element.body
    if not isinstance(body, Expression):
        return element
    products: List[Product] = []
    for product in body.products:
        product = _flatten_product(product)
        if (
            len(product.numerator) == 1
            and not product.denominator
            and isinstance(product.numerator[0].body, Expression)
        ):
            inner = product.numerator[0]
            for inner_product in inner.body.products:  # type: ignore[union-attr]
                if inner.sign is Sign.NEGATIVE:
                    negate_product(inner_product)
                products.append(inner_product)
        else:
            products.append(product)

    if len(products) == 1 and len(products[0].numerator) == 1 and not products[0].denominator:
        only = products[0].numerator[0]
        return Element(only.sign * element.sign, only.body)
    return Element(element.sign, Expression(products))


def flatten(element: Element) -> Element:
    """Return a flattened copy of ``element`` (caches are dropped)."""
    return transform(element, _flatten_one, top_down=False)


def flatten_equation(equation: Equation) -> None:
    equation.sides = [flatten(side) for side in equation.sides]


# ---------------------------------------------------------------------------
# rationalize / combine like terms
# ---------------------------------------------------------------------------


def _decompose(product: Product) -> Tuple[sp.Rational, List[Element], List[Element]]:
    """Split ``product`` into a signed coefficient and unsigned non-number factors."""
    sign = Sign.POSITIVE
    coefficient = sp.Integer(1)
    numerator: List[Element] = []
    denominator: List[Element] = []
    for in_numerator, side in ((True, product.numerator), (False, product.denominator)):
        for factor in side:
            sign = sign * factor.sign
            body = factor.body
            if isinstance(body, Number) and (in_numerator or body.value != 0):
                value = body.value
                if value < 0:
                    sign = sign * Sign.NEGATIVE
                    value = -value
                coefficient = coefficient * value if in_numerator else coefficient / value
                continue
            stripped = factor.copy()
            stripped.sign = Sign.POSITIVE
            (numerator if in_numerator else denominator).append(stripped)
    if sign is Sign.NEGATIVE:
        coefficient = -coefficient
    return coefficient, numerator, denominator


def _compose(coefficient: sp.Rational, numerator: List[Element], denominator: List[Element]) -> Product:
    if coefficient == 0:
        return Product([number(0)], [])
    magnitude = abs(coefficient)
    p, q = int(magnitude.p), int(magnitude.q)
    head = [number(p)] if p != 1 or not numerator else []
    new_numerator = head + list(numerator)
    new_denominator = ([number(q)] if q != 1 else []) + list(denominator)
    if coefficient < 0:
        new_numerator[0].sign = Sign.NEGATIVE
    return Product(new_numerator, new_denominator)


def rationalize(product: Product) -> Product:
    """Fold signs and numbers into one coefficient and cancel shared factors."""
    coefficient, numerator, denominator = _decompose(product)
    remaining: List[Element] = []
    for factor in denominator:
        match = next((i for i, candidate in enumerate(numerator) if candidate == factor), None)
        if match is None:
            remaining.append(factor)
        else:
            del numerator[match]
    return _compose(coefficient, numerator, remaining)


def combine_like_terms(expression: Expression) -> Expression:
    """Merge products whose non-number factors agree, summing coefficients."""
    order: List[Tuple] = []
    groups: Dict[Tuple, Tuple[sp.Rational, List[Element], List[Element]]] = {}
    for product in expression.products:
        coefficient, numerator, denominator = _decompose(product)
        key = (
            tuple(sorted(sort_key(f) for f in numerator)),
            tuple(sorted(sort_key(f) for f in denominator)),
        )
        if key in groups:
            total, first_numerator, first_denominator = groups[key]
            groups[key] = (total + coefficient, first_numerator, first_denominator)
        else:
            order.append(key)
            groups[key] = (coefficient, numerator, denominator)
    return Expression([_compose(*groups[key]) for key in order])


# ---------------------------------------------------------------------------
# simplify
# ---------------------------------------------------------------------------


def _rationalize_sums(element: Element) -> None:
    if isinstance(element.body, Expression):
        element.body = combine_like_terms(Expression([rationalize(p) for p in element.body.products]))
        element.cache = None


def _drop_unit_denominator(element: Element) -> None:
    if not isinstance(element.body, Expression):
        return
    for product in element.body.products:
        if len(product.denominator) == 1 and _is_one(product.denominator[0]):
            product.denominator = []


def _is_one(element: Element) -> bool:
    return element.sign is Sign.POSITIVE and isinstance(element.body, Number) and element.body.value == 1


def _is_zero_product(product: Product) -> bool:
    return (
        len(product.numerator) == 1
        and not product.denominator
        and isinstance(product.numerator[0].body, Number)
        and product.numerator[0].body.value == 0
    )


def _without_ones(side: Sequence[Element]) -> List[Element]:
    if len(side) == 1:
        return list(side)
    return [f for f in side if not _is_one(f)]


def _remove_identities(element: Element) -> Element:
    body = element.body
    if not isinstance(body, Expression):
        return element
    products = [
        Product(_without_ones(p.numerator), _without_ones(p.denominator))
        for p in body.products
        if not _is_zero_product(p)
    ]
    if not products:
        return number(0)
    return Element(element.sign, Expression(products))


def simplify(element: Element) -> Element:
    """Return a simplified, re-analyzed version of an analyzed ``element``."""
    require_cache(element)
    walk_mut(element, _rationalize_sums, top_down=False)
    analyze(element)
    walk_mut(element, _drop_unit_denominator, top_down=False)
    element = transform(element, _remove_identities, top_down=False)
    if isinstance(element.body, Expression) and not element.body.products:
        element = number(0)
    analyze(element)
    return element


def simplify_equation(equation: Equation) -> None:
    equation.sides = [simplify(side) for side in equation.sides]


# ---------------------------------------------------------------------------
# fixpoint
# ---------------------------------------------------------------------------


DEFAULT_PASSES: Tuple[Pass, ...] = (flatten_equation, simplify_equation)


def normalize(
    equation: Equation,
    *,
    passes: Optional[Sequence[Pass]] = None,
    max_iterations: int = DEFAULTS["max_normalize_iterations"],
    mode: MatchMode = MatchMode.BIJECTIVE,
) -> int:
    """Run ``passes`` over ``equation`` until it stops changing.

    Returns the number of rounds taken.  ``equation`` is left analyzed.
    """
    passes = DEFAULT_PASSES if passes is None else tuple(passes)
    analyze_equation(equation)
    previous = equation.copy()
    for iteration in range(1, max_iterations + 1):
        for step in passes:
            step(equation)
            analyze_equation(equation)
        names = IsSameNames()
        if is_same(previous, equation, names, mode) and names.check():
            logger.debug("normalization converged after %d round(s)", iteration)
            return iteration
        previous = equation.copy()
    raise NonConvergenceError(f"normalization did not converge within {max_iterations} rounds")


__all__ = [
    "flatten",
    "flatten_equation",
    "rationalize",
    "combine_like_terms",
    "simplify",
    "simplify_equation",
    "normalize",
    "DEFAULT_PASSES",
]

from __future__ import annotations

"""Isolate a variable by applying the inverse of the outermost operation.

``get_element_inverse`` inspects the variable-bearing side of an equation and
describes which operation can be peeled off it.  ``transform_equation`` peels
that operation from the variable side and applies its inverse to every other
side.  ``apply_inverse`` chains the two and returns the side conditions
(``"… != 0"`` for each divisor introduced) that the step relies on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from .constants import DEFAULTS, INVERSE_FUNCTIONS
from .errors import SideCountError, TooManyVariablesError, UnsupportedShapeError
from .model import (
    Element,
    Equation,
    Expression,
    Function,
    Number,
    Power,
    Product,
    Sign,
    negate_product,
)
from .printer import factor_to_infix, to_infix
from .traversal import require_cache

logger = logging.getLogger("invsolver.inverse")


@dataclass
class ApplyFunction:
    """Replace ``source(arg)`` by ``arg`` and wrap the other sides in ``name``."""

    name: str
    source: str
    tabulated: bool = True


@dataclass
class Multiply:
    """Move ``multiply`` (already inverted) to the other sides."""

    multiply: Product
    side_with_variable: Product


@dataclass
class Add:
    """Move the constant products in ``add`` (already negated) to the other sides."""

    add: Expression
    side_with_variable: Expression


@dataclass
class Negate:
    """Drop the minus sign from the variable side and negate every other side."""


Transformation = Union[ApplyFunction, Multiply, Add, Negate]


@dataclass
class InverseResult:
    transformation: Transformation
    constraints: List[str] = field(default_factory=list)


def _variable_count(element: Element) -> int:
    return len(require_cache(element).variables)


def _invert_function(body: Function, unknown_inverse_format: str) -> InverseResult:
    if len(body.arguments) != 1:
        raise UnsupportedShapeError(
            f"cannot invert {body.name}() with {len(body.arguments)} arguments"
        )
    if body.name in INVERSE_FUNCTIONS:
        inverse, constraints = INVERSE_FUNCTIONS[body.name]
        return InverseResult(ApplyFunction(inverse, body.name), list(constraints))
    inverse = unknown_inverse_format.format(name=body.name)
    logger.warning("no inverse known for %s(); using %s() as a placeholder", body.name, inverse)
    return InverseResult(ApplyFunction(inverse, body.name, tabulated=False))


def _is_unit(factor: Element) -> bool:
    return factor.sign is Sign.POSITIVE and isinstance(factor.body, Number) and factor.body.value == 1


def _invert_product(product: Product) -> Optional[InverseResult]:
    moved = Product()
    kept = Product()
    for in_numerator, side in ((True, product.numerator), (False, product.denominator)):
        for factor in side:
            if _is_unit(factor):
                continue
            count = _variable_count(factor)
            if count == 0:
                # a constant factor changes sides of the fraction when moved
                (moved.denominator if in_numerator else moved.numerator).append(factor.copy())
            elif count == 1:
                (kept.numerator if in_numerator else kept.denominator).append(factor.copy())
            else:
                raise UnsupportedShapeError(
                    f"factor {to_infix(factor)} carries {count} variables"
                )
    if not moved.numerator and not moved.denominator:
        return None
    constraints = [
        " * ".join(factor_to_infix(f) for f in side) + " != 0"
        for side in (moved.numerator, moved.denominator)
        if side
    ]
    return InverseResult(Multiply(moved, kept), constraints)


def _invert_sum(expression: Expression) -> Optional[InverseResult]:
    add = Expression()
    kept = Expression()
    for product in expression.products:
        factors = [*product.numerator, *product.denominator]
        if any(_variable_count(f) > 0 for f in factors):
            kept.products.append(product.copy())
        else:
            moved = product.copy()
            negate_product(moved)
            add.products.append(moved)
    if not add.products:
        return None
    return InverseResult(Add(add, kept))


def _invert_body(body: Any, unknown_inverse_format: str) -> Optional[InverseResult]:
    if isinstance(body, Function):
        return _invert_function(body, unknown_inverse_format)
    if isinstance(body, Power):
        require_cache(body.base)
        require_cache(body.power)
        return None
    if isinstance(body, Expression):
        if len(body.products) == 1:
            return _invert_product(body.products[0])
        if len(body.products) > 1:
            return _invert_sum(body)
    return None


def get_element_inverse(
    element: Element,
    *,
    unknown_inverse_format: str = DEFAULTS["unknown_inverse_format"],
) -> Optional[InverseResult]:
    """Describe the operation that can be peeled off ``element``, if any.

    ``element`` must be analyzed.  Returns ``None`` when nothing applies
    (bare variables and numbers, powers, a product with no constant factor
    other than 1, a sum with no constant term).  A negated element that is
    otherwise stuck gets :class:`Negate`.
    """
    require_cache(element)
    result = _invert_body(element.body, unknown_inverse_format)
    if result is None and element.sign is Sign.NEGATIVE:
        return InverseResult(Negate())
    return result


def _peel(side: Element, transformation: Transformation) -> Element:
    if isinstance(transformation, Negate):
        peeled = side.copy()
        peeled.sign = Sign.POSITIVE
        return peeled
    if isinstance(transformation, ApplyFunction):
        assert isinstance(side.body, Function)
        return side.body.arguments[0].copy()
    if isinstance(transformation, Multiply):
        return Element(Sign.POSITIVE, Expression([transformation.side_with_variable.copy()]))
    return Element(Sign.POSITIVE, transformation.side_with_variable.copy())


def _apply(side: Element, transformation: Transformation, sign: Sign) -> Element:
    other = side.copy()
    other.sign = other.sign * sign
    other.cache = None
    if isinstance(transformation, Negate):
        return other
    if isinstance(transformation, ApplyFunction):
        return Element(Sign.POSITIVE, Function(transformation.name, [other]))
    if isinstance(transformation, Multiply):
        product = transformation.multiply.copy()
        product.numerator.append(other)
        return Element(Sign.POSITIVE, Expression([product]))
    moved = transformation.add.copy()
    return Element(Sign.POSITIVE, Expression([Product([other])] + moved.products))


def transform_equation(equation: Equation, side_index: int, transformation: Transformation) -> None:
    """Peel ``transformation`` from ``sides[side_index]`` and invert it elsewhere.

    A negative sign on the variable side is carried over to the other sides.
    """
    variable_side = equation.sides[side_index]
    sign = variable_side.sign
    sides: List[Element] = []
    for index, side in enumerate(equation.sides):
        if index == side_index:
            sides.append(_peel(side, transformation))
        else:
            sides.append(_apply(side, transformation, sign))
    equation.sides = sides


def locate_variable_side(equation: Equation, target: Optional[str] = None) -> Optional[int]:
    for index, side in enumerate(equation.sides):
        variables = require_cache(side).variables
        if (target is None and variables) or (target is not None and target in variables):
            return index
    return None


def apply_inverse(
    equation: Equation,
    *,
    target: Optional[str] = None,
    unknown_inverse_format: str = DEFAULTS["unknown_inverse_format"],
) -> List[str]:
    """One isolation step on an analyzed two-sided ``equation``, in place.

    Returns the constraints introduced by the step; an empty list with the
    equation untouched means no inverse applies.
    """
    if len(equation.sides) != 2:
        raise SideCountError(f"apply_inverse needs 2 sides, got {len(equation.sides)}")
    index = locate_variable_side(equation, target)
    if index is None:
        return []
    side = equation.sides[index]
    variables = require_cache(side).variables
    if len(variables) > 1:
        raise TooManyVariablesError(
            f"side {to_infix(side)} has {len(variables)} variables: {', '.join(sorted(variables))}"
        )
    result = get_element_inverse(side, unknown_inverse_format=unknown_inverse_format)
    if result is None:
        logger.debug("no inverse applies to %s", to_infix(side))
        return []
    transform_equation(equation, index, result.transformation)
    return list(result.constraints)


__all__ = [
    "ApplyFunction",
    "Multiply",
    "Add",
    "Negate",
    "Transformation",
    "InverseResult",
    "get_element_inverse",
    "transform_equation",
    "locate_variable_side",
    "apply_inverse",
]

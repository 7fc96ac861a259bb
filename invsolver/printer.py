"""Infix and reverse-Polish renderers for trees and equations."""
from __future__ import annotations

from typing import List

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
)

__all__ = ["to_infix", "factor_to_infix", "equation_to_infix", "to_rpn", "equation_to_rpn"]


def _is_atom(element: Element) -> bool:
    if element.sign is Sign.NEGATIVE:
        return False
    body = element.body
    if isinstance(body, Number):
        return body.value.q == 1
    return isinstance(body, (Variable, Function))


def _atom(element: Element) -> str:
    text = to_infix(element)
    return text if _is_atom(element) else f"({text})"


def _is_compound(element: Element) -> bool:
    body = element.body
    if isinstance(body, Expression):
        products = body.products
        return len(products) > 1 or (len(products) == 1 and bool(products[0].denominator))
    if isinstance(body, Number):
        return body.value.q != 1
    return isinstance(body, Modulo)


def factor_to_infix(element: Element) -> str:
    """Render ``element`` so it can sit next to ``*`` or ``/``."""
    text = to_infix(element)
    return f"({text})" if _is_compound(element) else text


def _product_infix(product: Product) -> str:
    numerator = " * ".join(factor_to_infix(f) for f in product.numerator) or "1"
    if not product.denominator:
        return numerator
    factors = [factor_to_infix(f) for f in product.denominator]
    denominator = factors[0] if len(factors) == 1 else "(" + " * ".join(factors) + ")"
    return f"{numerator} / {denominator}"


def _expression_infix(expression: Expression) -> str:
    if not expression.products:
        return "0"
    parts: List[str] = []
    for index, product in enumerate(expression.products):
        text = _product_infix(product)
        if index == 0:
            parts.append(text)
        elif text.startswith("-"):
            parts.append(" - " + text[1:])
        else:
            parts.append(" + " + text)
    return "".join(parts)


def to_infix(element: Element) -> str:
    body = element.body
    if isinstance(body, Number):
        text = str(body.value)
    elif isinstance(body, Variable):
        text = body.name
    elif isinstance(body, Power):
        text = f"{_atom(body.base)}^{_atom(body.power)}"
    elif isinstance(body, Modulo):
        text = f"{_atom(body.lhs)} % {_atom(body.rhs)}"
    elif isinstance(body, Factorial):
        text = f"{_atom(body.child)}!"
    elif isinstance(body, Function):
        text = f"{body.name}({', '.join(to_infix(a) for a in body.arguments)})"
    else:
        text = _expression_infix(body)

    if element.sign is Sign.NEGATIVE:
        wrap = isinstance(body, Modulo) or (
            isinstance(body, Expression) and len(body.products) > 1
        )
        return f"-({text})" if wrap else f"-{text}"
    return text


def equation_to_infix(equation: Equation) -> str:
    return " = ".join(to_infix(side) for side in equation.sides)


def _rpn_tokens(element: Element) -> List[str]:
    body = element.body
    tokens: List[str] = []
    if isinstance(body, Number):
        tokens.append(str(body.value))
    elif isinstance(body, Variable):
        tokens.append(body.name)
    elif isinstance(body, Power):
        tokens += _rpn_tokens(body.base) + _rpn_tokens(body.power) + ["^"]
    elif isinstance(body, Modulo):
        tokens += _rpn_tokens(body.lhs) + _rpn_tokens(body.rhs) + ["%"]
    elif isinstance(body, Factorial):
        tokens += _rpn_tokens(body.child) + ["!"]
    elif isinstance(body, Function):
        for argument in body.arguments:
            tokens += _rpn_tokens(argument)
        tokens.append(body.name)
    elif not body.products:
        tokens.append("0")
    else:
        for index, product in enumerate(body.products):
            tokens += _rpn_side(product.numerator, "1")
            if product.denominator:
                tokens += _rpn_side(product.denominator, "1") + ["/"]
            if index:
                tokens.append("+")
    if element.sign is Sign.NEGATIVE:
        tokens.append("neg")
    return tokens


def _rpn_side(factors: List[Element], empty: str) -> List[str]:
    if not factors:
        return [empty]
    tokens = _rpn_tokens(factors[0])
    for factor in factors[1:]:
        tokens += _rpn_tokens(factor) + ["*"]
    return tokens


def to_rpn(element: Element) -> str:
    return " ".join(_rpn_tokens(element))


def equation_to_rpn(equation: Equation) -> str:
    return " = ".join(to_rpn(side) for side in equation.sides)

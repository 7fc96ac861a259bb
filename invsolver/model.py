from __future__ import annotations

"""Expression tree model.

An :class:`Element` is a signed tree node whose ``body`` is either one of the
leaf/structural node variants (:class:`Number`, :class:`Variable`,
:class:`Power`, :class:`Modulo`, :class:`Factorial`, :class:`Function`) or an
:class:`Expression`, i.e. a sum of :class:`Product` ratios.  Every element owns
its children exclusively; modified copies are produced with :meth:`Element.copy`
rather than by sharing subtrees.

``Element.cache`` holds the :class:`AnalysisCache` filled in by
:func:`invsolver.traversal.analyze`.  It is ignored by equality so two trees with
the same shape compare equal whether or not they have been analyzed.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import sympy as sp

from .errors import NotAnalyzedError


class Sign(Enum):
    POSITIVE = "+"
    NEGATIVE = "-"

    def __mul__(self, other: "Sign") -> "Sign":
        if not isinstance(other, Sign):
            return NotImplemented
        return Sign.POSITIVE if self is other else Sign.NEGATIVE

    def inverted(self) -> "Sign":
        return Sign.NEGATIVE if self is Sign.POSITIVE else Sign.POSITIVE


def to_rational(value: Any) -> sp.Rational:
    """Coerce ints, fractions, decimal strings and SymPy rationals exactly."""
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, sp.Rational):
        return value
    if isinstance(value, Fraction):
        return sp.Rational(value.numerator, value.denominator)
    if isinstance(value, int):
        return sp.Integer(value)
    if isinstance(value, (str, float)):
        # str() keeps the decimal the user wrote instead of the binary expansion
        return sp.Rational(str(value))
    if isinstance(value, sp.Basic) and value.is_Rational:
        return sp.Rational(value)
    raise TypeError(f"cannot use {value!r} as an exact rational")


@dataclass
class AnalysisCache:
    """Names found beneath an element and whether it is closed over numbers."""

    variables: Set[str] = field(default_factory=set)
    functions: Set[str] = field(default_factory=set)
    is_number: Optional[bool] = None


# ---------------------------------------------------------------------------
# Node variants
# ---------------------------------------------------------------------------


@dataclass
class Number:
    value: sp.Rational

    def __post_init__(self) -> None:
        self.value = to_rational(self.value)


@dataclass
class Variable:
    name: str


@dataclass
class Power:
    base: "Element"
    power: "Element"


@dataclass
class Modulo:
    lhs: "Element"
    rhs: "Element"


@dataclass
class Factorial:
    child: "Element"


@dataclass
class Function:
    name: str
    arguments: List["Element"] = field(default_factory=list)


Node = Union[Number, Variable, Power, Modulo, Factorial, Function]


@dataclass
class Product:
    """``Π numerator / Π denominator``; an empty numerator stands for 1."""

    numerator: List["Element"] = field(default_factory=list)
    denominator: List["Element"] = field(default_factory=list)

    def copy(self) -> "Product":
        return copy.deepcopy(self)


@dataclass
class Expression:
    """Sum of products; an empty sum is 0."""

    products: List[Product] = field(default_factory=list)

    def copy(self) -> "Expression":
        return copy.deepcopy(self)


NodeOrExpression = Union[Node, Expression]


@dataclass
class Element:
    sign: Sign = Sign.POSITIVE
    body: NodeOrExpression = field(default_factory=Expression)
    cache: Optional[AnalysisCache] = field(default=None, compare=False, repr=False)

    @property
    def analyzed(self) -> bool:
        return self.cache is not None

    def copy(self) -> "Element":
        return copy.deepcopy(self)

    def invert_sign(self) -> None:
        self.sign = self.sign.inverted()

    def is_number(self) -> bool:
        """True for a ``Number`` or an expression built only from numbers.

        Requires the element (and every element it inspects) to be analyzed.
        """
        if self.cache is None:
            raise NotAnalyzedError("is_number() called on an element that has not been analyzed")
        body = self.body
        if isinstance(body, Number):
            return True
        if isinstance(body, Expression):
            for product in body.products:
                for factor in (*product.numerator, *product.denominator):
                    if not factor.is_number():
                        return False
            return True
        return False


@dataclass
class Equation:
    """``sides[0] = sides[1] = …``; solving requires exactly two sides."""

    sides: List[Element] = field(default_factory=list)

    def copy(self) -> "Equation":
        return copy.deepcopy(self)

    @property
    def analyzed(self) -> bool:
        return all(side.cache is not None for side in self.sides)


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------


def number(value: Any, sign: Sign = Sign.POSITIVE) -> Element:
    return Element(sign, Number(value))


def variable(name: str, sign: Sign = Sign.POSITIVE) -> Element:
    return Element(sign, Variable(name))


def function(name: str, *arguments: Element) -> Element:
    return Element(Sign.POSITIVE, Function(name, list(arguments)))


def power(base: Element, exponent: Element) -> Element:
    return Element(Sign.POSITIVE, Power(base, exponent))


def simple_add(lhs: Element, rhs: Element) -> Element:
    return Element(Sign.POSITIVE, Expression([Product([lhs]), Product([rhs])]))


def simple_sub(lhs: Element, rhs: Element) -> Element:
    return simple_add(lhs, simple_neg(rhs))


def simple_mul(lhs: Element, rhs: Element) -> Element:
    return Element(Sign.POSITIVE, Expression([Product([lhs, rhs])]))


def simple_div(lhs: Element, rhs: Element) -> Element:
    return Element(Sign.POSITIVE, Expression([Product([lhs], [rhs])]))


def simple_neg(element: Element) -> Element:
    element.invert_sign()
    return element


def negate_product(product: Product) -> None:
    """Flip the sign of ``product`` in place via its first factor."""
    if product.numerator:
        product.numerator[0].invert_sign()
    elif product.denominator:
        product.denominator[0].invert_sign()
    else:
        product.numerator.append(number(1, Sign.NEGATIVE))


# ---------------------------------------------------------------------------
# Total order used to sort unordered factor/term multisets
# ---------------------------------------------------------------------------

_NODE_ORDER = {Number: 0, Variable: 1, Power: 2, Modulo: 3, Factorial: 4, Function: 5}


def sort_key(element: Element) -> Tuple[Any, ...]:
    """Hashable key ordering elements by sign, then variant, then contents."""
    sign = 0 if element.sign is Sign.POSITIVE else 1
    body = element.body
    if isinstance(body, Expression):
        return (sign, 1, tuple(product_key(p) for p in body.products))
    return (sign, 0, _node_key(body))


def product_key(product: Product) -> Tuple[Any, ...]:
    return (
        tuple(sort_key(e) for e in product.numerator),
        tuple(sort_key(e) for e in product.denominator),
    )


def _node_key(node: Node) -> Tuple[Any, ...]:
    rank = _NODE_ORDER[type(node)]
    if isinstance(node, Number):
        return (rank, Fraction(int(node.value.p), int(node.value.q)))
    if isinstance(node, Variable):
        return (rank, node.name)
    if isinstance(node, Power):
        return (rank, sort_key(node.base), sort_key(node.power))
    if isinstance(node, Modulo):
        return (rank, sort_key(node.lhs), sort_key(node.rhs))
    if isinstance(node, Factorial):
        return (rank, sort_key(node.child))
    return (rank, node.name, tuple(sort_key(a) for a in node.arguments))


# ---------------------------------------------------------------------------
# Plain-dict serialization
# ---------------------------------------------------------------------------


def element_to_dict(element: Element) -> Dict[str, Any]:
    out: Dict[str, Any] = {"sign": element.sign.value}
    body = element.body
    if isinstance(body, Number):
        out["number"] = str(body.value)
    elif isinstance(body, Variable):
        out["variable"] = body.name
    elif isinstance(body, Power):
        out["power"] = {"base": element_to_dict(body.base), "power": element_to_dict(body.power)}
    elif isinstance(body, Modulo):
        out["modulo"] = {"lhs": element_to_dict(body.lhs), "rhs": element_to_dict(body.rhs)}
    elif isinstance(body, Factorial):
        out["factorial"] = {"child": element_to_dict(body.child)}
    elif isinstance(body, Function):
        out["function"] = {
            "name": body.name,
            "arguments": [element_to_dict(a) for a in body.arguments],
        }
    else:
        out["expression"] = [
            {
                "numerator": [element_to_dict(e) for e in p.numerator],
                "denominator": [element_to_dict(e) for e in p.denominator],
            }
            for p in body.products
        ]
    return out


def element_from_dict(data: Dict[str, Any]) -> Element:
    sign = Sign(data.get("sign", "+"))
    body: NodeOrExpression
    if "number" in data:
        body = Number(data["number"])
    elif "variable" in data:
        body = Variable(data["variable"])
    elif "power" in data:
        body = Power(element_from_dict(data["power"]["base"]), element_from_dict(data["power"]["power"]))
    elif "modulo" in data:
        body = Modulo(element_from_dict(data["modulo"]["lhs"]), element_from_dict(data["modulo"]["rhs"]))
    elif "factorial" in data:
        body = Factorial(element_from_dict(data["factorial"]["child"]))
    elif "function" in data:
        body = Function(
            data["function"]["name"],
            [element_from_dict(a) for a in data["function"].get("arguments", [])],
        )
    elif "expression" in data:
        body = Expression(
            [
                Product(
                    [element_from_dict(e) for e in p.get("numerator", [])],
                    [element_from_dict(e) for e in p.get("denominator", [])],
                )
                for p in data["expression"]
            ]
        )
    else:
        raise ValueError(f"unrecognised element payload: {sorted(data)}")
    return Element(sign, body)


def equation_to_dict(equation: Equation) -> Dict[str, Any]:
    return {"sides": [element_to_dict(side) for side in equation.sides]}


def equation_from_dict(data: Dict[str, Any]) -> Equation:
    return Equation([element_from_dict(side) for side in data.get("sides", [])])


__all__ = [
    "Sign",
    "AnalysisCache",
    "Number",
    "Variable",
    "Power",
    "Modulo",
    "Factorial",
    "Function",
    "Node",
    "Product",
    "Expression",
    "NodeOrExpression",
    "Element",
    "Equation",
    "to_rational",
    "number",
    "variable",
    "function",
    "power",
    "simple_add",
    "simple_sub",
    "simple_mul",
    "simple_div",
    "simple_neg",
    "negate_product",
    "sort_key",
    "product_key",
    "element_to_dict",
    "element_from_dict",
    "equation_to_dict",
    "equation_from_dict",
]

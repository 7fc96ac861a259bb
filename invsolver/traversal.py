from __future__ import annotations

"""Depth-bounded traversal over expression trees and the analysis pass.

Three traversal flavours share one visiting order:

* :func:`walk` calls ``function`` on each element for inspection;
* :func:`walk_mut` lets ``function`` edit elements in place;
* :func:`transform` rebuilds the tree from the values ``function`` returns.

``max_level`` bounds descent: ``None`` is unlimited, ``0`` visits only the
starting element, ``1`` adds its direct children and so on.
"""

from typing import Callable, List, Optional

from .errors import NotAnalyzedError
from .model import (
    AnalysisCache,
    Element,
    Equation,
    Expression,
    Factorial,
    Function,
    Modulo,
    Number,
    Power,
    Product,
    Variable,
)

Visitor = Callable[[Element], None]
Transformer = Callable[[Element], Element]


def children(element: Element) -> List[Element]:
    """Direct children of ``element`` in visiting order."""
    body = element.body
    if isinstance(body, Expression):
        out: List[Element] = []
        for product in body.products:
            out.extend(product.numerator)
            out.extend(product.denominator)
        return out
    if isinstance(body, Power):
        return [body.base, body.power]
    if isinstance(body, Modulo):
        return [body.lhs, body.rhs]
    if isinstance(body, Factorial):
        return [body.child]
    if isinstance(body, Function):
        return list(body.arguments)
    return []


def _child_level(max_level: Optional[int]) -> tuple[Optional[int], bool]:
    if max_level is None:
        return None, True
    return max_level - 1, max_level - 1 >= 0


def walk(
    element: Element,
    function: Visitor,
    *,
    top_down: bool = False,
    max_level: Optional[int] = None,
) -> None:
    level, descend = _child_level(max_level)
    if top_down:
        function(element)
    if descend:
        for child in children(element):
            walk(child, function, top_down=top_down, max_level=level)
    if not top_down:
        function(element)


def walk_mut(
    element: Element,
    function: Visitor,
    *,
    top_down: bool = False,
    max_level: Optional[int] = None,
) -> None:
    """Like :func:`walk` but ``function`` may rewrite ``element.body``.

    Children are read after a pre-order call, so a top-down visitor that
    replaces a body is followed into the replacement.  The child list
    is copied before descending.
    """
    level, descend = _child_level(max_level)
    if top_down:
        function(element)
    if descend:
        for child in list(children(element)):
            walk_mut(child, function, top_down=top_down, max_level=level)
    if not top_down:
        function(element)


def transform(
    element: Element,
    function: Transformer,
    *,
    top_down: bool = False,
    max_level: Optional[int] = None,
) -> Element:
    """Return a rebuilt tree; rebuilt elements carry no analysis cache."""
    level, descend = _child_level(max_level)
    if top_down:
        element = function(element)
    if descend:

        def rebuild(child: Element) -> Element:
            return transform(child, function, top_down=top_down, max_level=level)

        body = element.body
        if isinstance(body, Expression):
            new_body = Expression(
                [
                    Product(
                        [rebuild(e) for e in product.numerator],
                        [rebuild(e) for e in product.denominator],
                    )
                    for product in body.products
                ]
            )
        elif isinstance(body, Power):
            new_body = Power(rebuild(body.base), rebuild(body.power))
        elif isinstance(body, Modulo):
            new_body = Modulo(rebuild(body.lhs), rebuild(body.rhs))
        elif isinstance(body, Factorial):
            new_body = Factorial(rebuild(body.child))
        elif isinstance(body, Function):
            new_body = Function(body.name, [rebuild(a) for a in body.arguments])
        elif isinstance(body, Number):
            new_body = Number(body.value)
        else:
            new_body = Variable(body.name)
        element = Element(element.sign, new_body)
    if not top_down:
        element = function(element)
    return element


def _analyze_one(element: Element) -> None:
    cache = AnalysisCache()
    body = element.body
    if isinstance(body, Number):
        cache.is_number = True
    elif isinstance(body, Variable):
        cache.variables.add(body.name)
        cache.is_number = False
    else:
        numeric = not isinstance(body, Function)
        if isinstance(body, Function):
            cache.functions.add(body.name)
        for child in children(element):
            if child.cache is None:
                raise NotAnalyzedError("analysis depth stopped above an unanalyzed subtree")
            cache.variables |= child.cache.variables
            cache.functions |= child.cache.functions
            numeric = numeric and bool(child.cache.is_number)
        cache.is_number = numeric
    element.cache = cache


def analyze(element: Element, depth: Optional[int] = None) -> AnalysisCache:
    """Fill ``cache`` bottom-up on ``element`` and its subtree down to ``depth``."""
    walk(element, _analyze_one, top_down=False, max_level=depth)
    assert element.cache is not None
    return element.cache


def analyze_equation(equation: Equation) -> None:
    for side in equation.sides:
        analyze(side)


def require_cache(element: Element) -> AnalysisCache:
    if element.cache is None:
        raise NotAnalyzedError("element must be analyzed before this operation")
    return element.cache


def is_number(element: Element) -> bool:
    return element.is_number()


__all__ = [
    "Visitor",
    "Transformer",
    "children",
    "walk",
    "walk_mut",
    "transform",
    "analyze",
    "analyze_equation",
    "require_cache",
    "is_number",
]

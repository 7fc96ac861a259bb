from __future__ import annotations

"""Structural equivalence of trees up to a consistent renaming.

:func:`is_same` compares two trees (or equations, products, expressions, or
lists of them) treating products and sums as unordered multisets.  Every time
a variable or function on the left is matched against one on the right the
pair is recorded in an :class:`IsSameNames`; callers then ask
:meth:`IsSameNames.check` whether the recorded pairs form a bijective renaming.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence

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
    Variable,
    product_key,
    sort_key,
)


class MatchMode(str, Enum):
    BIJECTIVE = "bijective"
    ANY_PAIR = "any_pair"


@dataclass
class IsSameNames:
    """Observed left-name -> right-name pairs for variables and functions."""

    variables: Dict[str, List[str]] = field(default_factory=dict)
    functions: Dict[str, List[str]] = field(default_factory=dict)

    def record_variable(self, left: str, right: str) -> None:
        self.variables.setdefault(left, []).append(right)

    def record_function(self, left: str, right: str) -> None:
        self.functions.setdefault(left, []).append(right)

    def copy(self) -> "IsSameNames":
        return IsSameNames(
            {k: list(v) for k, v in self.variables.items()},
            {k: list(v) for k, v in self.functions.items()},
        )

    def adopt(self, other: "IsSameNames") -> None:
        self.variables = other.variables
        self.functions = other.functions

    def check(self) -> bool:
        """Every left name maps to one right name and no right name is shared."""
        return _is_bijective(self.variables) and _is_bijective(self.functions)

    def renaming(self) -> Dict[str, Dict[str, str]]:
        return {
            "variables": {k: v[0] for k, v in self.variables.items()},
            "functions": {k: v[0] for k, v in self.functions.items()},
        }


def _is_bijective(table: Dict[str, List[str]]) -> bool:
    owners: Dict[str, str] = {}
    for left, seen in table.items():
        if len(set(seen)) != 1:
            return False
        if owners.setdefault(seen[0], left) != left:
            return False
    return True


def is_same(
    lhs: Any,
    rhs: Any,
    names: IsSameNames,
    mode: MatchMode = MatchMode.BIJECTIVE,
) -> bool:
    """Structural equality of ``lhs`` and ``rhs`` up to a renaming of names.

    Evidence for the renaming is collected in ``names``; call
    :meth:`IsSameNames.check` afterwards to reject inconsistent renamings.
    Multisets (terms of a sum, factors of a product) are paired one-to-one
    under ``MatchMode.BIJECTIVE``, the default.  ``MatchMode.ANY_PAIR`` keeps
    the older any-pair comparison and is selected through
    ``SolverConfig.match_mode`` or ``INVSOLVER_MATCH_MODE=any_pair``.
    """
    mode = MatchMode(mode)
    if isinstance(lhs, Equation):
        if not isinstance(rhs, Equation) or len(lhs.sides) != len(rhs.sides):
            return False
        return all(is_same(a, b, names, mode) for a, b in zip(lhs.sides, rhs.sides))
    if isinstance(lhs, Element):
        return isinstance(rhs, Element) and lhs.sign is rhs.sign and _same_body(lhs.body, rhs.body, names, mode)
    if isinstance(lhs, Expression):
        return isinstance(rhs, Expression) and _same_sequence(lhs.products, rhs.products, names, mode)
    if isinstance(lhs, Product):
        if not isinstance(rhs, Product):
            return False
        if mode is MatchMode.ANY_PAIR:
            # both sides are always compared so their names are always recorded
            numerator = _same_sequence(lhs.numerator, rhs.numerator, names, mode)
            denominator = _same_sequence(lhs.denominator, rhs.denominator, names, mode)
            return numerator and denominator
        return _same_sequence(lhs.numerator, rhs.numerator, names, mode) and _same_sequence(
            lhs.denominator, rhs.denominator, names, mode
        )
    if isinstance(lhs, (list, tuple)):
        return isinstance(rhs, (list, tuple)) and _same_sequence(lhs, rhs, names, mode)
    raise TypeError(f"cannot compare {type(lhs).__name__}")


def _same_body(lhs: Any, rhs: Any, names: IsSameNames, mode: MatchMode) -> bool:
    if isinstance(lhs, Expression) or isinstance(rhs, Expression):
        return isinstance(lhs, Expression) and isinstance(rhs, Expression) and is_same(lhs, rhs, names, mode)
    if isinstance(lhs, Number):
        return isinstance(rhs, Number) and lhs.value == rhs.value
    if isinstance(lhs, Variable):
        if not isinstance(rhs, Variable):
            return False
        names.record_variable(lhs.name, rhs.name)
        return True
    if isinstance(lhs, Power):
        return isinstance(rhs, Power) and is_same(lhs.base, rhs.base, names, mode) and is_same(
            lhs.power, rhs.power, names, mode
        )
    if isinstance(lhs, Modulo):
        return isinstance(rhs, Modulo) and is_same(lhs.lhs, rhs.lhs, names, mode) and is_same(
            lhs.rhs, rhs.rhs, names, mode
        )
    if isinstance(lhs, Factorial):
        return isinstance(rhs, Factorial) and is_same(lhs.child, rhs.child, names, mode)
    if isinstance(lhs, Function):
        if not isinstance(rhs, Function):
            return False
        if not _same_sequence(lhs.arguments, rhs.arguments, names, mode):
            return False
        names.record_function(lhs.name, rhs.name)
        return True
    raise TypeError(f"unknown node {type(lhs).__name__}")


def _key(item: Any) -> Any:
    return product_key(item) if isinstance(item, Product) else sort_key(item)


def _same_sequence(lhs: Sequence[Any], rhs: Sequence[Any], names: IsSameNames, mode: MatchMode) -> bool:
    if len(lhs) != len(rhs):
        return False
    if not lhs:
        return True
    left = sorted(lhs, key=_key)
    right = sorted(rhs, key=_key)
    if mode is MatchMode.ANY_PAIR:
        result = False
        for a in left:
            for b in right:
                same = is_same(a, b, names, mode)
                result = result or same
                if result:
                    break
        return result
    return _match_bijective(left, right, names, mode)


def _match_bijective(left: List[Any], right: List[Any], names: IsSameNames, mode: MatchMode) -> bool:
    if not left:
        return True
    head, rest = left[0], left[1:]
    for index, candidate in enumerate(right):
        trial = names.copy()
        if not (is_same(head, candidate, trial, mode) and trial.check()):
            continue
        if _match_bijective(rest, right[:index] + right[index + 1 :], trial, mode):
            names.adopt(trial)
            return True
    return False


__all__ = ["MatchMode", "IsSameNames", "is_same"]

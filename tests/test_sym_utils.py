import pytest
import sympy as sp

from invsolver.errors import EquationParseError
from invsolver.model import (
    Equation,
    Expression,
    Function,
    Number,
    Product,
    Sign,
    Variable,
    number,
    simple_div,
    variable,
)
from invsolver.solver import solve_equation
from invsolver.sym_utils import (
    from_sympy,
    isolated_value,
    parse_equation,
    to_sympy,
    verify_solution,
)


def _solve_text(text: str) -> tuple[Equation, Equation]:
    original = parse_equation(text)
    result = solve_equation(original)
    (leaf, _), = result.solutions()
    return original, leaf


def test_parse_and_solve_linear_equation() -> None:
    original, leaf = _solve_text("2*x + 3 = 7")
    value = isolated_value(leaf, "x")
    assert value is not None
    assert to_sympy(value) == 2
    assert verify_solution(original, leaf, "x")


def test_parse_and_solve_trig_equation() -> None:
    original, leaf = _solve_text("sin(x) = 1/2")
    assert to_sympy(isolated_value(leaf, "x")) == sp.asin(sp.Rational(1, 2))
    assert verify_solution(original, leaf, "x")


def test_implicit_multiplication() -> None:
    original, leaf = _solve_text("3x = 12")
    assert to_sympy(isolated_value(leaf, "x")) == 4


def test_wrong_solution_fails_verification() -> None:
    original = parse_equation("2*x + 3 = 7")
    assert not verify_solution(original, Equation([variable("x"), number(5)]), "x")
    assert not verify_solution(original, Equation([number(5), number(5)]), "x")


def test_parse_errors() -> None:
    with pytest.raises(EquationParseError):
        parse_equation("2*x + 3")
    with pytest.raises(EquationParseError):
        parse_equation("= 3")


def test_from_sympy_keeps_numbers_non_negative() -> None:
    element = from_sympy(sp.Integer(-3))
    assert element.sign is Sign.NEGATIVE
    assert element.body == Number(3)


def test_from_sympy_sends_negative_powers_to_denominator() -> None:
    x = sp.Symbol("x")
    expr = sp.Mul(x, sp.Pow(sp.Integer(2), -1, evaluate=False), evaluate=False)
    element = from_sympy(expr)
    assert element.body == Expression([Product([variable("x")], [number(2)])])


def test_from_sympy_renames_inverse_trig() -> None:
    element = from_sympy(sp.asin(sp.Symbol("c"), evaluate=False))
    assert element.body == Function("arcsin", [variable("c")])


def test_identifiers_stay_plain_symbols() -> None:
    equation = parse_equation("E = I")
    assert equation.sides[0].body == Variable("E")
    assert equation.sides[1].body == Variable("I")


def test_to_sympy_builds_expression() -> None:
    x = sp.Symbol("x")
    assert to_sympy(simple_div(variable("x"), number(2))) == x / 2
    assert to_sympy(variable("x", Sign.NEGATIVE)) == -x

from invsolver.model import (
    Element,
    Equation,
    Expression,
    Factorial,
    Modulo,
    Product,
    Sign,
    function,
    number,
    power,
    simple_add,
    simple_div,
    simple_mul,
    variable,
)
from invsolver.printer import equation_to_infix, equation_to_rpn, to_infix, to_rpn


def test_infix_basic_shapes() -> None:
    assert to_infix(number("3/4")) == "3/4"
    assert to_infix(variable("x", Sign.NEGATIVE)) == "-x"
    assert to_infix(power(variable("x"), number(2))) == "x^2"
    assert to_infix(function("f", variable("x"), number(1))) == "f(x, 1)"
    assert to_infix(Element(Sign.POSITIVE, Factorial(variable("n")))) == "n!"
    assert to_infix(Element(Sign.POSITIVE, Modulo(variable("a"), number(3)))) == "a % 3"
    assert to_infix(Element()) == "0"


def test_infix_parenthesizes_sums_inside_products() -> None:
    tree = simple_mul(number(2), simple_add(variable("x"), number(1)))
    assert to_infix(tree) == "2 * (x + 1)"
    denominator = Element(
        Sign.POSITIVE, Expression([Product([variable("a")], [number(2), variable("b")])])
    )
    assert to_infix(denominator) == "a / (2 * b)"


def test_infix_negated_sum() -> None:
    tree = simple_add(variable("x"), number(1))
    tree.sign = Sign.NEGATIVE
    assert to_infix(tree) == "-(x + 1)"


def test_rpn() -> None:
    assert to_rpn(simple_add(simple_mul(number(2), variable("x")), number(3))) == "2 x * 3 +"
    assert to_rpn(simple_div(variable("x"), number(2))) == "x 2 /"
    assert equation_to_rpn(Equation([function("sin", variable("x")), number(0)])) == "x sin = 0"


def test_equation_infix() -> None:
    assert equation_to_infix(Equation([variable("x"), number(1), number(1)])) == "x = 1 = 1"

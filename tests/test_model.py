from fractions import Fraction

import sympy as sp

from invsolver.model import (
    AnalysisCache,
    Element,
    Equation,
    Expression,
    Number,
    Product,
    Sign,
    Variable,
    element_from_dict,
    element_to_dict,
    equation_from_dict,
    equation_to_dict,
    function,
    negate_product,
    number,
    power,
    simple_add,
    simple_div,
    simple_mul,
    simple_sub,
    sort_key,
    variable,
)


def test_sign_multiplication_follows_sign_rules() -> None:
    assert Sign.POSITIVE * Sign.POSITIVE is Sign.POSITIVE
    assert Sign.POSITIVE * Sign.NEGATIVE is Sign.NEGATIVE
    assert Sign.NEGATIVE * Sign.NEGATIVE is Sign.POSITIVE
    assert Sign.NEGATIVE.inverted() is Sign.POSITIVE


def test_number_coerces_to_exact_rational() -> None:
    assert Number(3).value == sp.Integer(3)
    assert Number("0.5").value == sp.Rational(1, 2)
    assert Number(Fraction(3, 4)).value == sp.Rational(3, 4)
    assert Number("2/6").value == sp.Rational(1, 3)


def test_equality_ignores_analysis_cache() -> None:
    a = simple_add(variable("x"), number(1))
    b = simple_add(variable("x"), number(1))
    a.cache = AnalysisCache(variables={"x"}, is_number=False)
    assert a == b
    assert a != simple_add(variable("y"), number(1))


def test_copy_is_deep() -> None:
    original = simple_mul(number(2), variable("x"))
    clone = original.copy()
    clone.body.products[0].numerator[1].body.name = "y"
    assert original.body.products[0].numerator[1] == variable("x")


def test_simple_sub_negates_right_operand() -> None:
    element = simple_sub(variable("x"), number(3))
    products = element.body.products
    assert products[1].numerator[0] == number(3, Sign.NEGATIVE)


def test_negate_product_uses_first_available_factor() -> None:
    with_numerator = Product([variable("x")], [number(2)])
    negate_product(with_numerator)
    assert with_numerator.numerator[0].sign is Sign.NEGATIVE
    assert with_numerator.denominator[0].sign is Sign.POSITIVE

    only_denominator = Product([], [number(2)])
    negate_product(only_denominator)
    assert only_denominator.denominator[0].sign is Sign.NEGATIVE

    empty = Product()
    negate_product(empty)
    assert empty.numerator == [number(1, Sign.NEGATIVE)]


def test_sort_key_orders_sign_then_variant() -> None:
    items = [variable("x"), number(2, Sign.NEGATIVE), simple_add(variable("a"), number(1)), number(5)]
    ordered = sorted(items, key=sort_key)
    assert ordered[0] == number(5)
    assert ordered[1] == variable("x")
    assert ordered[2] == simple_add(variable("a"), number(1))
    assert ordered[3] == number(2, Sign.NEGATIVE)


def test_element_dict_round_trip_preserves_structure() -> None:
    tree = simple_div(
        simple_add(function("sin", variable("x")), power(variable("y"), number("3/2"))),
        number(4, Sign.NEGATIVE),
    )
    data = element_to_dict(tree)
    assert data["expression"][0]["denominator"][0] == {"sign": "-", "number": "4"}
    assert element_from_dict(data) == tree


def test_equation_dict_round_trip() -> None:
    equation = Equation([simple_mul(number(2), variable("x")), number(6)])
    assert equation_from_dict(equation_to_dict(equation)) == equation


def test_default_element_is_empty_sum() -> None:
    element = Element()
    assert element.sign is Sign.POSITIVE
    assert element.body == Expression()
    assert not element.analyzed

import pytest

from invsolver.matcher import IsSameNames, MatchMode, is_same
from invsolver.model import (
    Equation,
    Sign,
    function,
    number,
    power,
    simple_add,
    simple_mul,
    variable,
)


def _sample_equation() -> Equation:
    left = simple_add(simple_mul(number(2), function("sin", variable("x"))), power(variable("y"), number(2)))
    return Equation([left, simple_add(variable("x"), number(1))])


@pytest.mark.parametrize("mode", [MatchMode.BIJECTIVE, MatchMode.ANY_PAIR])
def test_is_same_is_reflexive(mode: MatchMode) -> None:
    names = IsSameNames()
    assert is_same(_sample_equation(), _sample_equation(), names, mode)
    assert names.check()


def test_bijective_reflexive_match_maps_every_name_to_itself() -> None:
    names = IsSameNames()
    assert is_same(_sample_equation(), _sample_equation(), names)
    assert names.renaming()["variables"] == {"x": "x", "y": "y"}
    assert names.renaming()["functions"] == {"sin": "sin"}


def test_consistent_renaming_is_accepted() -> None:
    names = IsSameNames()
    assert is_same(simple_add(variable("x"), number(1)), simple_add(variable("y"), number(1)), names)
    assert names.check()
    assert names.variables == {"x": ["y"]}


def test_factor_order_does_not_matter() -> None:
    names = IsSameNames()
    assert is_same(simple_mul(number(2), variable("x")), simple_mul(variable("x"), number(2)), names)
    assert names.check()


def test_function_names_are_recorded() -> None:
    names = IsSameNames()
    assert is_same(function("sin", variable("x")), function("cos", variable("x")), names)
    assert names.functions == {"sin": ["cos"]}


def test_signs_and_shapes_must_agree() -> None:
    assert not is_same(variable("x"), variable("x", Sign.NEGATIVE), IsSameNames())
    assert not is_same(variable("x"), number(1), IsSameNames())
    assert not is_same(number(1), number(2), IsSameNames())
    assert not is_same(simple_add(variable("x"), number(1)), variable("x"), IsSameNames())
    assert not is_same(Equation([variable("x")]), Equation([variable("x"), number(1)]), IsSameNames())


def test_merging_two_names_into_one_fails_check() -> None:
    lhs = simple_add(variable("x"), variable("y"))
    rhs = simple_add(variable("z"), variable("z"))
    assert not is_same(lhs, rhs, IsSameNames(), MatchMode.BIJECTIVE)

    names = IsSameNames()
    assert is_same(lhs, rhs, names, MatchMode.ANY_PAIR)
    assert not names.check()


def test_any_pair_accepts_what_bijective_rejects() -> None:
    lhs = simple_mul(variable("x"), variable("x"))
    rhs = simple_mul(variable("x"), variable("y"))
    names = IsSameNames()
    assert is_same(lhs, rhs, names, MatchMode.ANY_PAIR)
    assert names.check()
    assert not is_same(lhs, rhs, IsSameNames(), MatchMode.BIJECTIVE)


def test_check_requires_single_valued_injective_mapping() -> None:
    assert IsSameNames({"a": ["b", "b"]}).check()
    assert not IsSameNames({"a": ["b", "c"]}).check()
    assert not IsSameNames({"a": ["c"], "b": ["c"]}).check()
    assert not IsSameNames(functions={"f": ["g", "h"]}).check()


def test_empty_sequences_match() -> None:
    assert is_same([], [], IsSameNames())
    assert not is_same([variable("x")], [], IsSameNames())

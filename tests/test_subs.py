from fractions import Fraction

import pytest

from symcore.debug.test_utils import assert_eq_strict, x, y
from symcore.errors import DivisionByZeroError
from symcore.expr import *
from symcore.functions import Derivative, cos, derivative, function_symbol, sin

z = symbols("z")
f = function_symbol("f", x)


def test_no_match_returns_same_object():
    for e in [x + y, x * y * sin(x), (x + 1) ** y, f, derivative(f, x), Integer(3)]:
        assert e.subs({z: 1}) is e
        assert e.subs({}) is e


def test_whole_node_match_wins():
    assert sin(x).subs({sin(x): y}) is y
    assert (x * y).subs({x * y: z}) is z
    assert_eq_strict((2 * x + y).subs({2 * x: z}), z + y)


def test_subs_symbols():
    assert_eq_strict((x + y).subs({x: 1}), y + 1)
    assert_eq_strict((x**2).subs({x: 3}), 9)
    assert_eq_strict((x**2 + x).subs({x: y + 1}), (y + 1) ** 2 + y + 1)
    assert_eq_strict(cos(x**2).subs({x: y}), cos(y**2))
    assert_eq_strict((x * y).subs({x: Fraction(1, 2)}), Fraction(1, 2) * y)


def test_subs_string_keys():
    assert_eq_strict((x * y).subs({"x": 2}), 2 * y)
    assert_eq_strict(subs(x + 1, {"x": 2}), 3)


def test_subs_recanonicalizes():
    assert sin(x).subs({x: 0}) is zero
    assert cos(x - y).subs({y: x}) is one
    assert (x - y).subs({y: x}) is zero
    assert_eq_strict((x * y**-1).subs({y: x}), 1)


def test_subs_is_simultaneous():
    assert_eq_strict((x + 2 * y).subs({x: y, y: x}), y + 2 * x)
    assert_eq_strict((x**y).subs({x: y, y: x}), y**x)


def test_subs_into_powers_can_divide_by_zero():
    with pytest.raises(DivisionByZeroError):
        (1 / x).subs({x: 0})


def test_subs_into_function_symbol():
    assert_eq_strict(f.subs({x: y**2}), function_symbol("f", y**2))
    assert f.subs({f: 1}) is one


def test_subs_into_derivative_reevaluates():
    g = function_symbol("g", y)
    d = derivative(sin(x) * g, x)
    assert_eq_strict(d.subs({g: y**2}), y**2 * cos(x))
    assert_eq_strict(d.subs({y: 0}), cos(x) * function_symbol("g", 0))
    assert_eq_strict(diff(f, x).subs({diff(f, x): 5}), 5)


def test_derivative_variables_are_bound():
    d = diff(f, x)
    assert d.subs({x: y}) is d
    assert d.subs({f: x**3}) is d

    # f'(x + 1) with x + 1 -> y is f'(y), not the derivative of f(y) with respect to x
    d1 = function_symbol("f", x + 1).diff(x)
    assert d1.subs({x + 1: y}) is d1
    assert d1.subs({x + 1: y}) is not zero


def test_derivative_subs_does_not_capture_variables():
    d = derivative(function_symbol("f", x * y), x)
    assert d.subs({y: x}) is d
    assert d.subs({y: x + 1, z: 2}) is d


def test_derivative_at_a_point_stays_unevaluated():
    # there is no node for a derivative evaluated at a point
    d = diff(f, x)
    assert d.subs({x: 0}) == d


def test_subs_free_symbol_in_derivative():
    g = function_symbol("f", x * y)
    d = diff(g, x)
    result = d.subs({y: 2})
    assert isinstance(result, Derivative)
    assert_eq_strict(result, derivative(function_symbol("f", 2 * x), x))
    assert result.subs({function_symbol("f", 2 * x): x**2}) is result

from fractions import Fraction

import pytest

from symcore.debug.test_utils import assert_eq_strict, x, y
from symcore.errors import NotASymbolError
from symcore.expr import Integer, Mul, one, rational, symbols, zero
from symcore.functions import Abs, Cos, Derivative, FunctionSymbol, Sin, abs_, cos, derivative, function_symbol, sin

f = function_symbol("f", x)


def test_trig_at_zero():
    assert sin(0) is zero
    assert cos(0) is one
    assert sin(Integer(0)) is zero
    assert sin(x - x) is zero
    assert cos(x * 0) is one


def test_trig_nodes():
    assert isinstance(sin(x), Sin)
    assert isinstance(cos(1), Cos)
    assert sin(x) == sin(x)
    assert hash(sin(x)) == hash(sin(x))
    assert sin(x) != cos(x)
    assert sin(x) != sin(y)
    assert repr(sin(x + 1)) == "sin(x + 1)"
    assert repr(cos(x) ** 2) == "cos(x)^2"


def test_trig_args_are_canonical():
    assert_eq_strict(sin(x + x), sin(2 * x))
    assert_eq_strict(sin(x) * sin(x), sin(x) ** 2)
    assert_eq_strict(sin(x) + 2 * sin(x), 3 * sin(x))


def test_abs_numbers():
    assert_eq_strict(abs_(-3), 3)
    assert_eq_strict(abs(Integer(-3)), 3)
    assert_eq_strict(abs_(rational(-1, 2)), Fraction(1, 2))
    assert abs_(0) is zero


def test_abs_pulls_out_numbers():
    assert_eq_strict(abs(-2 * x), 2 * abs(x))
    assert_eq_strict(abs(-x), abs(x))
    assert isinstance(abs(-x), Abs)
    assert isinstance(abs(3 * x * y), Mul)
    assert_eq_strict(abs(-x - y), abs(x + y))


def test_abs_keeps_mixed_sums():
    a = abs(x - y)
    assert isinstance(a, Abs)
    assert a.arg == x - y
    assert repr(a) == "|x - y|"


def test_abs_idempotent():
    a = abs(x)
    assert abs(a) is a


def test_function_symbol():
    assert isinstance(f, FunctionSymbol)
    assert f == function_symbol("f", x)
    assert hash(f) == hash(function_symbol("f", x))
    assert f != function_symbol("g", x)
    assert f != function_symbol("f", y)
    assert repr(f) == "f(x)"
    assert repr(function_symbol("g", x * y)) == "g(x*y)"


def test_function_symbol_order():
    # name first, then argument
    assert function_symbol("f", y).compare(function_symbol("g", x)) == -1
    assert function_symbol("f", x).compare(function_symbol("f", y)) == -1


def test_derivative_keeps_variable_order():
    d1 = derivative(f, [x, y])
    d2 = derivative(f, [y, x])
    assert isinstance(d1, Derivative)
    assert d1.variables == (x, y)
    assert d1 != d2
    assert d1 == derivative(f, (x, y))
    assert hash(d1) == hash(derivative(f, [x, y]))
    assert repr(d1) == "D[x, y](f(x))"
    assert derivative(f, [x, x]).variables == (x, x)


def test_derivative_validates_variables():
    with pytest.raises(NotASymbolError):
        derivative(f, 2 * x)
    with pytest.raises(NotASymbolError):
        derivative(f, [x, sin(x)])
    with pytest.raises(TypeError):
        derivative(f, [Integer(2)])


def test_derivative_with_no_variables():
    assert derivative(f, []) is f


def test_function_args():
    z = symbols("z")
    assert sin(x).args == (x,)
    assert f.args == (x,)
    assert derivative(f, [x, z]).args == (f, x, z)
    assert derivative(f, [x, z]).symbols() == [x, z]

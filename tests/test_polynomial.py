from fractions import Fraction

import numpy as np
import pytest

from symcore.debug.test_utils import assert_eq_strict, x, y
from symcore.expr import Integer, sqrt
from symcore.functions import sin
from symcore.polynomial import degree, from_coefficients, is_polynomial, strip_trailing_zeros, to_coefficients


def test_to_coefficients():
    coeffs = to_coefficients((x + 1) ** 2, x)
    assert isinstance(coeffs, np.ndarray)
    assert coeffs.dtype == object
    assert list(coeffs) == [1, 2, 1]


def test_to_coefficients_fills_missing_degrees():
    assert list(to_coefficients(Fraction(1, 2) * x**3 - 3, x)) == [-3, 0, 0, Fraction(1, 2)]
    assert list(to_coefficients(x * (x + 2) - 2 * x, x)) == [0, 0, 1]


def test_to_coefficients_of_constants():
    assert list(to_coefficients(Integer(3), x)) == [3]
    assert list(to_coefficients(x - x, x)) == [0]


@pytest.mark.parametrize("expr", [x * y, sin(x), x**-1, sqrt(x), x + y])
def test_not_a_polynomial(expr):
    with pytest.raises(ValueError):
        to_coefficients(expr, x)
    assert not is_polynomial(expr, x)


def test_is_polynomial():
    assert is_polynomial(x**2 + 1, x)
    assert is_polynomial((x + 1) ** 3 * (x - 2), x)


def test_from_coefficients():
    assert_eq_strict(from_coefficients(np.array([1, 2, 1], dtype=object), x), x**2 + 2 * x + 1)
    assert_eq_strict(from_coefficients(np.array([0, 0, 3], dtype=object), x), 3 * x**2)

    e = (2 * x - 1) ** 4
    assert_eq_strict(from_coefficients(to_coefficients(e, x), x), e.expand())


def test_strip_trailing_zeros_and_degree():
    poly = np.array([1, 2, 0, 0], dtype=object)
    assert list(strip_trailing_zeros(poly)) == [1, 2]
    assert degree(poly) == 1
    assert degree(np.array([0, 0], dtype=object)) == 0
    assert degree(to_coefficients((x + 1) ** 5, x)) == 5

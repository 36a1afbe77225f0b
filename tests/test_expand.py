from symcore.combinatorics import compositions, multinomial_coefficient
from symcore.debug.test_utils import assert_eq_strict, assert_eq_value, unhashable_set_eq, x, y
from symcore.expr import *
from symcore.functions import cos, sin


def test_expand_products():
    assert_eq_strict((x * (x + 1)).expand(), x**2 + x)
    assert_eq_strict(((x + 1) * (x - 1)).expand(), x**2 - 1)
    assert_eq_strict(expand(x * (y + 1)), x * y + x)
    assert_eq_strict(((x + 1) * (y + 1)).expand(), x * y + x + y + 1)


def test_expand_power():
    assert_eq_strict(((x + y) ** 2).expand(), x**2 + 2 * x * y + y**2)
    assert_eq_strict(((x + 1) ** 3).expand(), x**3 + 3 * x**2 + 3 * x + 1)
    assert_eq_strict(((x + y + 1) ** 2).expand(), x**2 + y**2 + 1 + 2 * x * y + 2 * x + 2 * y)
    assert_eq_strict((2 * (x + 1) ** 2).expand(), 2 * x**2 + 4 * x + 2)


def test_expand_power_matches_repeated_product():
    power = (x**3 + 1) ** 6
    a = ((x**3 + 1) ** 2).expand()
    b = ((x**3 + 1) ** 4).expand()
    assert_eq_strict(power.expand(), (a * b).expand())
    assert_eq_value((x + 1) ** 2, x**2 + 2 * x + 1)


def test_expand_negative_power():
    assert_eq_strict(((x + 1) ** -2).expand(), 1 / (x**2 + 2 * x + 1))


def test_expand_recurses_into_functions():
    assert_eq_strict(sin((x + 1) ** 2).expand(), sin(x**2 + 2 * x + 1))
    assert_eq_strict((cos(x * (y + 1)) * (x + 1)).expand(), x * cos(x * y + x) + cos(x * y + x))


def test_expand_already_expanded():
    e = x**2 + 2 * x + 1
    assert e.expand() is e
    assert x.expand() is x
    assert Integer(3).expand() == 3


def test_expand_is_cached():
    e = (x + y) ** 5
    assert e.expand() is e.expand()


def test_compositions():
    assert list(compositions(2, 2)) == [(0, 2), (1, 1), (2, 0)]
    assert list(compositions(4, 1)) == [(4,)]

    result = list(compositions(3, 3))
    assert len(result) == 10
    assert all(sum(c) == 3 for c in result)
    expected = [
        (0, 0, 3),
        (0, 1, 2),
        (0, 2, 1),
        (0, 3, 0),
        (1, 0, 2),
        (1, 1, 1),
        (1, 2, 0),
        (2, 0, 1),
        (2, 1, 0),
        (3, 0, 0),
    ]
    assert unhashable_set_eq(result, expected)


def test_multinomial_coefficient():
    assert multinomial_coefficient([1, 1]) == 2
    assert multinomial_coefficient([2, 1]) == 3
    assert multinomial_coefficient([1, 1, 1]) == 6
    assert multinomial_coefficient([0, 4]) == 1

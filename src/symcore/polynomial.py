from typing import List

import numpy as np

from .expr import Expr, Integer, Mul, Number, Pow, Symbol, _as_coef_term, add, mul, power, zero

Polynomial = np.ndarray  # 1-D object array of Numbers, index = degree


def is_polynomial(expr: Expr, var: Symbol) -> bool:
    try:
        to_coefficients(expr, var)
        return True
    except ValueError:
        return False


def _degree(monomial: Expr, var: Symbol) -> int:
    """Degree of a coefficient-free monomial in var. Raises ValueError if it isn't var^n."""
    if monomial == var:
        return 1
    if isinstance(monomial, Pow) and monomial.base == var:
        exponent = monomial.exponent
        if isinstance(exponent, Integer) and exponent.value >= 1:
            return exponent.value
    raise ValueError(f"Not allowed expr for polynomial in {var}: {monomial}")


def _add_coefficient(answer: List[Number], coef: Number, degree: int) -> None:
    if degree >= len(answer):
        answer += [zero] * (degree + 1 - len(answer))
    answer[degree] = add(answer[degree], coef)


def to_coefficients(expr: Expr, var: Symbol) -> Polynomial:
    """Numeric coefficients of expr as a polynomial in var, lowest degree first.

    expr is expanded first. Raises ValueError if any coefficient isn't a number.

    >>> to_coefficients((x + 1) ** 2, x)
    array([1, 2, 1], dtype=object)
    """
    expr = expr.expand()
    answer: List[Number] = []
    for term in expr.as_terms():
        if isinstance(term, Number):
            _add_coefficient(answer, term, 0)
            continue
        coef, monomial = _as_coef_term(term)
        if isinstance(monomial, Mul):
            raise ValueError(f"Not allowed expr for polynomial in {var}: {term}")
        _add_coefficient(answer, coef, _degree(monomial, var))

    if not answer:
        answer = [zero]
    return np.array(answer, dtype=object)


def from_coefficients(poly: Polynomial, var: Symbol) -> Expr:
    return add(*[mul(c, power(var, i)) for i, c in enumerate(poly)])


def strip_trailing_zeros(poly: Polynomial) -> Polynomial:
    """Drop zero coefficients of the highest degrees, keeping at least the constant."""
    end = len(poly)
    while end > 1 and poly[end - 1] == 0:
        end -= 1
    return np.array(list(poly[:end]), dtype=object)


def degree(poly: Polynomial) -> int:
    return len(strip_trailing_zeros(poly)) - 1

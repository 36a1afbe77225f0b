"""Handle-based API over the kernel, for callers that can't hold Exprs directly.

A `Basic` handle is a mutable box around one (immutable, shared) expression. Every handle has to
come from `basic_new()`, is reassigned only through the setters and `basic_assign`, and must not
be used after `basic_free()`. Operations that can fail on user input return 1 on success and 0
on failure instead of raising.

```
s, x = basic_new(), basic_new()
symbol_set(x, "x")
basic_mul(s, x, x)
basic_str(s)   # 'x^2'
basic_free(s)
basic_free(x)
```
"""

import logging
from fractions import Fraction

from .errors import NotAnIntegerError, NotASymbolError
from .expr import (
    Expr,
    Integer,
    Rational,
    Symbol,
    add,
    div,
    expand,
    integer,
    mul,
    neg,
    number,
    power,
    rational,
    sub,
    zero,
)
from .functions import abs_

logger = logging.getLogger(__name__)


class Basic:
    """Opaque handle holding a reference to an expression."""

    __slots__ = ("_expr",)

    def __init__(self):
        self._expr = zero

    @property
    def expr(self) -> Expr:
        assert self._expr is not None, "Basic handle used after basic_free()"
        return self._expr

    def _set(self, value: Expr) -> None:
        assert self._expr is not None, "Basic handle used after basic_free()"
        self._expr = value

    def __repr__(self) -> str:
        return f"Basic({self._expr!r})" if self._expr is not None else "Basic(<freed>)"


def basic_new() -> Basic:
    """Return a new handle, holding 0."""
    return Basic()


def basic_assign(a: Basic, b: Basic) -> None:
    """Make a hold the same expression as b. The expression is shared, not copied."""
    a._set(b.expr)


def basic_free(s: Basic) -> None:
    assert s._expr is not None, "Basic handle freed twice"
    s._expr = None


def symbol_set(s: Basic, c: str) -> None:
    s._set(Symbol(c))


def integer_set_si(s: Basic, i: int) -> None:
    s._set(integer(i))


def integer_set_ui(s: Basic, i: int) -> None:
    if i < 0:
        raise ValueError(f"integer_set_ui needs a non-negative value, got {i}")
    s._set(integer(i))


def integer_set_mpz(s: Basic, i: int) -> None:
    s._set(integer(i))


def integer_set_str(s: Basic, c: str) -> None:
    """Assign the integer with base 10 representation c."""
    s._set(integer(c))


def _get_integer(s: Basic) -> int:
    assert isinstance(s.expr, Integer), f"{s.expr} is not an Integer"
    return s.expr.value


def integer_get_si(s: Basic) -> int:
    return _get_integer(s)


def integer_get_ui(s: Basic) -> int:
    value = _get_integer(s)
    if value < 0:
        raise ValueError(f"{value} does not fit an unsigned integer")
    return value


def integer_get_mpz(s: Basic) -> int:
    return _get_integer(s)


def rational_set(s: Basic, i: Basic, j: Basic) -> int:
    """Assign i/j. Returns 0 (and leaves s alone) if either i or j is not an Integer."""
    try:
        value = rational(i.expr, j.expr)
    except NotAnIntegerError as e:
        logger.debug("rational_set failed: %s", e)
        return 0
    s._set(value)
    return 1


def rational_set_si(s: Basic, i: int, j: int) -> None:
    s._set(rational(i, j))


def rational_set_ui(s: Basic, i: int, j: int) -> None:
    if i < 0 or j < 0:
        raise ValueError(f"rational_set_ui needs non-negative values, got {i}/{j}")
    s._set(rational(i, j))


def rational_set_mpq(s: Basic, i: Fraction) -> None:
    s._set(number(Fraction(i)))


def basic_add(s: Basic, a: Basic, b: Basic) -> None:
    s._set(add(a.expr, b.expr))


def basic_sub(s: Basic, a: Basic, b: Basic) -> None:
    s._set(sub(a.expr, b.expr))


def basic_mul(s: Basic, a: Basic, b: Basic) -> None:
    s._set(mul(a.expr, b.expr))


def basic_div(s: Basic, a: Basic, b: Basic) -> None:
    s._set(div(a.expr, b.expr))


def basic_pow(s: Basic, a: Basic, b: Basic) -> None:
    s._set(power(a.expr, b.expr))


def basic_diff(s: Basic, expr: Basic, sym: Basic) -> int:
    """Assign the derivative of expr with respect to sym. Returns 0 if sym is not a Symbol."""
    try:
        value = expr.expr.diff(sym.expr)
    except NotASymbolError as e:
        logger.debug("basic_diff failed: %s", e)
        return 0
    s._set(value)
    return 1


def basic_neg(s: Basic, a: Basic) -> None:
    s._set(neg(a.expr))


def basic_abs(s: Basic, a: Basic) -> None:
    s._set(abs_(a.expr))


def basic_expand(s: Basic, a: Basic) -> None:
    s._set(expand(a.expr))


def basic_str(s: Basic) -> str:
    return str(s.expr)


def basic_str_free(s: str) -> None:
    """Counterpart of basic_str. Python strings are garbage collected, so this does nothing."""
    pass


def is_a_Integer(s: Basic) -> int:
    return int(isinstance(s.expr, Integer))


def is_a_Rational(s: Basic) -> int:
    return int(isinstance(s.expr, Rational))


def is_a_Symbol(s: Basic) -> int:
    return int(isinstance(s.expr, Symbol))

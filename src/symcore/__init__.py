"""symcore: an exact symbolic expression kernel.

Arithmetic on expressions is canonicalized as it is built, and expressions can be
differentiated, substituted into and expanded.

>>> from symcore import symbols, sin
>>> x = symbols("x")
>>> (x + x) * x
2*x^2
>>> sin(x**2).diff(x)
2*x*cos(x^2)
"""

import logging

from . import config
from .errors import DivisionByZeroError, NotAnIntegerError, NotASymbolError, SymcoreError
from .expr import (
    Add,
    Expr,
    Integer,
    Mul,
    Number,
    Pow,
    Rational,
    Symbol,
    add,
    diff,
    div,
    expand,
    integer,
    minus_one,
    mul,
    neg,
    number,
    one,
    ordered,
    power,
    rational,
    sqrt,
    sub,
    subs,
    symbols,
    zero,
)
from .functions import Abs, Cos, Derivative, FunctionSymbol, Sin, abs_, cos, derivative, function_symbol, sin

_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
_logger.setLevel(config.get_log_level())

__all__ = [
    "Abs",
    "Add",
    "Cos",
    "Derivative",
    "DivisionByZeroError",
    "Expr",
    "FunctionSymbol",
    "Integer",
    "Mul",
    "NotASymbolError",
    "NotAnIntegerError",
    "Number",
    "Pow",
    "Rational",
    "Sin",
    "Symbol",
    "SymcoreError",
    "abs_",
    "add",
    "cos",
    "derivative",
    "diff",
    "div",
    "expand",
    "function_symbol",
    "integer",
    "minus_one",
    "mul",
    "neg",
    "number",
    "one",
    "ordered",
    "power",
    "rational",
    "sin",
    "sqrt",
    "sub",
    "subs",
    "symbols",
    "zero",
]

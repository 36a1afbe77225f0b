"""Function nodes: sin, cos, abs, opaque named functions and unevaluated derivatives."""

import logging
from abc import abstractmethod
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from .errors import NotASymbolError
from .expr import (
    Add,
    Expr,
    Mul,
    Number,
    Symbol,
    _cast,
    _cmp,
    _compare_seq,
    cast,
    minus_one,
    mul,
    neg,
    number,
    one,
    zero,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False, repr=False)
class SingleFunc(Expr):
    arg: Expr

    @property
    @abstractmethod
    def _label(self) -> str:
        raise NotImplementedError("Label not implemented")

    def _hashable_content(self) -> tuple:
        return (self.arg,)

    def _compare(self, other: "SingleFunc") -> int:
        assert type(other) is type(self), f"Cannot compare {type(self).__name__} with {type(other).__name__}"
        return self.arg.compare(other.arg)

    @property
    def args(self) -> Tuple[Expr, ...]:
        return (self.arg,)

    def __repr__(self) -> str:
        return _repr(self.arg, self._label)


def _repr(arg: Expr, label: str) -> str:
    return f"{label}({arg})"


@cast
def sin(arg: Expr) -> Expr:
    if arg is zero:
        return zero
    # TODO: closed forms for multiples of pi once there is a pi constant
    return Sin(arg)


@cast
def cos(arg: Expr) -> Expr:
    if arg is zero:
        return one
    return Cos(arg)


class Sin(SingleFunc):
    _type_id = 6
    _label = "sin"

    def _canonical(self) -> bool:
        return isinstance(self.arg, Expr) and self.arg is not zero

    def _rebuild(self, args):
        return sin(*args)

    def _diff(self, var: Symbol) -> Expr:
        return mul(cos(self.arg), self.arg._diff(var))


class Cos(SingleFunc):
    _type_id = 7
    _label = "cos"

    def _canonical(self) -> bool:
        return isinstance(self.arg, Expr) and self.arg is not zero

    def _rebuild(self, args):
        return cos(*args)

    def _diff(self, var: Symbol) -> Expr:
        return mul(mul(minus_one, sin(self.arg)), self.arg._diff(var))


@cast
def abs_(arg: Expr) -> Expr:
    """|arg|. Numbers fold; numeric factors and signs are pulled out."""
    if isinstance(arg, Number):
        return number(abs(arg.value))
    if isinstance(arg, Abs):
        return arg
    if isinstance(arg, Mul) and arg.coef is not one:
        return mul(number(abs(arg.coef.value)), abs_(arg._without_coef()))
    if isinstance(arg, Add) and arg.is_subtraction:
        return Abs(neg(arg))
    return Abs(arg)


class Abs(SingleFunc):
    _type_id = 8
    _label = "abs"

    def _canonical(self) -> bool:
        if isinstance(self.arg, (Number, Abs)):
            return False
        if isinstance(self.arg, Mul) and self.arg.coef is not one:
            return False
        return not (isinstance(self.arg, Add) and self.arg.is_subtraction)

    def _rebuild(self, args):
        return abs_(*args)

    def _diff(self, var: Symbol) -> Expr:
        if self.arg._diff(var) is zero:
            return zero
        # There is no sign function to write this in closed form.
        logger.debug("No closed-form derivative of %s with respect to %s, returning a Derivative", self, var)
        return Derivative(self, (var,))

    def __repr__(self) -> str:
        return "|" + repr(self.arg) + "|"


@dataclass(eq=False, repr=False)
class FunctionSymbol(Expr):
    """An unevaluated application name(arg) of an unknown function."""

    name: str
    arg: Expr
    _type_id = 9

    def _canonical(self) -> bool:
        return isinstance(self.name, str) and len(self.name) > 0 and isinstance(self.arg, Expr)

    def _hashable_content(self) -> tuple:
        return (self.name, self.arg)

    def _compare(self, other: "FunctionSymbol") -> int:
        assert type(other) is type(self), f"Cannot compare FunctionSymbol with {type(other).__name__}"
        if self.name == other.name:
            return self.arg.compare(other.arg)
        return _cmp(self.name, other.name)

    @property
    def args(self) -> Tuple[Expr, ...]:
        return (self.arg,)

    def _rebuild(self, args):
        return function_symbol(self.name, *args)

    def _diff(self, var: Symbol) -> Expr:
        if self.arg._diff(var) is zero:
            return zero
        return Derivative(self, (var,))

    def __repr__(self) -> str:
        return _repr(self.arg, self.name)


def function_symbol(name: str, arg: Expr) -> FunctionSymbol:
    return FunctionSymbol(name, _cast(arg))


def derivative(expr: Expr, variables: Union[Symbol, Iterable[Symbol]]) -> Expr:
    """The unevaluated derivative of expr with respect to variables, in order.

    Raises NotASymbolError if any of the variables isn't a Symbol.
    """
    expr = _cast(expr)
    variables = (variables,) if isinstance(variables, Expr) else tuple(variables)
    for v in variables:
        if not isinstance(v, Symbol):
            raise NotASymbolError(f"Can only differentiate with respect to a Symbol, got {v!r}")
    if not variables:
        return expr
    return Derivative(expr, variables)


@dataclass(eq=False, repr=False)
class Derivative(Expr):
    """d/dx_1 d/dx_2 ... arg, kept unevaluated.

    `variables` keeps the order and repeats it was built with; D[x, y] and D[y, x] are
    different nodes even though they are equal as functions.
    """

    arg: Expr
    variables: Tuple[Symbol, ...]
    _type_id = 10

    def _canonical(self) -> bool:
        return (
            isinstance(self.arg, Expr)
            and len(self.variables) > 0
            and all(isinstance(v, Symbol) for v in self.variables)
        )

    def _hashable_content(self) -> tuple:
        return (self.arg, self.variables)

    def _compare(self, other: "Derivative") -> int:
        assert type(other) is type(self), f"Cannot compare Derivative with {type(other).__name__}"
        c = self.arg.compare(other.arg)
        if c != 0:
            return c
        return _compare_seq(self.variables, other.variables)

    @property
    def args(self) -> Tuple[Expr, ...]:
        return (self.arg,) + self.variables

    def _rebuild(self, args: Sequence[Expr]):
        return derivative(args[0], args[1:])

    def _diff(self, var: Symbol) -> Expr:
        # Stays unevaluated: D[x](f(x)).diff(y) is D[x, y](f(x)).
        return Derivative(self.arg, self.variables + (var,))

    def _subs(self, mapping) -> Expr:
        """Substitute into the differentiated expression.

        The variables of differentiation are bound. Keys that depend on one of them are skipped,
        and if a replacement would bring one of them in, nothing is substituted at all.
        Known limitation: there is no node for a derivative evaluated at a point, so
        D[x](f(x)).subs({x: 0}) stays D[x](f(x)), not f'(0).
        """
        if self in mapping:
            return mapping[self]

        inner = {k: v for k, v in mapping.items() if not any(k.contains(s) for s in self.variables)}
        if any(v.contains(s) for v in inner.values() for s in self.variables):
            return self
        new_arg = self.arg._subs(inner)
        if new_arg is self.arg:
            return self

        # arg may now have a closed-form derivative, so differentiate it again.
        result = new_arg
        for v in self.variables:
            result = result._diff(v)
        return result

    def __repr__(self) -> str:
        return "D[" + ", ".join(map(repr, self.variables)) + "](" + repr(self.arg) + ")"

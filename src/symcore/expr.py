"""RULES OF EXPRs:

1. Exprs shall NOT be mutated after their constructor returns. Any "edit" builds a new node.
The only attributes written later are caches of values derived from the node itself (hash, args,
expansion), so sharing a node between many parents (or threads) is always safe.

2. Every node is canonical. The lowercase factories (add, mul, power, rational, sin, ...) are the
construction path: they flatten, fold numbers, merge like terms and sort before allocating.
The class constructors only check (with assert) that what they were handed is already canonical.

Note on equality: (expr1 == expr2) compares **structure**, not value. Because sums, products and
powers have exactly one canonical form, structural equality is what you want most of the time.
Equality is consistent with hashing, so exprs work as dict keys and set members.

Numbers are exact. Python ints and fractions.Fraction do the arithmetic; there are no floats.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from functools import cmp_to_key
from math import gcd
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union

from . import config
from .combinatorics import compositions, multinomial_coefficient
from .errors import DivisionByZeroError, NotAnIntegerError, NotASymbolError

logger = logging.getLogger(__name__)


def _cast(x):
    """Cast x to an Expr if possible."""
    if x is None or isinstance(x, Expr):
        return x

    # bool is an int subclass but True + x is almost certainly a bug
    if isinstance(x, int) and not isinstance(x, bool):
        return Integer(x)
    if isinstance(x, Fraction):
        return number(x)

    if isinstance(x, dict):
        return {k: _cast(v) for k, v in x.items()}
    elif isinstance(x, tuple):
        return tuple(_cast(v) for v in x)
    elif isinstance(x, list):
        return [_cast(v) for v in x]

    if isinstance(x, float):
        raise NotImplementedError(f"Cannot cast {x} to Expr: floats are not supported, use Fraction")
    raise NotImplementedError(f"Cannot cast {x!r} to Expr")


def cast(func):
    """Decorator to cast all arguments to Expr."""

    def wrapper(*args, **kwargs) -> "Expr":
        return func(*map(_cast, args), **{k: _cast(v) for k, v in kwargs.items()})

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _compare_seq(a: Sequence["Expr"], b: Sequence["Expr"]) -> int:
    """Shorter sequences first, then elementwise."""
    if len(a) != len(b):
        return _cmp(len(a), len(b))
    for x, y in zip(a, b):
        c = x.compare(y)
        if c != 0:
            return c
    return 0


def _compare_pairs(a, b) -> int:
    return _compare_seq([v for pair in a for v in pair], [v for pair in b for v in pair])


_expr_key = cmp_to_key(lambda a, b: a.compare(b))


def _pair_key(pair):
    return _expr_key(pair[0])


def ordered(exprs: Iterable["Expr"]) -> List["Expr"]:
    """Sort expressions by the total order `Expr.compare`."""
    return sorted(exprs, key=_expr_key)


class Expr(ABC):
    """Base class for all expressions.

    Every node kind supports hashing, structural equality, the total order `compare`,
    differentiation (`diff`), substitution (`subs`), expansion and printing.
    """

    # Position of the node kind in the cross-kind order:
    # Integer < Rational < Symbol < Mul < Add < Pow < Sin < Cos < Abs < FunctionSymbol < Derivative
    _type_id: int = -1

    # These should never change per instance.
    _hash_cache = None
    _symbols_cache = None
    _expand_cache = None

    def __post_init__(self):
        if config.CHECK_CANONICAL:
            assert self._canonical(), f"Non-canonical {type(self).__name__}{self._hashable_content()!r}"

    def _canonical(self) -> bool:
        """Whether the fields of this node are in canonical form. Overload per node kind."""
        return True

    @abstractmethod
    def _hashable_content(self) -> tuple:
        """The fields that define this node structurally."""
        pass

    def __hash__(self) -> int:
        if self._hash_cache is None:
            self._hash_cache = hash((self._type_id,) + self._hashable_content())
        return self._hash_cache

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
            other = _cast(other)
        if not isinstance(other, Expr):
            return NotImplemented
        return (
            type(self) is type(other)
            and hash(self) == hash(other)
            and self._hashable_content() == other._hashable_content()
        )

    def compare(self, other: "Expr") -> int:
        """Returns -1 if self < other, 0 if they are equal, 1 if self > other.

        Kinds are ordered by `_type_id`; nodes of the same kind by their operands.
        """
        if self is other:
            return 0
        if self._type_id != other._type_id:
            return -1 if self._type_id < other._type_id else 1
        return self._compare(other)

    @abstractmethod
    def _compare(self, other: "Expr") -> int:
        """Same-kind comparison. Callers guarantee `type(other) is type(self)`."""
        pass

    @property
    def args(self) -> Tuple["Expr", ...]:
        """Operands. Calling the node's factory on them rebuilds an equal node."""
        return ()

    def _rebuild(self, args: Sequence["Expr"]) -> "Expr":
        """Build a node of the same kind from new operands, through the factory."""
        raise NotImplementedError(f"Cannot rebuild {self.__class__.__name__}")

    def children(self) -> List["Expr"]:
        return list(self.args)

    @cast
    def __add__(self, other) -> "Expr":
        return add(self, other)

    @cast
    def __radd__(self, other) -> "Expr":
        return add(other, self)

    @cast
    def __sub__(self, other) -> "Expr":
        return sub(self, other)

    @cast
    def __rsub__(self, other) -> "Expr":
        return sub(other, self)

    @cast
    def __mul__(self, other) -> "Expr":
        return mul(self, other)

    @cast
    def __rmul__(self, other) -> "Expr":
        return mul(other, self)

    @cast
    def __truediv__(self, other) -> "Expr":
        return div(self, other)

    @cast
    def __rtruediv__(self, other) -> "Expr":
        return div(other, self)

    @cast
    def __pow__(self, other) -> "Expr":
        return power(self, other)

    @cast
    def __rpow__(self, other) -> "Expr":
        return power(other, self)

    def __neg__(self) -> "Expr":
        return neg(self)

    def __abs__(self) -> "Expr":
        from .functions import abs_

        return abs_(self)

    def diff(self, var: "Symbol") -> "Expr":
        """Derivative with respect to the symbol var."""
        if not isinstance(var, Symbol):
            raise NotASymbolError(f"Can only differentiate with respect to a Symbol, got {var!r}")
        return self._diff(var)

    @abstractmethod
    def _diff(self, var: "Symbol") -> "Expr":
        pass

    def subs(self, mapping: Dict[Union["Expr", str], "Expr"]) -> "Expr":
        """Replace every whole subexpression that is a key of mapping with its value.

        String keys are taken as symbol names. Returns self (the same object) if nothing matched.
        """
        return self._subs(_subs_dict(mapping))

    def _subs(self, mapping: Dict["Expr", "Expr"]) -> "Expr":
        if self in mapping:
            return mapping[self]
        args = self.args
        new_args = [a._subs(mapping) for a in args]
        if all(new is old for new, old in zip(new_args, args)):
            return self
        return self._rebuild(new_args)

    def expand(self) -> "Expr":
        if self._expand_cache is None:
            self._expand_cache = self._expand()
        return self._expand_cache

    # overload if necessary
    def _expand(self) -> "Expr":
        args = self.args
        new_args = [a.expand() for a in args]
        if all(new is old for new, old in zip(new_args, args)):
            return self
        return self._rebuild(new_args)

    def contains(self, var: "Symbol") -> bool:
        return self == var or any(a.contains(var) for a in self.args)

    def has(self, cls: Type["Expr"]) -> bool:
        return isinstance(self, cls) or any(a.has(cls) for a in self.args)

    def _symbols(self) -> List["Symbol"]:
        return ordered({s for a in self.args for s in a.symbols()})

    def symbols(self) -> List["Symbol"]:
        """Get all symbols in the expression."""
        if self._symbols_cache is None:
            self._symbols_cache = self._symbols()
        return self._symbols_cache

    def as_terms(self) -> List["Expr"]:
        if isinstance(self, Add):
            return list(self.args)
        return [self]

    @abstractmethod
    def __repr__(self) -> str:
        raise NotImplementedError(f"Cannot represent {self.__class__.__name__}")

    @property
    def is_subtraction(self) -> bool:
        """Returns True if the expression would be a subtraction when printed in a sum."""
        return False

    @property
    def is_number(self) -> bool:
        return False


class Number(Expr):
    """Base class -- exact numbers.

    Subclasses store `value`: an int for Integer, a reduced Fraction for Rational.
    """

    value: Union[int, Fraction]

    def _hashable_content(self) -> tuple:
        return (self.value,)

    def __hash__(self) -> int:
        # Hash like the plain python value because Integer(2) == 2.
        return hash(self.value)

    def _compare(self, other: "Number") -> int:
        assert type(other) is type(self), f"Cannot compare {type(self).__name__} with {type(other).__name__}"
        return _cmp(self.value, other.value)

    def _diff(self, var) -> "Integer":
        return zero

    def _subs(self, mapping):
        return mapping.get(self, self)

    def _expand(self):
        return self

    def _symbols(self):
        return []

    def contains(self, var) -> bool:
        return False

    def __repr__(self) -> str:
        return str(self.value)

    @cast
    def __ge__(self, other):
        return isinstance(other, Number) and self.value >= other.value

    @cast
    def __gt__(self, other):
        return isinstance(other, Number) and self.value > other.value

    @cast
    def __le__(self, other):
        return isinstance(other, Number) and self.value <= other.value

    @cast
    def __lt__(self, other):
        return isinstance(other, Number) and self.value < other.value

    def _add(self, other: "Number") -> "Number":
        return number(self.value + other.value)

    def _mul(self, other: "Number") -> "Number":
        return number(self.value * other.value)

    def _pow(self, exponent: "Number") -> Optional["Number"]:
        """self**exponent if it is a number, None if it has to stay a Pow."""
        if isinstance(exponent, Integer):
            if self.is_zero and exponent.value < 0:
                raise DivisionByZeroError(f"0 cannot be raised to the negative power {exponent}")
            return number(Fraction(self.value) ** exponent.value)

        # Rational exponent p/q: only exact roots of non-negative numbers are folded.
        if self.value < 0:
            return None
        p, q = exponent.value.numerator, exponent.value.denominator
        num = _exact_root(self.numerator, q)
        den = _exact_root(self.denominator, q)
        if num is None or den is None:
            return None
        if p < 0 and num == 0:
            raise DivisionByZeroError(f"0 cannot be raised to the negative power {exponent}")
        return number(Fraction(num, den) ** p)

    @property
    def is_number(self) -> bool:
        return True

    @property
    def is_subtraction(self) -> bool:
        return self.value < 0

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    @property
    def is_positive(self) -> bool:
        return self.value > 0

    @property
    def is_negative(self) -> bool:
        return self.value < 0

    @property
    def numerator(self) -> int:
        return Fraction(self.value).numerator

    @property
    def denominator(self) -> int:
        return Fraction(self.value).denominator


def _exact_root(n: int, k: int) -> Optional[int]:
    """The integer r with r**k == n, or None. n must be non-negative."""
    if n < 2 or k == 1:
        return n
    # Newton's method from above, all in integers.
    x = 1 << -(-n.bit_length() // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            break
        x = y
    return x if x**k == n else None


class Integer(Number):
    """An arbitrary-precision integer. 0, 1 and -1 are shared singletons."""

    _type_id = 0
    _singletons: Dict[int, "Integer"] = {}

    def __new__(cls, value: int):
        assert isinstance(value, int) and not isinstance(value, bool), f"Integer needs an int, got {value!r}"
        cached = cls._singletons.get(value)
        if cached is not None:
            return cached
        instance = super().__new__(cls)
        instance.value = value
        return instance

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value


class Rational(Number):
    """A rational number p/q with q > 1 and gcd(p, q) == 1. Build it with `rational`."""

    _type_id = 1

    def __init__(self, value: Fraction):
        self.value = value
        self.__post_init__()

    def _canonical(self) -> bool:
        return isinstance(self.value, Fraction) and self.value.denominator > 1

    def __repr__(self) -> str:
        return f"{self.value.numerator}/{self.value.denominator}"


zero = Integer(0)
one = Integer(1)
minus_one = Integer(-1)
Integer._singletons.update({0: zero, 1: one, -1: minus_one})


def number(value: Union[int, Fraction]) -> Number:
    """Wrap an int or Fraction, returning an Integer whenever the value is integral."""
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return Integer(value.numerator)
        return Rational(value)
    return Integer(value)


def integer(value: Union[int, str]) -> Integer:
    """An Integer from an int or a base-10 string."""
    if isinstance(value, str):
        return Integer(int(value, 10))
    return Integer(int(value))


def _as_int(x) -> int:
    if isinstance(x, Integer):
        return x.value
    if isinstance(x, int) and not isinstance(x, bool):
        return x
    raise NotAnIntegerError(f"Expected an Integer, got {x!r}")


def rational(p: Union[Integer, int], q: Union[Integer, int] = 1) -> Number:
    """p/q in lowest terms with the sign on the numerator. Returns an Integer when q divides p."""
    p, q = _as_int(p), _as_int(q)
    if q == 0:
        raise DivisionByZeroError(f"Rational {p}/0 has a zero denominator")
    g = gcd(p, q)
    p, q = p // g, q // g
    if q < 0:
        p, q = -p, -q
    if q == 1:
        return Integer(p)
    return Rational(Fraction(p, q))


@dataclass(eq=False, repr=False)
class Symbol(Expr):
    """A symbol. A variable."""

    name: str
    _type_id = 2

    def _canonical(self) -> bool:
        return isinstance(self.name, str) and len(self.name) > 0

    def _hashable_content(self) -> tuple:
        return (self.name,)

    def _compare(self, other: "Symbol") -> int:
        assert type(other) is type(self), f"Cannot compare Symbol with {type(other).__name__}"
        return _cmp(self.name, other.name)

    def __repr__(self) -> str:
        return self.name

    def _subs(self, mapping):
        return mapping.get(self, self)

    def _diff(self, var) -> Integer:
        return one if self == var else zero

    def _symbols(self) -> List["Symbol"]:
        return [self]


def _dict_add_coef(d: Dict[Expr, Number], term: Expr, coef: Number) -> None:
    if term in d:
        d[term] = d[term]._add(coef)
    else:
        d[term] = coef


def _dict_add_exponent(d: Dict[Expr, Expr], base: Expr, exponent: Expr) -> None:
    if base in d:
        d[base] = add(d[base], exponent)
    else:
        d[base] = exponent


def _pow_from_pair(base: Expr, exponent: Expr) -> Expr:
    """A factor of a Mul as a standalone expr. (base, exponent) is already canonical."""
    if exponent is one:
        return base
    return Pow(base, exponent)


def _coef_times_term(coef: Number, term: Expr) -> Expr:
    """coef * term, where term is a canonical Add term (no numeric coefficient of its own)."""
    if coef is one:
        return term
    if isinstance(term, Mul):
        return Mul(coef, term.pairs)
    if isinstance(term, Pow):
        return Mul(coef, ((term.base, term.exponent),))
    return Mul(coef, ((term, one),))


def _as_coef_term(expr: Expr) -> Tuple[Number, Expr]:
    """2*x*y -> (2, x*y). x -> (1, x)"""
    if isinstance(expr, Mul) and expr.coef is not one:
        return expr.coef, expr._without_coef()
    return one, expr


def _add_flatten(args: Iterable[Expr]) -> Expr:
    """Canonical sum of args.

    - flatten nested sums
    - fold numbers into one coefficient
    - merge like terms by their numeric multiplicity, dropping the ones that cancel
    - sort
    """
    coef: Number = zero
    d: Dict[Expr, Number] = {}
    for arg in args:
        if isinstance(arg, Number):
            coef = coef._add(arg)
        elif isinstance(arg, Add):
            coef = coef._add(arg.coef)
            for term, c in arg.pairs:
                _dict_add_coef(d, term, c)
        else:
            c, term = _as_coef_term(arg)
            _dict_add_coef(d, term, c)

    pairs = [(term, c) for term, c in d.items() if c is not zero]
    if not pairs:
        return coef
    if coef is zero and len(pairs) == 1:
        term, c = pairs[0]
        return _coef_times_term(c, term)
    return Add(coef, tuple(sorted(pairs, key=_pair_key)))


@cast
def add(*args: Expr) -> Expr:
    """Canonical sum of the arguments."""
    return _add_flatten(args)


@cast
def sub(a: Expr, b: Expr) -> Expr:
    return _add_flatten([a, mul(minus_one, b)])


@dataclass(eq=False, repr=False)
class Add(Expr):
    """A sum: coef + c_1*t_1 + c_2*t_2 + ...

    `pairs` holds (term, multiplicity) sorted by term. Build it with `add`.
    """

    coef: Number
    pairs: Tuple[Tuple[Expr, Number], ...]
    _type_id = 4
    _args_cache = None

    def _canonical(self) -> bool:
        return Add.is_canonical(self.coef, self.pairs)

    @staticmethod
    def is_canonical(coef: Number, pairs: Tuple[Tuple[Expr, Number], ...]) -> bool:
        if not isinstance(coef, Number) or len(pairs) == 0:
            return False
        if len(pairs) == 1 and coef is zero:
            return False
        for term, c in pairs:
            if not isinstance(c, Number) or c is zero:
                return False
            if isinstance(term, (Number, Add)):
                return False
            if isinstance(term, Mul) and term.coef is not one:
                return False
        return list(pairs) == sorted(pairs, key=_pair_key)

    def _hashable_content(self) -> tuple:
        return (self.coef, self.pairs)

    def _compare(self, other: "Add") -> int:
        assert type(other) is type(self), f"Cannot compare Add with {type(other).__name__}"
        if len(self.pairs) != len(other.pairs):
            return _cmp(len(self.pairs), len(other.pairs))
        c = _cmp(self.coef.value, other.coef.value)
        if c != 0:
            return c
        return _compare_pairs(self.pairs, other.pairs)

    @property
    def args(self) -> Tuple[Expr, ...]:
        if self._args_cache is None:
            terms = tuple(_coef_times_term(c, term) for term, c in self.pairs)
            self._args_cache = terms if self.coef is zero else terms + (self.coef,)
        return self._args_cache

    def _rebuild(self, args):
        return add(*args)

    def as_dict(self) -> Dict[Expr, Number]:
        return dict(self.pairs)

    def _diff(self, var) -> Expr:
        return add(*[mul(c, term._diff(var)) for term, c in self.pairs])

    def __repr__(self) -> str:
        ongoing_str = ""
        for i, term in enumerate(self.args):
            if i == 0:
                ongoing_str += f"{term}"
            elif term.is_subtraction:
                ongoing_str += f" - {-term}"
            else:
                ongoing_str += f" + {term}"

        return ongoing_str

    @property
    def is_subtraction(self) -> bool:
        return all(t.is_subtraction for t in self.args)


def _mul_flatten(args: Iterable[Expr]) -> Expr:
    """Canonical product of args.

    - flatten nested products
    - fold numbers into one coefficient
    - merge equal bases by adding their exponents, dropping the ones that cancel
    - refold merged factors that simplify (sqrt(2)*sqrt(2) -> 2)
    - sort
    """
    coef: Number = one
    d: Dict[Expr, Expr] = {}
    for arg in args:
        if isinstance(arg, Number):
            coef = coef._mul(arg)
        elif isinstance(arg, Mul):
            coef = coef._mul(arg.coef)
            for base, exponent in arg.pairs:
                _dict_add_exponent(d, base, exponent)
        elif isinstance(arg, Pow):
            _dict_add_exponent(d, arg.base, arg.exponent)
        else:
            _dict_add_exponent(d, arg, one)

    if coef is zero:
        return zero

    pairs = []
    leftovers = []
    for base, exponent in d.items():
        if exponent is zero:
            continue
        if exponent is one and not isinstance(base, (Number, Mul, Pow)):
            pairs.append((base, exponent))
            continue
        factor = power(base, exponent)
        if isinstance(factor, Pow) and factor.base is base and factor.exponent is exponent:
            pairs.append((base, exponent))
        else:
            leftovers.append(factor)

    if leftovers:
        return _mul_flatten([coef] + [_pow_from_pair(b, e) for b, e in pairs] + leftovers)

    if not pairs:
        return coef
    if len(pairs) == 1:
        base, exponent = pairs[0]
        if coef is one:
            return _pow_from_pair(base, exponent)
        if isinstance(base, Add) and exponent is one:
            # A number times a single sum is distributed: 2*(x + y) -> 2*x + 2*y
            return _add_flatten([_mul_flatten([coef, t]) for t in base.args])
    return Mul(coef, tuple(sorted(pairs, key=_pair_key)))


@cast
def mul(*args: Expr) -> Expr:
    """Canonical product of the arguments."""
    return _mul_flatten(args)


@cast
def div(a: Expr, b: Expr) -> Expr:
    return _mul_flatten([a, power(b, minus_one)])


@cast
def neg(a: Expr) -> Expr:
    return _mul_flatten([minus_one, a])


@dataclass(eq=False, repr=False)
class Mul(Expr):
    """A product: coef * b_1^e_1 * b_2^e_2 * ...

    `pairs` holds (base, exponent) sorted by base. Build it with `mul`.
    """

    coef: Number
    pairs: Tuple[Tuple[Expr, Expr], ...]
    _type_id = 3
    _args_cache = None

    def _canonical(self) -> bool:
        return Mul.is_canonical(self.coef, self.pairs)

    @staticmethod
    def is_canonical(coef: Number, pairs: Tuple[Tuple[Expr, Expr], ...]) -> bool:
        if not isinstance(coef, Number) or coef is zero or len(pairs) == 0:
            return False
        if coef is one and len(pairs) == 1:
            return False
        if len(pairs) == 1 and isinstance(pairs[0][0], Add) and pairs[0][1] is one:
            return False
        for base, exponent in pairs:
            if exponent is zero:
                return False
            if isinstance(base, (Number, Mul, Pow)) and isinstance(exponent, Integer):
                return False
            if exponent is not one and not Pow.is_canonical(base, exponent):
                return False
        return list(pairs) == sorted(pairs, key=_pair_key)

    def _hashable_content(self) -> tuple:
        return (self.coef, self.pairs)

    def _compare(self, other: "Mul") -> int:
        assert type(other) is type(self), f"Cannot compare Mul with {type(other).__name__}"
        if len(self.pairs) != len(other.pairs):
            return _cmp(len(self.pairs), len(other.pairs))
        c = _cmp(self.coef.value, other.coef.value)
        if c != 0:
            return c
        return _compare_pairs(self.pairs, other.pairs)

    @property
    def args(self) -> Tuple[Expr, ...]:
        if self._args_cache is None:
            factors = tuple(_pow_from_pair(b, e) for b, e in self.pairs)
            self._args_cache = factors if self.coef is one else (self.coef,) + factors
        return self._args_cache

    def _rebuild(self, args):
        return mul(*args)

    def as_dict(self) -> Dict[Expr, Expr]:
        return dict(self.pairs)

    def _without_coef(self) -> Expr:
        if len(self.pairs) == 1:
            return _pow_from_pair(*self.pairs[0])
        return Mul(one, self.pairs)

    def _diff(self, var) -> Expr:
        factors = [_pow_from_pair(b, e) for b, e in self.pairs]
        terms = []
        for i, factor in enumerate(factors):
            d = factor._diff(var)
            if d is zero:
                continue
            terms.append(mul(self.coef, d, *factors[:i], *factors[i + 1 :]))
        return add(*terms)

    def _expand(self) -> Expr:
        sums: List[Add] = []
        other: List[Expr] = [self.coef]
        changed = False
        for factor in self.args[1:] if self.coef is not one else self.args:
            expanded = factor.expand()
            changed = changed or expanded is not factor
            if isinstance(expanded, Add):
                sums.append(expanded)
            else:
                other.append(expanded)

        if not sums:
            return mul(*other) if changed else self

        # for every combination of terms in the sums, multiply them and add
        return add(*[mul(*other, *terms) for terms in itertools.product(*[s.args for s in sums])])

    def __repr__(self) -> str:
        def _term_repr(term):
            if isinstance(term, Add):
                return "(" + repr(term) + ")"
            return repr(term)

        # special case for subtraction:
        if self.is_subtraction:
            return "-" + _term_repr(-self)

        return "*".join(map(_term_repr, self.args))

    @property
    def is_subtraction(self) -> bool:
        return self.coef.is_negative


def _expand_multinomial(terms: Sequence[Expr], n: int) -> Expr:
    """(t_1 + ... + t_k)^n as a sum of monomials."""
    expanded = []
    for exponents in compositions(n, len(terms)):
        factors = [power(t, k) for t, k in zip(terms, exponents)]
        expanded.append(mul(multinomial_coefficient(list(exponents)), *factors))
    return add(*expanded)


@cast
def power(base: Expr, exponent: Expr) -> Expr:
    """Canonical base**exponent.

    Raises DivisionByZeroError for 0 to a negative power.
    """
    # python and most CASes agree on 0**0 == 1
    if exponent is zero:
        return one
    if exponent is one:
        return base
    if base is one:
        return one
    if base is zero and isinstance(exponent, Number):
        if exponent.is_positive:
            return zero
        raise DivisionByZeroError(f"0 cannot be raised to the negative power {exponent}")
    if isinstance(base, Number) and isinstance(exponent, Number):
        result = base._pow(exponent)
        if result is not None:
            return result
        # b^(n + r) with integer n and 0 < r < 1 is written b^n * b^r, so 2^(3/2) is 2*sqrt(2)
        whole = exponent.numerator // exponent.denominator
        if whole != 0:
            return _mul_flatten([base._pow(Integer(whole)), Pow(base, number(exponent.value - whole))])
        return Pow(base, exponent)
    if isinstance(exponent, Integer):
        if isinstance(base, Pow):
            # (b^e)^n -> b^(e*n) is only safe for integer n
            return power(base.base, mul(base.exponent, exponent))
        if isinstance(base, Mul):
            factors = [power(base.coef, exponent)] + [power(b, mul(e, exponent)) for b, e in base.pairs]
            return _mul_flatten(factors)
    return Pow(base, exponent)


@cast
def sqrt(x: Expr) -> Expr:
    return power(x, Rational(Fraction(1, 2)))


def _needs_parens(expr: Expr) -> bool:
    if isinstance(expr, (Add, Mul, Pow, Rational)):
        return True
    return isinstance(expr, Number) and expr.is_negative


@dataclass(eq=False, repr=False)
class Pow(Expr):
    base: Expr
    exponent: Expr
    _type_id = 5

    def _canonical(self) -> bool:
        return Pow.is_canonical(self.base, self.exponent)

    @staticmethod
    def is_canonical(base: Expr, exponent: Expr) -> bool:
        if exponent is zero or exponent is one or base is one:
            return False
        if base is zero and isinstance(exponent, Number):
            return False
        if isinstance(exponent, Integer):
            # numbers fold, nested powers multiply out and products distribute
            return not isinstance(base, (Number, Pow, Mul))
        if isinstance(base, Number) and isinstance(exponent, Number):
            return 0 < exponent.value < 1 and base._pow(exponent) is None
        return True

    def _hashable_content(self) -> tuple:
        return (self.base, self.exponent)

    def _compare(self, other: "Pow") -> int:
        assert type(other) is type(self), f"Cannot compare Pow with {type(other).__name__}"
        c = self.base.compare(other.base)
        if c != 0:
            return c
        return self.exponent.compare(other.exponent)

    @property
    def args(self) -> Tuple[Expr, ...]:
        return (self.base, self.exponent)

    def _rebuild(self, args):
        return power(*args)

    def _diff(self, var) -> Expr:
        if not self.exponent.contains(var):
            return mul(self.exponent, power(self.base, add(self.exponent, minus_one)), self.base._diff(var))

        # No logarithm node, so b^e with e depending on var stays unevaluated.
        from .functions import Derivative

        logger.debug("No closed-form derivative of %s with respect to %s, returning a Derivative", self, var)
        return Derivative(self, (var,))

    def _expand(self) -> Expr:
        base = self.base.expand()
        exponent = self.exponent.expand()
        if isinstance(base, Add) and isinstance(exponent, Integer):
            expanded = _expand_multinomial(base.args, abs(exponent.value))
            return expanded if exponent.is_positive else power(expanded, minus_one)
        if base is self.base and exponent is self.exponent:
            return self
        new = power(base, exponent)
        if isinstance(new, Pow) and new.base is base and new.exponent is exponent:
            return new
        return new.expand()

    def __repr__(self) -> str:
        def _term_repr(term):
            if _needs_parens(term):
                return "(" + repr(term) + ")"
            return repr(term)

        # special case for sqrt
        if isinstance(self.exponent, Rational) and self.exponent.value == Fraction(1, 2):
            return f"sqrt({self.base})"

        return f"{_term_repr(self.base)}^{_term_repr(self.exponent)}"


def _subs_dict(mapping) -> Dict[Expr, Expr]:
    return {(Symbol(k) if isinstance(k, str) else _cast(k)): _cast(v) for k, v in mapping.items()}


def subs(expr: Expr, mapping: Dict[Union[Expr, str], Expr]) -> Expr:
    return _cast(expr).subs(mapping)


def expand(expr: Expr) -> Expr:
    """Distribute products over sums and expand integer powers of sums."""
    return _cast(expr).expand()


def symbols(symbols: str) -> Union[Symbol, List[Symbol]]:
    """Creates symbols from a string of symbol names seperated by spaces."""
    symbols = [Symbol(name=s) for s in symbols.split(" ")]
    return symbols if len(symbols) > 1 else symbols[0]


@cast
def diff(expr: Expr, var: Optional[Symbol] = None) -> Expr:
    """Takes the derivative of expr relative to var. If expr has only one symbol in it, var doesn't need to be specified.

    Raises NotASymbolError if var is not a Symbol.
    """
    if var is None:
        found = expr.symbols()
        if len(found) != 1:
            raise ValueError(f"Must provide variable of differentiation for {expr}")
        var = found[0]

    return expr.diff(var)

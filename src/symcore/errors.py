class SymcoreError(Exception):
    """Base class for invalid operations a caller can recover from."""

    pass


class NotAnIntegerError(SymcoreError, TypeError):
    """Raised when a rational is built from something that isn't an Integer."""

    pass


class NotASymbolError(SymcoreError, TypeError):
    """Raised when differentiating with respect to something that isn't a Symbol."""

    pass


class DivisionByZeroError(SymcoreError, ZeroDivisionError):
    """Raised for 0 to a negative power and for rationals with a zero denominator."""

    pass

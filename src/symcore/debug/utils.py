from ..expr import Add, Expr, Mul, Number, Pow, Symbol
from ..functions import Derivative, FunctionSymbol, SingleFunc


def debug_repr(expr: Expr) -> str:
    """Structural repr that spells out every node, e.g. Add(1, [(Symbol(x), 2)]).

    Two exprs are structurally equal iff their debug reprs are equal.
    """
    if isinstance(expr, Number):
        return f"{expr.__class__.__name__}({expr})"
    if isinstance(expr, Symbol):
        return f"Symbol({expr.name})"
    if isinstance(expr, (Add, Mul)):
        pairs = ", ".join(f"({debug_repr(a)}, {debug_repr(b)})" for a, b in expr.pairs)
        return f"{expr.__class__.__name__}({expr.coef}, [{pairs}])"
    if isinstance(expr, Pow):
        return f"Pow({debug_repr(expr.base)}, {debug_repr(expr.exponent)})"
    if isinstance(expr, SingleFunc):
        return f"{expr.__class__.__name__}({debug_repr(expr.arg)})"
    if isinstance(expr, FunctionSymbol):
        return f"FunctionSymbol({expr.name}, {debug_repr(expr.arg)})"
    if isinstance(expr, Derivative):
        variables = ", ".join(debug_repr(v) for v in expr.variables)
        return f"Derivative({debug_repr(expr.arg)}, [{variables}])"

    raise NotImplementedError(f"debug_repr not implemented for {expr.__class__.__name__}")

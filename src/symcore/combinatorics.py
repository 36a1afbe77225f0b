import math
from typing import Iterator, List, Tuple


def compositions(n: int, k: int) -> Iterator[Tuple[int, ...]]:
    """
    Yield every tuple of k non-negative ints that sums to n.

    These are the exponent vectors of the terms of (a_1 + ... + a_k)^n.

    >>> list(compositions(2, 2))
    [(0, 2), (1, 1), (2, 0)]
    """
    if k == 1:
        yield (n,)
        return
    for first in range(n + 1):
        for rest in compositions(n - first, k - 1):
            yield (first,) + rest


def multinomial_coefficient(exponents: List[int]) -> int:
    """n! / (k_1! k_2! ... k_m!) where n = sum(k_i)"""
    n = sum(exponents)
    denominator = 1
    for k in exponents:
        denominator *= math.factorial(k)
    return math.factorial(n) // denominator

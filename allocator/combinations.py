"""
allocator/combinations.py
-------------------------
k-subset enumeration for the exhaustive selector.
"""

from __future__ import annotations

import itertools
import math
from typing import Iterator, Tuple


class CombinationGenerator:
    """
    Lazily enumerate every k-subset of ``range(n)``.

    Subsets are ascending tuples produced in lexicographic order, so the
    first subset of size k is ``(0, 1, …, k-1)`` and the last is
    ``(n-k, …, n-1)``.  Each call returns a fresh generator; nothing is
    consumed between calls.
    """

    @staticmethod
    def combinations(n: int, k: int) -> Iterator[Tuple[int, ...]]:
        """
        Yield all ``C(n, k)`` subsets.

        ``k == 0`` yields the single empty tuple; ``k > n`` or ``k < 0``
        yields nothing.
        """
        if n < 0 or k < 0 or k > n:
            return iter(())
        return itertools.combinations(range(n), k)

    @staticmethod
    def count(n: int, k: int) -> int:
        """Number of subsets :meth:`combinations` will yield."""
        if n < 0 or k < 0 or k > n:
            return 0
        return math.comb(n, k)

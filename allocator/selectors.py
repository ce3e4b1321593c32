"""
allocator/selectors.py
----------------------
Subset-selection strategies for the cardinality-constrained problem

    minimise   λ · sqrt(wᵀ Σ w) − wᵀ r
    subject to w equally weighted over S,  |S| ≤ max_count

Both selectors are stateless, compare objectives with a strict ``<`` (first
candidate seen wins a tie) and call an optional *poll* once per evaluation
so an embedding caller can cancel long runs.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from allocator.combinations import CombinationGenerator
from allocator.config import EXHAUSTIVE_SOFT_LIMIT, RISK_AVERSION
from allocator.errors import OptimizationCancelled
from allocator.statistics_engine import StatisticsEngine

logger = logging.getLogger(__name__)

Poll = Optional[Callable[[], bool]]


def _check_poll(poll: Poll) -> None:
    if poll is not None and poll():
        raise OptimizationCancelled("Optimisation cancelled by caller.")


def _subset_objective(
    indices: Sequence[int],
    cov: np.ndarray,
    returns: np.ndarray,
    risk_aversion: float,
) -> float:
    w = StatisticsEngine.equal_weights(len(returns), indices)
    return StatisticsEngine.objective(w, cov, returns, risk_aversion)


class GreedySelector:
    """
    Forward-stepwise selection.

    1. Seed with the asset whose stand-alone objective
       ``λ·sqrt(Σ[i][i]) − r[i]`` is lowest.
    2. Repeatedly add the remaining asset that gives the lowest objective for
       the equally-weighted enlarged set, until ``max_count`` assets are held
       or none remain.

    Cost is ``O(max_count · n)`` objective evaluations of ``O(n²)`` each, so
    ``O(max_count · n³)`` overall.  Not guaranteed optimal; see
    :class:`ExhaustiveSelector` for the exact answer on small catalogues.
    """

    @staticmethod
    def select(
        covariance: np.ndarray,
        returns: np.ndarray,
        max_count: int,
        risk_aversion: float = RISK_AVERSION,
        poll: Poll = None,
    ) -> Tuple[int, ...]:
        """
        Return the chosen indices in selection order.

        An empty catalogue or ``max_count <= 0`` returns ``()``.
        """
        cov = np.asarray(covariance, dtype=float)
        ret = np.asarray(returns, dtype=float)
        n = len(ret)
        if n == 0 or max_count <= 0:
            return ()

        # Seed: single-asset objective, lowest index wins ties
        best_index = -1
        best_score = np.inf
        for i in range(n):
            _check_poll(poll)
            score = (
                risk_aversion * StatisticsEngine.standard_deviation(float(cov[i, i]))
                - float(ret[i])
            )
            if score < best_score:
                best_score = score
                best_index = i
        if best_index < 0:
            # Every seed score was NaN; fall back to the first asset
            best_index = 0

        selected: List[int] = [best_index]
        remaining: List[int] = [i for i in range(n) if i != best_index]

        while len(selected) < max_count and remaining:
            candidate = remaining[0]
            candidate_score = np.inf
            for i in remaining:
                _check_poll(poll)
                score = _subset_objective(selected + [i], cov, ret, risk_aversion)
                if score < candidate_score:
                    candidate_score = score
                    candidate = i

            selected.append(candidate)
            remaining.remove(candidate)
            logger.debug(
                "Greedy step %d: added index %d (objective %.6f)",
                len(selected), candidate, candidate_score,
            )

        return tuple(selected)


class ExhaustiveSelector:
    """
    Global optimum by brute force.

    Scores every subset with ``min_size ≤ |S| ≤ max_count`` in order of
    increasing size, then lexicographic order.  Work is
    ``Σ C(n, size) · O(n²)``, exponential in ``n``; keep catalogues under
    roughly ``EXHAUSTIVE_SOFT_LIMIT`` assets.
    """

    @staticmethod
    def select(
        covariance: np.ndarray,
        returns: np.ndarray,
        min_size: int,
        max_count: int,
        risk_aversion: float = RISK_AVERSION,
        poll: Poll = None,
    ) -> Tuple[int, ...]:
        """
        Return the best subset as an ascending tuple.

        *min_size* is capped at ``n``, so a minimum larger than the catalogue
        still searches the full set.  An empty catalogue returns ``()``.
        """
        cov = np.asarray(covariance, dtype=float)
        ret = np.asarray(returns, dtype=float)
        n = len(ret)
        if n == 0:
            return ()

        if n > EXHAUSTIVE_SOFT_LIMIT:
            logger.warning(
                "Exhaustive search over %d assets exceeds the soft limit of %d; "
                "this may take a very long time.", n, EXHAUSTIVE_SOFT_LIMIT,
            )

        start = max(min(min_size, n), 0)
        best_subset: Tuple[int, ...] = ()
        best_score = np.inf

        for size in range(start, max_count + 1):
            for subset in CombinationGenerator.combinations(n, size):
                _check_poll(poll)
                score = _subset_objective(subset, cov, ret, risk_aversion)
                if score < best_score:
                    best_score = score
                    best_subset = subset

        logger.debug(
            "Exhaustive search over sizes %d..%d picked %s (objective %.6f)",
            start, max_count, best_subset, best_score,
        )
        return best_subset

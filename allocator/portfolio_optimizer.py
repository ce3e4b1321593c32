"""
allocator/portfolio_optimizer.py
--------------------------------
Orchestration layer: PortfolioInput + OptimizationConfig → PortfolioResult.

Design contract:
  - No global settings lookups (config arrives as an argument)
  - No I/O, no caching, no shared state between calls
  - Validation happens before any selection work
  - Fully deterministic apart from the elapsed-time field
    (all methods are @staticmethod)
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from allocator.config import (
    NEGATIVE_VARIANCE_TOLERANCE,
    RISK_AVERSION,
    ROUND_DECIMALS,
)
from allocator.constants import ALGORITHM_REGISTRY, DEFAULT_ALGORITHM
from allocator.enums import Algorithm, SelectionStrategy
from allocator.errors import InvalidConfig, OptimizationError
from allocator.models import (
    OptimizationConfig,
    OptimizationOutcome,
    PortfolioInput,
    PortfolioResult,
    WeightEntry,
)
from allocator.selectors import ExhaustiveSelector, GreedySelector
from allocator.statistics_engine import StatisticsEngine
from allocator.validation import validate_config, validate_input

logger = logging.getLogger(__name__)


class PortfolioOptimizer:
    """
    Choose an equally-weighted subset of properties that minimises
    ``λ · σp − E[Rp]`` under a cardinality cap.

    Algorithms (see ``constants.ALGORITHM_REGISTRY``):
        ``"classical"``  – greedy forward selection (default)
        ``"quantum"``    – alias of ``"classical"``; labelled as a fallback
        ``"bruteForce"`` – exhaustive search, exact but exponential

    The cap is derived from the config::

        max_count = clamp(floor(n · max_assets_percentage / 100), min_assets, n)
    """

    # ------------------------------------------------------------------ #
    #  Public entry points
    # ------------------------------------------------------------------ #

    @staticmethod
    def optimize(
        data: PortfolioInput,
        config: Optional[OptimizationConfig] = None,
        algorithm: Union[Algorithm, str] = DEFAULT_ALGORITHM,
        poll: Optional[Callable[[], bool]] = None,
    ) -> PortfolioResult:
        """
        Run one optimisation.

        Parameters
        ----------
        data:
            Properties, covariance (or correlation) matrix and names.
            Never mutated.
        config:
            Per-run knobs.  ``None`` uses the defaults
            (``min_assets=2``, ``max_assets_percentage=20``).
        algorithm:
            ``Algorithm`` member or its string value.
        poll:
            Optional zero-argument callable invoked once per candidate /
            subset evaluation; returning ``True`` cancels the run.

        Returns
        -------
        PortfolioResult

        Raises
        ------
        InvalidInput
            Shape or value invariant of *data* violated.
        InvalidConfig
            *config* out of range or *algorithm* unknown.
        OptimizationCancelled
            *poll* requested cancellation.
        """
        started = time.perf_counter()
        config = config if config is not None else OptimizationConfig()

        try:
            algo = Algorithm.parse(algorithm)
        except ValueError as exc:
            raise InvalidConfig(str(exc)) from exc

        validate_config(config)
        matrix, warnings = validate_input(data, config.matrix_mode)

        n = data.size
        returns = data.returns_vector()
        max_count = PortfolioOptimizer.max_asset_count(n, config)
        strategy = ALGORITHM_REGISTRY[algo]["selector"]

        logger.debug(
            "Optimising %d properties with %s (max_count=%d, min_assets=%d)",
            n, algo.value, max_count, config.min_assets,
        )

        selected = PortfolioOptimizer._select(
            strategy, matrix, returns, config.min_assets, max_count, poll,
        )

        result = PortfolioOptimizer._assemble(
            data, matrix, returns, selected, algo, warnings, started,
        )
        logger.info(
            "%s optimisation picked %d/%d properties in %d ms "
            "(return=%.4f, risk=%.4f)",
            algo.value, len(selected), n, result.processing_time_ms,
            result.expected_return, result.portfolio_risk,
        )
        return result

    @staticmethod
    def try_optimize(
        data: PortfolioInput,
        config: Optional[OptimizationConfig] = None,
        algorithm: Union[Algorithm, str] = DEFAULT_ALGORITHM,
        poll: Optional[Callable[[], bool]] = None,
    ) -> OptimizationOutcome:
        """
        Same as :meth:`optimize` but returns an ``OptimizationOutcome``
        instead of raising ``OptimizationError`` subclasses.
        """
        try:
            result = PortfolioOptimizer.optimize(data, config, algorithm, poll)
        except OptimizationError as exc:
            logger.warning("Optimisation failed: %s", exc)
            return OptimizationOutcome(success=False, error=exc)
        return OptimizationOutcome(success=True, result=result)

    @staticmethod
    def max_asset_count(n: int, config: OptimizationConfig) -> int:
        """
        Cardinality cap for a catalogue of *n* properties.

        ``floor(n · pct / 100)`` raised to ``min_assets`` and then capped
        at ``n``.  An empty catalogue gives ``0``.
        """
        if n <= 0:
            return 0
        cap = int(math.floor(n * config.max_assets_percentage / 100.0))
        return min(max(cap, config.min_assets), n)

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _select(
        strategy: SelectionStrategy,
        matrix: np.ndarray,
        returns: np.ndarray,
        min_assets: int,
        max_count: int,
        poll: Optional[Callable[[], bool]],
    ) -> tuple:
        """Dispatch to the selector registered for the algorithm."""
        if strategy is SelectionStrategy.EXHAUSTIVE:
            return ExhaustiveSelector.select(
                matrix, returns, min_assets, max_count, RISK_AVERSION, poll,
            )
        return GreedySelector.select(matrix, returns, max_count, RISK_AVERSION, poll)

    @staticmethod
    def _assemble(
        data: PortfolioInput,
        matrix: np.ndarray,
        returns: np.ndarray,
        selected: Sequence[int],
        algo: Algorithm,
        warnings: List[str],
        started: float,
    ) -> PortfolioResult:
        """Compute final metrics for the equal-weight selection and round them."""
        weights = StatisticsEngine.equal_weights(data.size, selected)

        expected_return = StatisticsEngine.dot(weights, returns)
        variance = StatisticsEngine.quadratic_form(weights, matrix)
        if variance < -NEGATIVE_VARIANCE_TOLERANCE:
            msg = (
                f"Portfolio variance is negative ({variance:.6g}); the matrix is "
                "not positive semi-definite. Portfolio risk was clamped to 0."
            )
            logger.warning(msg)
            warnings = warnings + [msg]

        portfolio_risk = StatisticsEngine.standard_deviation(variance)
        objective_value = StatisticsEngine.objective(
            weights, matrix, returns, RISK_AVERSION,
        )
        asset_risks = StatisticsEngine.asset_risks(matrix)

        entries = tuple(
            WeightEntry(
                property=name,
                weight=_r(weights[i]),
                expected_return=_r(data.properties[i].expected_return),
                risk=_r(asset_risks[i]),
            )
            for i, name in enumerate(data.property_names)
        )

        elapsed_ms = int(round((time.perf_counter() - started) * 1000))

        return PortfolioResult(
            weights=entries,
            expected_return=_r(expected_return),
            variance=_r(variance),
            portfolio_risk=_r(portfolio_risk),
            objective_value=_r(objective_value),
            processing_time_ms=max(elapsed_ms, 0),
            selected_indices=tuple(int(i) for i in selected),
            weight_vector=tuple(float(w) for w in weights),
            algorithm=algo,
            warnings=tuple(warnings),
        )


def _r(value: float) -> float:
    """Round to ``ROUND_DECIMALS`` places, normalising ``-0.0`` to ``0.0``."""
    return round(float(value), ROUND_DECIMALS) + 0.0

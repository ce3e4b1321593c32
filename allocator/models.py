"""
allocator/models.py
-------------------
Plain data carriers passed between the caller and the optimiser.

Everything here is frozen: the core never mutates a ``PortfolioInput`` and a
``PortfolioResult`` is immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from allocator.config import DEFAULT_MAX_ASSETS_PERCENTAGE, DEFAULT_MIN_ASSETS
from allocator.constants import ALGORITHM_REGISTRY
from allocator.enums import Algorithm, MatrixMode


@dataclass(frozen=True)
class Property:
    """A candidate asset: display name plus expected return (decimal)."""
    name: str
    expected_return: float


@dataclass(frozen=True)
class PortfolioInput:
    """
    Validated ``(properties, covariance_matrix, property_names)`` triple
    supplied by the data source.

    ``covariance_matrix`` may be a list of lists or a ``numpy`` array; rows
    and columns are positionally aligned with ``properties``.
    """
    properties: Tuple[Property, ...]
    covariance_matrix: Sequence[Sequence[float]]
    property_names: Tuple[str, ...]

    @classmethod
    def from_returns(
        cls,
        names: Sequence[str],
        returns: Sequence[float],
        matrix: Sequence[Sequence[float]],
    ) -> "PortfolioInput":
        """Build an input from parallel name / return sequences."""
        properties = tuple(
            Property(name=str(n), expected_return=float(r))
            for n, r in zip(names, returns)
        )
        return cls(
            properties=properties,
            covariance_matrix=matrix,
            property_names=tuple(str(n) for n in names),
        )

    @property
    def size(self) -> int:
        return len(self.properties)

    def returns_vector(self) -> np.ndarray:
        return np.array([p.expected_return for p in self.properties], dtype=float)


@dataclass(frozen=True)
class OptimizationConfig:
    """
    Per-run knobs loaded once by the caller (see ``SettingsStore``).

    ``matrix_mode`` selects whether the matrix diagonal is read as variances
    (``COVARIANCE``) or the matrix is a correlation matrix used under unit
    variances (``CORRELATION``).
    """
    min_assets: int = DEFAULT_MIN_ASSETS
    max_assets_percentage: float = DEFAULT_MAX_ASSETS_PERCENTAGE
    matrix_mode: MatrixMode = MatrixMode.COVARIANCE


@dataclass(frozen=True)
class WeightEntry:
    """One row of the allocation detail table."""
    property: str
    weight: float
    expected_return: float
    risk: float


@dataclass(frozen=True)
class PortfolioResult:
    """
    Output of a single optimisation run.

    ``weights`` and the scalar metrics are rounded for display.
    ``weight_vector`` keeps the exact ``0`` / ``1/k`` weights and
    ``selected_indices`` the selection order, both unrounded.
    ``processing_time_ms`` and ``algorithm`` are left out of equality and
    hashing, so a quantum run compares equal to the classical one.
    """
    weights: Tuple[WeightEntry, ...]
    expected_return: float
    variance: float
    portfolio_risk: float
    objective_value: float
    processing_time_ms: int = field(compare=False)
    selected_indices: Tuple[int, ...] = ()
    weight_vector: Tuple[float, ...] = ()
    algorithm: Algorithm = field(default=Algorithm.CLASSICAL, compare=False)
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def selected_properties(self) -> List[str]:
        """Names of the selected assets in selection order."""
        return [self.weights[i].property for i in self.selected_indices]

    def to_dict(self) -> dict:
        """JSON-ready payload for a renderer, including the algorithm label."""
        info = ALGORITHM_REGISTRY[self.algorithm]
        return {
            "weights": [
                {
                    "property":       w.property,
                    "weight":         w.weight,
                    "expectedReturn": w.expected_return,
                    "risk":           w.risk,
                }
                for w in self.weights
            ],
            "expectedReturn":   self.expected_return,
            "variance":         self.variance,
            "portfolioRisk":    self.portfolio_risk,
            "objectiveValue":   self.objective_value,
            "processingTimeMs": self.processing_time_ms,
            "algorithm":        self.algorithm.value,
            "algorithmLabel":   info["display"],
            "isFallback":       info["fallback"],
            "warnings":         list(self.warnings),
        }


@dataclass(frozen=True)
class OptimizationOutcome:
    """Explicit success / failure union returned by ``try_optimize``."""
    success: bool
    result: Optional[PortfolioResult] = None
    error: Optional[Exception] = None

    def unwrap(self) -> PortfolioResult:
        """Return the result or re-raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.result

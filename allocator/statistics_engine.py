"""
allocator/statistics_engine.py
------------------------------
Pure numeric routines behind the optimiser.

Design contract:
  - No selection logic
  - No rounding (rounding happens once, at result assembly)
  - Fully deterministic and stateless (all methods are @staticmethod)
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from allocator.config import RISK_AVERSION
from allocator.errors import DimensionMismatch


class StatisticsEngine:
    """
    Vector / matrix helpers for portfolio return, variance and the
    risk-aversion-weighted objective::

        E[Rp]     = wᵀ r
        σp²       = wᵀ Σ w
        objective = λ · σp − E[Rp]          (lower is better)
    """

    # ------------------------------------------------------------------
    # Linear algebra
    # ------------------------------------------------------------------

    @staticmethod
    def dot(a: Sequence[float], b: Sequence[float]) -> float:
        """
        Inner product of two equal-length vectors.

        Raises
        ------
        DimensionMismatch
            If ``len(a) != len(b)``.
        """
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
        if a.shape != b.shape or a.ndim != 1:
            raise DimensionMismatch(
                f"dot() needs two vectors of equal length "
                f"(got shapes {a.shape} and {b.shape})."
            )
        return float(np.dot(a, b))

    @staticmethod
    def mat_vec(matrix: Sequence[Sequence[float]], w: Sequence[float]) -> np.ndarray:
        """Matrix-vector product ``M · w``."""
        m = np.asarray(matrix, dtype=float)
        v = np.asarray(w, dtype=float)
        if m.ndim != 2 or v.ndim != 1 or m.shape[1] != v.shape[0]:
            raise DimensionMismatch(
                f"Cannot multiply matrix of shape {m.shape} "
                f"by vector of shape {v.shape}."
            )
        return m @ v

    @staticmethod
    def quadratic_form(w: Sequence[float], matrix: Sequence[Sequence[float]]) -> float:
        """
        Portfolio variance ``wᵀ Σ w``.

        The result is returned as computed, which may be slightly (or, for a
        non-PSD matrix, substantially) negative.  Use
        :meth:`standard_deviation` to turn it into a risk figure.

        Raises
        ------
        DimensionMismatch
            Unless ``len(w) == rows == cols``.
        """
        m = np.asarray(matrix, dtype=float)
        v = np.asarray(w, dtype=float)
        if m.ndim != 2 or m.shape[0] != m.shape[1] or v.shape != (m.shape[0],):
            raise DimensionMismatch(
                f"quadratic_form() needs a square matrix matching the weight "
                f"vector (got matrix {m.shape}, weights {v.shape})."
            )
        return float(v @ StatisticsEngine.mat_vec(m, v))

    # ------------------------------------------------------------------
    # Risk / objective
    # ------------------------------------------------------------------

    @staticmethod
    def standard_deviation(variance: float) -> float:
        """``sqrt(max(variance, 0))``. Negative variance is clamped, never raised."""
        if not variance > 0.0:
            return 0.0
        return math.sqrt(variance)

    @staticmethod
    def objective(
        w: Sequence[float],
        matrix: Sequence[Sequence[float]],
        returns: Sequence[float],
        risk_aversion: float = RISK_AVERSION,
    ) -> float:
        """``risk_aversion · σp − E[Rp]`` for weight vector *w*."""
        variance = StatisticsEngine.quadratic_form(w, matrix)
        return (
            risk_aversion * StatisticsEngine.standard_deviation(variance)
            - StatisticsEngine.dot(w, returns)
        )

    # ------------------------------------------------------------------
    # Weight vectors
    # ------------------------------------------------------------------

    @staticmethod
    def equal_weights(n: int, indices: Iterable[int]) -> np.ndarray:
        """
        Equally-weighted vector of length *n* over *indices*.

        Selected entries are exactly ``1/k``; all others are ``0``.  An empty
        selection yields the all-zero vector (no division by zero).
        """
        w = np.zeros(n, dtype=float)
        chosen = list(indices)
        if chosen:
            w[chosen] = 1.0 / len(chosen)
        return w

    @staticmethod
    def asset_risks(matrix: Sequence[Sequence[float]]) -> list[float]:
        """Per-asset standard deviation ``sqrt(Σ[i][i])``, clamped at zero."""
        diag = np.diag(np.asarray(matrix, dtype=float))
        return [StatisticsEngine.standard_deviation(float(v)) for v in diag]

"""
allocator/validation.py
-----------------------
Fail-fast checks run before any selection work begins.

``validate_input`` either raises ``InvalidInput`` or returns the matrix as a
float ``numpy`` array together with a list of non-fatal data-quality
warnings.  ``validate_config`` raises ``InvalidConfig``.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import List, Tuple

import numpy as np

from allocator.config import CORRELATION_TOLERANCE, SYMMETRY_TOLERANCE
from allocator.enums import MatrixMode
from allocator.errors import InvalidConfig, InvalidInput
from allocator.models import OptimizationConfig, PortfolioInput

logger = logging.getLogger(__name__)


def validate_config(config: OptimizationConfig) -> None:
    """
    Check the per-run knobs.

    Raises
    ------
    InvalidConfig
        * ``min_assets`` is not an integer ≥ 1 (``bool`` is rejected).
        * ``max_assets_percentage`` is not a finite number in ``(0, 100]``.
        * ``matrix_mode`` is not a ``MatrixMode``.
    """
    min_assets = config.min_assets
    if (
        isinstance(min_assets, bool)
        or not isinstance(min_assets, numbers.Integral)
        or min_assets < 1
    ):
        raise InvalidConfig(
            f"min_assets must be an integer >= 1 (got {min_assets!r})."
        )

    pct = config.max_assets_percentage
    if (
        isinstance(pct, bool)
        or not isinstance(pct, numbers.Real)
        or not math.isfinite(pct)
        or not 0 < pct <= 100
    ):
        raise InvalidConfig(
            f"max_assets_percentage must be in (0, 100] (got {pct!r})."
        )

    if not isinstance(config.matrix_mode, MatrixMode):
        raise InvalidConfig(
            f"matrix_mode must be a MatrixMode (got {config.matrix_mode!r})."
        )


def validate_input(
    data: PortfolioInput,
    mode: MatrixMode = MatrixMode.COVARIANCE,
) -> Tuple[np.ndarray, List[str]]:
    """
    Check the ``PortfolioInput`` invariants.

    Returns
    -------
    (matrix, warnings)
        ``matrix`` is an ``n×n`` float array (``0×0`` for an empty
        catalogue).  ``warnings`` lists recoverable data-quality issues.

    Raises
    ------
    InvalidInput
        * ``property_names`` and ``properties`` differ in length.
        * The matrix is not square or its size differs from ``n``.
        * Any return or matrix entry is non-finite.
        * A diagonal entry is negative.
        * In ``CORRELATION`` mode, a diagonal entry is not 1 or an entry
          lies outside ``[-1, 1]``.
    """
    n = len(data.properties)

    if len(data.property_names) != n:
        raise InvalidInput(
            f"{len(data.property_names)} property names were supplied "
            f"for {n} properties."
        )

    returns = [p.expected_return for p in data.properties]
    for idx, r in enumerate(returns):
        if not isinstance(r, numbers.Real) or not math.isfinite(r):
            raise InvalidInput(
                f"Expected return for {data.property_names[idx]!r} "
                f"is not a finite number ({r!r})."
            )

    rows = data.covariance_matrix
    if len(rows) != n:
        raise InvalidInput(
            f"Covariance matrix has {len(rows)} rows "
            f"but {n} properties were provided."
        )
    for row_idx, row in enumerate(rows):
        if not hasattr(row, "__len__"):
            raise InvalidInput(
                f"Covariance matrix row {row_idx} is a scalar, not a row."
            )
        if len(row) != n:
            raise InvalidInput(
                f"Covariance matrix must be square N×N. "
                f"Row {row_idx} has {len(row)} columns, expected {n}."
            )

    try:
        raw = np.asarray(rows, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Covariance matrix is not numeric: {exc}") from exc
    if n and raw.ndim != 2:
        raise InvalidInput(
            f"Covariance matrix must be two-dimensional "
            f"(got an array of shape {raw.shape})."
        )
    matrix = raw.reshape(n, n)

    if not np.all(np.isfinite(matrix)):
        raise InvalidInput("Covariance matrix contains NaN or infinite entries.")

    diag = np.diag(matrix)
    negative = [i for i in range(n) if diag[i] < 0.0]
    if negative:
        raise InvalidInput(
            f"Covariance matrix has negative variance on the diagonal "
            f"for {[data.property_names[i] for i in negative]}."
        )

    if mode is MatrixMode.CORRELATION:
        _check_correlation(matrix, data)

    warnings: List[str] = []
    asymmetry = float(np.max(np.abs(matrix - matrix.T))) if n else 0.0
    if asymmetry > SYMMETRY_TOLERANCE:
        msg = (
            f"Matrix is not symmetric (max |M[i][j] - M[j][i]| = {asymmetry:.3g}); "
            "results use it as given."
        )
        logger.warning(msg)
        warnings.append(msg)

    return matrix, warnings


def _check_correlation(matrix: np.ndarray, data: PortfolioInput) -> None:
    diag = np.diag(matrix)
    off_unit = [
        data.property_names[i]
        for i in range(len(diag))
        if abs(diag[i] - 1.0) > CORRELATION_TOLERANCE
    ]
    if off_unit:
        raise InvalidInput(
            f"Correlation matrix must have a unit diagonal; "
            f"offending properties: {off_unit}."
        )
    if matrix.size and float(np.max(np.abs(matrix))) > 1.0 + CORRELATION_TOLERANCE:
        raise InvalidInput("Correlation matrix entries must lie in [-1, 1].")

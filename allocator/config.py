"""
allocator/config.py
-------------------
Shared numeric configuration for the optimiser.

Per-run knobs (``min_assets``, ``max_assets_percentage``) travel inside an
explicit ``OptimizationConfig``; this file only owns the defaults and the
tunables that are fixed for every run.
"""

# ---------------------------------------------------------------------------
# Objective
# ---------------------------------------------------------------------------
# Risk-aversion weight λ in   objective = λ · σp − E[Rp]
#
# With λ = 20 the risk term dominates for typical property returns
# (0–15% p.a.), so the optimiser behaves like a minimum-risk selector that
# only breaks near-ties on return.

RISK_AVERSION: float = 20.0

# ---------------------------------------------------------------------------
# OptimizationConfig defaults
# ---------------------------------------------------------------------------

DEFAULT_MIN_ASSETS: int = 2
DEFAULT_MAX_ASSETS_PERCENTAGE: float = 20.0

# ---------------------------------------------------------------------------
# Result assembly
# ---------------------------------------------------------------------------
# Every real number emitted in a PortfolioResult is rounded to this many
# decimal places.  Intermediate arithmetic is never rounded.

ROUND_DECIMALS: int = 4

# ---------------------------------------------------------------------------
# Input validation tolerances
# ---------------------------------------------------------------------------

SYMMETRY_TOLERANCE: float = 1e-8      # |M[i][j] - M[j][i]| above this → warning
CORRELATION_TOLERANCE: float = 1e-6   # slack on unit diagonal / [-1, 1] bounds
NEGATIVE_VARIANCE_TOLERANCE: float = 1e-12  # σp² below −tol → data-quality warning

# ---------------------------------------------------------------------------
# Exhaustive search
# ---------------------------------------------------------------------------
# Above this many assets the subset enumeration becomes impractically slow
# (2^18 ≈ 262k subsets, each an O(n²) evaluation).  Not enforced, only logged.

EXHAUSTIVE_SOFT_LIMIT: int = 18

# ---------------------------------------------------------------------------
# Settings store
# ---------------------------------------------------------------------------

SETTINGS_FILENAME: str = "portfolio_options.json"

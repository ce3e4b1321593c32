"""
allocator/errors.py
-------------------
Exception hierarchy for the optimiser.

All errors derive from ``ValueError`` so callers that already guard numeric
input with ``except ValueError`` keep working.
"""


class OptimizationError(ValueError):
    """Base class for every failure surfaced by the optimiser."""


class InvalidInput(OptimizationError):
    """The PortfolioInput violates a shape or value invariant."""


class InvalidConfig(OptimizationError):
    """The OptimizationConfig (or algorithm choice) is out of range."""


class DimensionMismatch(OptimizationError):
    """Vector / matrix shapes disagree inside an arithmetic routine."""


class OptimizationCancelled(OptimizationError):
    """The caller's poll callback requested cancellation."""

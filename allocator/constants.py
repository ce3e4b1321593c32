"""
allocator/constants.py
----------------------
Algorithm registry shared by the optimiser and any result renderer.

Keeping the label → selector mapping in one table means the facade and the
display layer cannot disagree about what an algorithm actually runs.
"""

from __future__ import annotations

from allocator.enums import Algorithm, SelectionStrategy


# ---------------------------------------------------------------------------
# Algorithm registry
# ---------------------------------------------------------------------------
# Each entry drives:
#   - PortfolioOptimizer dispatch (selector)
#   - PortfolioResult.to_dict() labelling (display, fallback)
#
# QUANTUM intentionally maps onto the greedy classical selector.  No quantum
# backend exists; the label is kept so the UI can offer the mode and flag it
# as a fallback.  Changing it to a different code path is a product decision.
# ---------------------------------------------------------------------------

ALGORITHM_REGISTRY: dict[Algorithm, dict] = {
    Algorithm.CLASSICAL: {
        "display":  "Classical (greedy)",
        "selector": SelectionStrategy.GREEDY,
        "fallback": False,
    },
    Algorithm.QUANTUM: {
        "display":  "Quantum (classical fallback)",
        "selector": SelectionStrategy.GREEDY,
        "fallback": True,
    },
    Algorithm.BRUTE_FORCE: {
        "display":  "Brute force (exhaustive)",
        "selector": SelectionStrategy.EXHAUSTIVE,
        "fallback": False,
    },
}

DEFAULT_ALGORITHM: Algorithm = Algorithm.CLASSICAL

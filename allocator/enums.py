from enum import Enum, auto


class Algorithm(Enum):
    """Algorithm label chosen by the caller / shown by the renderer."""
    CLASSICAL = "classical"
    QUANTUM = "quantum"          # classical fallback, see constants.ALGORITHM_REGISTRY
    BRUTE_FORCE = "bruteForce"

    @classmethod
    def parse(cls, value) -> "Algorithm":
        """Accept an ``Algorithm`` or its string value (case/underscore tolerant)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(
            f"Unknown algorithm: {value!r}. "
            f"Choose from {[m.value for m in cls]}."
        )


class SelectionStrategy(Enum):
    """Subset-selection routine an algorithm maps onto."""
    GREEDY = auto()
    EXHAUSTIVE = auto()


class MatrixMode(Enum):
    """How the input matrix should be read."""
    COVARIANCE = "covariance"    # diagonal holds per-asset variances
    CORRELATION = "correlation"  # used as covariance under unit variances

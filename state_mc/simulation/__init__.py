"""Monte Carlo estimation engine."""

from .estimator import (
    ProbabilityEstimator,
    estimate,
    count_hits,
    exact_probability,
    DEFAULT_CHUNK_SIZE,
)
from .seeds import SeedSource

__all__ = [
    "ProbabilityEstimator",
    "estimate",
    "count_hits",
    "exact_probability",
    "DEFAULT_CHUNK_SIZE",
    "SeedSource",
]

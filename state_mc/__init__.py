"""
state_mc: Monte Carlo probability of composed integer states.

Build a state from Discrete / Interval leaves with negate, and_of, or_of,
then estimate the probability that a uniform integer energy lies inside it.
"""

from .errors import StateMCError, InvalidPredicate, InvalidArgument
from .states import (
    StatePredicate,
    Discrete,
    Interval,
    Not,
    And,
    Or,
    discrete,
    interval,
    negate,
    and_of,
    or_of,
    union_of,
    intersection_of,
)
from .simulation import ProbabilityEstimator, estimate, exact_probability, SeedSource

__version__ = "0.1.0"

__all__ = [
    "StateMCError",
    "InvalidPredicate",
    "InvalidArgument",
    "StatePredicate",
    "Discrete",
    "Interval",
    "Not",
    "And",
    "Or",
    "discrete",
    "interval",
    "negate",
    "and_of",
    "or_of",
    "union_of",
    "intersection_of",
    "ProbabilityEstimator",
    "estimate",
    "exact_probability",
    "SeedSource",
]

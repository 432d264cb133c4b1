"""State predicate algebra and builders."""

from .algebra import (
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
    iter_nodes,
    leaf_count,
    depth,
)
from .builders import union_of, intersection_of, scattered_union, build_state

__all__ = [
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
    "iter_nodes",
    "leaf_count",
    "depth",
    "union_of",
    "intersection_of",
    "scattered_union",
    "build_state",
]

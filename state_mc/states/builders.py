"""
Builders for composite states.

Folds that grow a union or intersection one leaf at a time, and the
two states the reference experiments sample (an ordered interval and a
scattered union of points).
"""

from functools import reduce
from typing import Iterable, Union
import logging

import numpy as np

from ..errors import InvalidArgument, InvalidPredicate
from ..types import ExperimentConfig
from .algebra import (
    StatePredicate,
    Discrete,
    Interval,
    and_of,
    or_of,
    leaf_count,
    depth,
)

logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.SeedSequence, None]


def union_of(predicates: Iterable[StatePredicate]) -> StatePredicate:
    """
    Fold predicates into a left-nested Or tree.

    union_of([a, b, c]) == Or(Or(a, b), c). A single predicate is returned
    as is. Each step builds a new root; the previous accumulator is simply
    dropped.

    Raises:
        InvalidPredicate: If predicates is empty
    """
    return _fold(or_of, predicates, "union")


def intersection_of(predicates: Iterable[StatePredicate]) -> StatePredicate:
    """Fold predicates into a left-nested And tree (see union_of)."""
    return _fold(and_of, predicates, "intersection")


def scattered_union(
    start: int,
    count: int,
    max_step: int = 4,
    seed: SeedLike = None
) -> StatePredicate:
    """
    Union of `count` Discrete points with random gaps.

    The first point is `start`; every next point lies 1..max_step
    (uniform, inclusive) above the previous one.

    Args:
        start: Energy of the first point
        count: Number of points (>= 1)
        max_step: Largest gap between consecutive points (>= 1)
        seed: Seed for the gap generator

    Returns:
        Left-nested Or tree with `count` Discrete leaves
    """
    if count < 1:
        raise InvalidArgument(f"scattered_union needs count >= 1, got {count}")
    if max_step < 1:
        raise InvalidArgument(f"scattered_union needs max_step >= 1, got {max_step}")

    rng = np.random.default_rng(seed)
    steps = rng.integers(1, max_step, size=count - 1, endpoint=True)
    points = np.concatenate(([0], np.cumsum(steps))) + start

    return union_of(Discrete(int(point)) for point in points)


def build_state(config: ExperimentConfig, seed: SeedLike = None) -> StatePredicate:
    """
    Build the state an experiment config names.

    - ordered:   Interval(0, bound // 2)
    - scattered: bound // 2 points starting at -bound, gaps 1..scatter_max_step
    """
    if config.state_kind == "ordered":
        state = Interval(0, config.bound // 2)
    elif config.state_kind == "scattered":
        state = scattered_union(
            -config.bound, config.bound // 2, config.scatter_max_step, seed
        )
    else:
        raise InvalidArgument(f"Unknown state_kind '{config.state_kind}'")

    logger.info(
        "Built %s state: %d leaves, depth %d",
        config.state_kind, leaf_count(state), depth(state)
    )
    return state


def _fold(combine, predicates: Iterable[StatePredicate], what: str) -> StatePredicate:
    iterator = iter(predicates)
    try:
        first = next(iterator)
    except StopIteration:
        raise InvalidPredicate(f"Cannot build the {what} of no states") from None
    if not isinstance(first, StatePredicate):
        raise InvalidPredicate(
            f"Cannot build a {what} from {type(first).__name__}"
        )
    return reduce(combine, iterator, first)

"""
Monte Carlo probability estimator.

Draws energies uniformly from a closed integer range and reports the
fraction that falls inside a state. Draws are generated and evaluated
in fixed-size chunks, so memory stays bounded for any sample count and
a given (seed, range, sample_count, chunk_size) always replays the same
draw sequence.
"""

import operator
from dataclasses import dataclass
from typing import Tuple, Union
import logging

import numpy as np

from ..errors import InvalidArgument
from ..states.algebra import StatePredicate

logger = logging.getLogger(__name__)


SeedLike = Union[int, np.random.SeedSequence, None]

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)

# Draws evaluated per predicate.mask() call
DEFAULT_CHUNK_SIZE = 1_000_000

# Largest range exact_probability() will enumerate
MAX_EXACT_SPAN = 10 ** 9


def count_hits(
    predicate: StatePredicate,
    lo: int,
    hi: int,
    sample_count: int,
    seed: SeedLike = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> int:
    """
    Count how many of `sample_count` uniform draws from [lo, hi] the state contains.

    Args:
        predicate: State to test
        lo, hi: Inclusive sampling range (lo <= hi, both within int64)
        sample_count: Number of draws (> 0)
        seed: int or SeedSequence for a reproducible draw; None for OS entropy
        chunk_size: Max draws held in memory at once

    Returns:
        Number of draws inside the state

    Raises:
        InvalidArgument: On a bad range, sample count, chunk size or seed
    """
    lo, hi = _validate_range(lo, hi)
    sample_count = _validate_positive(sample_count, "sample_count")
    chunk_size = _validate_positive(chunk_size, "chunk_size")
    seed = _validate_seed(seed)

    rng = np.random.default_rng(seed)

    hits = 0
    remaining = sample_count
    while remaining > 0:
        n = min(remaining, chunk_size)
        draws = rng.integers(lo, hi, size=n, endpoint=True)
        hits += int(np.count_nonzero(predicate.mask(draws)))
        remaining -= n

    logger.debug(f"{hits}/{sample_count} draws from [{lo}, {hi}] inside state")
    return hits


def estimate(
    predicate: StatePredicate,
    lo: int,
    hi: int,
    sample_count: int,
    seed: SeedLike = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> float:
    """
    Estimate P(energy in state) for energy ~ Uniform{lo, ..., hi}.

    Returns:
        hits / sample_count, a float in [0, 1]

    Raises:
        InvalidArgument: sample_count == 0 (or negative), lo > hi,
            bounds outside int64
    """
    hits = count_hits(predicate, lo, hi, sample_count, seed, chunk_size)
    return hits / sample_count


def exact_probability(
    predicate: StatePredicate,
    lo: int,
    hi: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> float:
    """
    True fraction of [lo, hi] inside the state, by exhaustive evaluation.

    Cost is linear in the width of the range; ranges wider than
    MAX_EXACT_SPAN are refused.
    """
    lo, hi = _validate_range(lo, hi)
    chunk_size = _validate_positive(chunk_size, "chunk_size")

    span = hi - lo + 1
    if span > MAX_EXACT_SPAN:
        raise InvalidArgument(
            f"Range [{lo}, {hi}] too wide for exact evaluation "
            f"({span} > {MAX_EXACT_SPAN} values)"
        )

    hits = 0
    for start in range(lo, hi + 1, chunk_size):
        stop = min(start + chunk_size, hi + 1)
        values = np.arange(start, stop, dtype=np.int64)
        hits += int(np.count_nonzero(predicate.mask(values)))

    return hits / span


@dataclass
class ProbabilityEstimator:
    """
    Estimator bound to one sampling range [e_min, e_max].

    Attributes:
        e_min: Lowest energy drawn
        e_max: Highest energy drawn
        chunk_size: Max draws held in memory at once
    """
    e_min: int
    e_max: int
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        self.e_min, self.e_max = _validate_range(self.e_min, self.e_max)
        self.chunk_size = _validate_positive(self.chunk_size, "chunk_size")

    @property
    def span(self) -> int:
        """Number of distinct energies in the range."""
        return self.e_max - self.e_min + 1

    def estimate(
        self,
        predicate: StatePredicate,
        sample_count: int,
        seed: SeedLike = None
    ) -> float:
        return estimate(
            predicate, self.e_min, self.e_max, sample_count, seed, self.chunk_size
        )

    def count_hits(
        self,
        predicate: StatePredicate,
        sample_count: int,
        seed: SeedLike = None
    ) -> int:
        return count_hits(
            predicate, self.e_min, self.e_max, sample_count, seed, self.chunk_size
        )

    def exact(self, predicate: StatePredicate) -> float:
        return exact_probability(predicate, self.e_min, self.e_max, self.chunk_size)


def _validate_range(lo, hi) -> Tuple[int, int]:
    lo = _as_int(lo, "lo")
    hi = _as_int(hi, "hi")
    if lo > hi:
        raise InvalidArgument(f"Sampling range is empty: lo={lo} > hi={hi}")
    if lo < INT64_MIN or hi > INT64_MAX:
        raise InvalidArgument(
            f"Sampling range [{lo}, {hi}] exceeds int64 [{INT64_MIN}, {INT64_MAX}]"
        )
    return lo, hi


def _validate_positive(value, name: str) -> int:
    value = _as_int(value, name)
    if value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value}")
    return value


def _as_int(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidArgument(f"{name} must be an integer, got bool")
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgument(
            f"{name} must be an integer, got {type(value).__name__}"
        ) from None


def _validate_seed(seed) -> SeedLike:
    if seed is None or isinstance(seed, np.random.SeedSequence):
        return seed
    seed = _as_int(seed, "seed")
    if seed < 0:
        raise InvalidArgument(f"seed must be non-negative, got {seed}")
    return seed

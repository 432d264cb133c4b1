"""
Convergence metrics for tiered Monte Carlo estimates.

For each sample-count tier, compares the spread of repeated estimates
with the exact probability and with the binomial standard error
sqrt(q(1-q)/n) a single estimate should show.
"""

import numpy as np
import pandas as pd
from scipy import stats
from typing import List, Sequence
import logging

from ..errors import InvalidArgument
from ..types import TierMetrics

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_LEVEL = 0.95


def compute_tier_metrics(
    estimates: np.ndarray,
    sample_count: int,
    true_probability: float,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> TierMetrics:
    """
    Summarize the repeated estimates of one tier.

    The confidence interval pools every run of the tier into one binomial
    sample of n_runs * sample_count draws and uses the Wilson score method.

    Args:
        estimates: [n_runs] per-run estimates (hits / sample_count)
        sample_count: Draws per estimate
        true_probability: Exact probability of the state over the range
        confidence_level: Coverage of the pooled interval

    Returns:
        TierMetrics for the tier
    """
    estimates = np.asarray(estimates, dtype=np.float64)
    n_runs = len(estimates)

    if n_runs == 0:
        raise InvalidArgument("compute_tier_metrics needs at least one estimate")
    if sample_count <= 0:
        raise InvalidArgument(f"sample_count must be positive, got {sample_count}")
    if not 0.0 <= true_probability <= 1.0:
        raise InvalidArgument(
            f"true_probability must be in [0, 1], got {true_probability}"
        )
    if not 0.0 < confidence_level < 1.0:
        raise InvalidArgument(
            f"confidence_level must be in (0, 1), got {confidence_level}"
        )

    q = true_probability
    total_draws = n_runs * sample_count
    total_hits = int(np.rint(estimates.sum() * sample_count))

    ci = stats.binomtest(total_hits, total_draws).proportion_ci(
        confidence_level=confidence_level, method='wilson'
    )

    return TierMetrics(
        sample_count=sample_count,
        n_runs=n_runs,
        true_probability=q,
        mean=float(estimates.mean()),
        std=float(estimates.std(ddof=1)) if n_runs > 1 else 0.0,
        mean_abs_error=float(np.abs(estimates - q).mean()),
        expected_std_error=float(np.sqrt(q * (1.0 - q) / sample_count)),
        ci_low=float(ci.low),
        ci_high=float(ci.high),
    )


def is_converging(metrics: Sequence[TierMetrics], tolerance: float = 0.0) -> bool:
    """
    True if mean absolute error never grows as the sample count grows.

    Args:
        metrics: Tier metrics in any order
        tolerance: Allowed absolute increase between consecutive tiers
    """
    ordered = sorted(metrics, key=lambda m: m.sample_count)
    for smaller, larger in zip(ordered, ordered[1:]):
        if larger.mean_abs_error > smaller.mean_abs_error + tolerance:
            logger.info(
                "Error grew from %.5f (n=%d) to %.5f (n=%d)",
                smaller.mean_abs_error, smaller.sample_count,
                larger.mean_abs_error, larger.sample_count
            )
            return False
    return True


def summarize_tiers(metrics: List[TierMetrics]) -> pd.DataFrame:
    """One row per tier, ordered by sample count."""
    columns = list(TierMetrics.__dataclass_fields__)
    df = pd.DataFrame([m.to_dict() for m in metrics], columns=columns)
    return df.sort_values('sample_count').reset_index(drop=True)

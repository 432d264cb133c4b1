"""
Core data structures for the state_mc experiment harness.

Predicates live in state_mc.states; this module holds the configuration
and result records that flow through the experiment pipeline.
"""

import operator
from dataclasses import dataclass, field
from typing import List, Dict, Any
import numpy as np

from .errors import InvalidArgument


# Kinds of state an experiment can be configured with
STATE_KINDS = ("ordered", "scattered")


@dataclass
class ExperimentConfig:
    """
    Parameters of one tiered sampling experiment.

    Attributes:
        name: Experiment identifier (used for the summary filename)
        state_kind: "ordered" (Interval(0, bound // 2)) or
            "scattered" (union of bound // 2 Discrete points)
        bound: Energies are sampled from [-bound, bound]
        base: Sample counts grow as base ** power
        max_power: Last tier is base ** max_power samples
        n_calls: Independent estimates per tier
        scatter_max_step: Max gap between consecutive scattered points
        output_suffix: Tier files are named f"{power}{output_suffix}"
    """
    name: str
    state_kind: str = "ordered"
    bound: int = 1000
    base: int = 10
    max_power: int = 6
    n_calls: int = 1000
    scatter_max_step: int = 4
    output_suffix: str = ".out"

    def __post_init__(self) -> None:
        for name in ('bound', 'base', 'max_power', 'n_calls', 'scatter_max_step'):
            setattr(self, name, _config_int(getattr(self, name), name))
        if self.state_kind not in STATE_KINDS:
            raise InvalidArgument(
                f"Unknown state_kind '{self.state_kind}'. "
                f"Expected one of {', '.join(STATE_KINDS)}."
            )
        if self.bound < 2:
            raise InvalidArgument("ExperimentConfig.bound must be at least 2.")
        if self.base < 2:
            raise InvalidArgument("ExperimentConfig.base must be at least 2.")
        if self.max_power < 0:
            raise InvalidArgument("ExperimentConfig.max_power must be non-negative.")
        if self.n_calls < 1:
            raise InvalidArgument("ExperimentConfig.n_calls must be positive.")
        if self.scatter_max_step < 1:
            raise InvalidArgument("ExperimentConfig.scatter_max_step must be positive.")

    @property
    def sample_counts(self) -> List[int]:
        """Sample count of every tier, smallest first."""
        return [self.base ** power for power in range(self.max_power + 1)]

    @property
    def sampling_range(self) -> tuple:
        return (-self.bound, self.bound)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'state_kind': self.state_kind,
            'bound': self.bound,
            'base': self.base,
            'max_power': self.max_power,
            'n_calls': self.n_calls,
            'scatter_max_step': self.scatter_max_step,
            'output_suffix': self.output_suffix,
        }


def _config_int(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidArgument(f"ExperimentConfig.{name} must be an integer, got bool")
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgument(
            f"ExperimentConfig.{name} must be an integer, got {type(value).__name__}"
        ) from None


@dataclass
class TierResult:
    """
    Raw estimates of one sample-count tier.

    Attributes:
        power: Tier exponent (sample_count == base ** power)
        sample_count: Draws per estimate
        estimates: [n_calls] float64 per-run probability estimates
    """
    power: int
    sample_count: int
    estimates: np.ndarray = field(repr=False)

    @property
    def n_runs(self) -> int:
        return len(self.estimates)


@dataclass
class TierMetrics:
    """
    Accuracy of one tier against the exact probability.

    Attributes:
        sample_count: Draws per estimate
        n_runs: Number of independent estimates
        true_probability: Exact fraction of the range inside the state
        mean: Mean of the estimates
        std: Sample standard deviation of the estimates (0 for one run)
        mean_abs_error: Mean |estimate - true_probability|
        expected_std_error: Binomial sqrt(q(1-q)/n) for one estimate
        ci_low, ci_high: Wilson interval on the pooled hit count
    """
    sample_count: int
    n_runs: int
    true_probability: float
    mean: float
    std: float
    mean_abs_error: float
    expected_std_error: float
    ci_low: float
    ci_high: float

    def to_dict(self) -> Dict:
        """Convert to serializable dict."""
        return {
            'sample_count': self.sample_count,
            'n_runs': self.n_runs,
            'true_probability': self.true_probability,
            'mean': self.mean,
            'std': self.std,
            'mean_abs_error': self.mean_abs_error,
            'expected_std_error': self.expected_std_error,
            'ci_low': self.ci_low,
            'ci_high': self.ci_high,
        }

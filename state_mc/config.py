"""
Configuration management for state_mc experiments.

Experiment presets and JSON loading utilities.
"""

import json
from typing import Dict

from .types import ExperimentConfig


# =============================================================================
# Experiment Presets
# =============================================================================

DEFAULT_BOUND = 1000
DEFAULT_BASE = 10
DEFAULT_MAX_POWER = 6
DEFAULT_N_CALLS = 1000

EXPERIMENT_PRESETS: Dict[str, ExperimentConfig] = {
    # Interval(0, 500) over [-1000, 1000]; exact probability 501/2001.
    'ordered': ExperimentConfig(
        name="ordered",
        state_kind="ordered",
        bound=DEFAULT_BOUND,
        base=DEFAULT_BASE,
        max_power=DEFAULT_MAX_POWER,
        n_calls=DEFAULT_N_CALLS,
        output_suffix="_ordered.out",
    ),

    # 500 points from -1000 upward, gaps of 1..4.
    'scattered': ExperimentConfig(
        name="scattered",
        state_kind="scattered",
        bound=DEFAULT_BOUND,
        base=DEFAULT_BASE,
        max_power=DEFAULT_MAX_POWER,
        n_calls=DEFAULT_N_CALLS,
        scatter_max_step=4,
        output_suffix="_random.out",
    ),

    # Smoke-run sizes: tiers 1..10^4, 50 calls each.
    'ordered_quick': ExperimentConfig(
        name="ordered_quick",
        state_kind="ordered",
        max_power=4,
        n_calls=50,
        output_suffix="_ordered.out",
    ),

    'scattered_quick': ExperimentConfig(
        name="scattered_quick",
        state_kind="scattered",
        max_power=4,
        n_calls=50,
        output_suffix="_random.out",
    ),
}

REFERENCE_PRESETS = ('ordered', 'scattered')


# =============================================================================
# JSON Loading Utilities
# =============================================================================

def load_experiment_from_json(path: str) -> ExperimentConfig:
    """
    Load experiment configuration from JSON file.

    Expected format (every key but "name" optional):
    {
        "name": "ordered",
        "state_kind": "ordered",
        "bound": 1000,
        "base": 10,
        "max_power": 6,
        "n_calls": 1000,
        "scatter_max_step": 4,
        "output_suffix": "_ordered.out"
    }
    """
    with open(path, 'r') as f:
        data = json.load(f)

    return ExperimentConfig(
        name=data['name'],
        state_kind=data.get('state_kind', 'ordered'),
        bound=data.get('bound', DEFAULT_BOUND),
        base=data.get('base', DEFAULT_BASE),
        max_power=data.get('max_power', DEFAULT_MAX_POWER),
        n_calls=data.get('n_calls', DEFAULT_N_CALLS),
        scatter_max_step=data.get('scatter_max_step', 4),
        output_suffix=data.get('output_suffix', '.out'),
    )


def save_experiment_to_json(config: ExperimentConfig, path: str):
    """Save experiment configuration to JSON file."""
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

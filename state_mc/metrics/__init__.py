"""Convergence metrics for tiered estimates."""

from .convergence import compute_tier_metrics, is_converging, summarize_tiers

__all__ = ['compute_tier_metrics', 'is_converging', 'summarize_tiers']

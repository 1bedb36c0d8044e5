"""Simulated datasets for the worked prediction examples."""

from .datasets import simulate_linear_data, simulate_linear_mixed_data, simulate_poisson_glmm_data

__all__ = ["simulate_linear_data", "simulate_linear_mixed_data", "simulate_poisson_glmm_data"]

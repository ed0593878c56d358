"""Configuration constants for the subscription KNN pipeline."""

from __future__ import annotations

from dataclasses import dataclass


# Train/test partition
SPLIT_FRACTION = 0.75
SEED = 123

# Number of neighbours that vote on a prediction
N_NEIGHBORS = 5

# Outlier cutoffs applied during cleaning
PLAYED_HOURS_MAX = 20.0
AGE_MAX = 35.0

# Histogram bin counts
PLAYED_HOURS_BINS = 20
AGE_BINS = 15


@dataclass(frozen=True)
class PipelineConfig:
    """All tunable values for one pipeline run."""

    split_fraction: float = SPLIT_FRACTION
    seed: int = SEED
    k: int = N_NEIGHBORS
    played_hours_max: float = PLAYED_HOURS_MAX
    age_max: float = AGE_MAX
    played_hours_bins: int = PLAYED_HOURS_BINS
    age_bins: int = AGE_BINS

    def __post_init__(self):
        if not 0.0 < self.split_fraction < 1.0:
            raise ValueError(
                f"split_fraction must be between 0 and 1, got {self.split_fraction}"
            )
        if self.k < 1:
            raise ValueError(f"k must be at least 1, got {self.k}")
        if self.played_hours_bins < 1 or self.age_bins < 1:
            raise ValueError("Histogram bin counts must be at least 1")


DEFAULT_CONFIG = PipelineConfig()

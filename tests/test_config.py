"""
Unit tests for pipeline configuration.
"""

import dataclasses

import pytest

from subscription_knn.config import DEFAULT_CONFIG, PipelineConfig


def test_defaults():
    """Test the default configuration constants."""
    assert DEFAULT_CONFIG.split_fraction == 0.75
    assert DEFAULT_CONFIG.seed == 123
    assert DEFAULT_CONFIG.k == 5
    assert DEFAULT_CONFIG.played_hours_max == 20
    assert DEFAULT_CONFIG.age_max == 35
    assert DEFAULT_CONFIG.played_hours_bins == 20
    assert DEFAULT_CONFIG.age_bins == 15


@pytest.mark.parametrize("kwargs", [
    {"split_fraction": 0.0},
    {"split_fraction": 1.0},
    {"k": 0},
    {"played_hours_bins": 0},
    {"age_bins": -1},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        PipelineConfig(**kwargs)


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.seed = 7

"""
Tests for SimConfig validation and helpers.
"""

import pytest

from distbody import DEFAULT_COMPUTE_TIMEOUT, MAX_STEPS, ConfigurationError, SimConfig


class TestSimConfig:
    """Test SimConfig."""

    def test_defaults_are_valid(self):
        cfg = SimConfig().validate()
        assert cfg.G == 6.67430e-11
        assert cfg.steps == 100_000
        assert cfg.report_every == 1
        assert cfg.workers >= 1
        assert cfg.on_coincident == "raise"
        assert cfg.executor == "thread"
        assert cfg.compute_timeout == DEFAULT_COMPUTE_TIMEOUT

    @pytest.mark.parametrize(
        "changes",
        [
            {"steps": -1},
            {"steps": MAX_STEPS + 1},
            {"steps": 2.5},
            {"report_every": -1},
            {"workers": 0},
            {"timeout": 0.0},
            {"compute_timeout": 0.0},
            {"compute_timeout": float("inf")},
            {"executor": "gpu"},
            {"on_coincident": "ignore"},
            {"G": float("nan")},
        ],
    )
    def test_invalid_values_rejected(self, changes):
        with pytest.raises(ConfigurationError):
            SimConfig(**changes).validate()

    def test_max_steps_is_allowed(self):
        SimConfig(steps=MAX_STEPS).validate()

    def test_replace_and_copy_do_not_alias(self):
        cfg = SimConfig(steps=5)
        other = cfg.replace(steps=7, partition=True)
        clone = cfg.copy()
        clone.steps = 9
        assert cfg.steps == 5
        assert other.steps == 7 and other.partition

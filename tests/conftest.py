"""
Pytest configuration and shared fixtures for distbody tests.
"""

import numpy as np
import pytest

from distbody import BodySet, SimConfig, earth_moon


@pytest.fixture
def two_body():
    """The built-in Earth-Moon system."""
    return earth_moon()


@pytest.fixture
def cluster():
    """Six bodies with distinct positions, reproducible from a fixed seed."""
    rng = np.random.default_rng(7)
    masses = rng.uniform(1e20, 1e22, 6)
    positions = rng.uniform(-1e8, 1e8, (6, 2))
    velocities = rng.uniform(-50.0, 50.0, (6, 2))
    return BodySet(masses, positions, velocities)


@pytest.fixture
def quiet_config():
    """A short run with reporting switched off and a test-friendly timeout."""
    return SimConfig(steps=20, report_every=0, workers=3, timeout=10.0)

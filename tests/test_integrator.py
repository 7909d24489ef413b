"""
Tests for the semi-implicit Euler integrator.
"""

import numpy as np
import pytest

from distbody import BodySet, Integrator, InvalidMass, ProtocolMismatch


class TestIntegrator:
    """Test Integrator.step."""

    def test_velocity_then_position_with_new_velocity(self):
        bodies = BodySet.from_arrays([2.0], [(1.0, 1.0)], [(0.5, -0.5)])
        Integrator().step(bodies, np.array([[4.0, 2.0]]))
        # acc = (2, 1); v = (2.5, 0.5); x = (3.5, 1.5)
        assert bodies.vel[0].tolist() == [2.5, 0.5]
        assert bodies.pos[0].tolist() == [3.5, 1.5]

    def test_zero_force_is_free_drift(self, cluster):
        before = cluster.copy()
        Integrator().step(cluster, np.zeros((len(cluster), 2)))
        assert np.array_equal(cluster.vel, before.vel)
        assert np.array_equal(cluster.pos, before.pos + before.vel)

    def test_invalid_mass_leaves_every_body_untouched(self, cluster):
        cluster[3].mass = 0.0
        before = cluster.copy()
        forces = np.ones((len(cluster), 2))
        with pytest.raises(InvalidMass) as info:
            Integrator().step(cluster, forces)
        assert info.value.index == 3
        assert cluster.state_equal(before)

    def test_negative_mass(self, cluster):
        cluster[0].mass = -1.0
        with pytest.raises(InvalidMass):
            Integrator().step(cluster, np.zeros((len(cluster), 2)))

    def test_force_array_must_match_body_count(self, cluster):
        with pytest.raises(ProtocolMismatch):
            Integrator().step(cluster, np.zeros((len(cluster) - 1, 2)))

    def test_counts_steps(self, two_body):
        integrator = Integrator()
        for _ in range(3):
            integrator.step(two_body, np.zeros((2, 2)))
        assert integrator.steps_taken == 3

"""
Tests for conserved-quantity diagnostics and the physics helpers.
"""

import io

import numpy as np
import pytest

from distbody import (
    BodySet,
    Diagnostics,
    NBodySimulation,
    PrintReporter,
    SimConfig,
    remove_center_of_mass_velocity,
    total_momentum,
)


class TestPhysicsUtils:
    """Test total_momentum and remove_center_of_mass_velocity."""

    def test_total_momentum(self):
        p = total_momentum(np.array([1.0, 2.0]), np.array([[1.0, 0.0], [0.0, 3.0]]))
        assert p.tolist() == [1.0, 6.0]

    def test_center_of_mass_frame_has_no_momentum(self, cluster):
        vel = remove_center_of_mass_velocity(cluster.mass, cluster.vel)
        p = total_momentum(cluster.mass, vel)
        scale = np.sum(cluster.mass[:, None] * np.abs(cluster.vel))
        assert np.all(np.abs(p) <= 1e-12 * scale)

    def test_single_body_is_unchanged(self):
        vel = np.array([[1.0, 2.0]])
        assert np.array_equal(remove_center_of_mass_velocity(np.array([3.0]), vel), vel)


class TestDiagnostics:
    """Test the Diagnostics class."""

    def test_energies_for_simple_pair(self):
        bodies = BodySet.from_arrays([1.0, 2.0], [(0.0, 0.0), (2.0, 0.0)], [(1.0, 0.0), (0.0, 1.0)])
        diag = Diagnostics(bodies, G=1.0)
        assert diag.kinetic_energy() == pytest.approx(0.5 * 1.0 + 0.5 * 2.0)
        assert diag.potential_energy() == pytest.approx(-1.0)
        assert diag.center_of_mass().tolist() == pytest.approx([4.0 / 3.0, 0.0])

    def test_momentum_drift_stays_small(self, two_body):
        diag = Diagnostics(two_body, G=6.67430e-11)
        NBodySimulation(two_body, SimConfig(steps=50, report_every=0)).run()
        assert diag.momentum_drift() < 1e-12

    def test_rate_limit_is_per_instance(self, cluster, capsys):
        first = Diagnostics(cluster, G=6.67430e-11)
        second = Diagnostics(cluster.copy(), G=6.67430e-11)
        first.rate_limited_print("drift", "[warning] first", interval=60.0)
        first.rate_limited_print("drift", "[warning] first again", interval=60.0)
        second.rate_limited_print("drift", "[warning] second", interval=60.0)
        assert capsys.readouterr().out.splitlines() == ["[warning] first", "[warning] second"]

    def test_summary_keys(self, cluster):
        summary = Diagnostics(cluster, G=6.67430e-11).summary()
        assert set(summary) == {"kinetic", "potential", "energy", "px", "py", "momentum_drift", "com_x", "com_y"}


class TestPrintReporter:
    """Test the text reporter."""

    def test_output_format(self, two_body):
        out = io.StringIO()
        NBodySimulation(two_body, SimConfig(steps=2, report_every=1), reporter=PrintReporter(out)).run()
        lines = out.getvalue().splitlines()
        assert lines[0] == "Initial positions:"
        assert lines[1] == "Body(mass=5.972e+24, x=0.0, y=0.0, vx=0.0, vy=0.0)"
        assert lines[3] == "Step 0"
        assert lines[6] == "Step 1"
        assert lines[9] == "Final positions:"
        assert len(lines) == 12

    def test_diagnostics_line(self, two_body):
        out = io.StringIO()
        reporter = PrintReporter(out, diagnostics=True)
        NBodySimulation(two_body, SimConfig(steps=1, report_every=1), reporter=reporter).run()
        text = out.getvalue()
        assert text.count("drift=") == 3

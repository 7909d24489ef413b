"""
Tests for built-in and CSV-loaded initial conditions.
"""

import pytest

from distbody import (
    ConfigurationError,
    InvalidMass,
    center_of_mass_frame,
    earth_moon,
    load_bodies,
    total_momentum,
)


class TestEarthMoon:
    """Test the built-in two-body system."""

    def test_values(self):
        bodies = earth_moon()
        assert bodies.mass.tolist() == [5.972e24, 7.34767309e22]
        assert bodies.pos.tolist() == [[0.0, 0.0], [384400000.0, 0.0]]
        assert bodies.vel.tolist() == [[0.0, 0.0], [100.0, 0.0]]


class TestLoadBodies:
    """Test load_bodies."""

    def test_loads_rows_in_order(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text(
            "# three bodies\n"
            "mass,x,y,vx,vy\n"
            "1.0,0.0,0.0,0.0,0.0\n"
            "2.0,1.0,0.0,0.0,1.5\n"
            "3.0,0.0,2.0,-1.0,0.0\n"
        )
        bodies = load_bodies(str(path))
        assert len(bodies) == 3
        assert bodies.mass.tolist() == [1.0, 2.0, 3.0]
        assert bodies[1].velocity == (0.0, 1.5)
        assert bodies[2].position == (0.0, 2.0)

    def test_velocity_columns_are_optional(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("mass, x, y\n1.0, 0.0, 0.0\n1.0, 1.0, 1.0\n")
        bodies = load_bodies(str(path))
        assert not bodies.vel.any()

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("mass,x\n1.0,0.0\n")
        with pytest.raises(ConfigurationError, match="y"):
            load_bodies(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_bodies(str(tmp_path / "nope.csv"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("")
        with pytest.raises(ConfigurationError):
            load_bodies(str(path))

    def test_header_only(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("mass,x,y,vx,vy\n")
        with pytest.raises(ConfigurationError):
            load_bodies(str(path))

    def test_non_positive_mass(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("mass,x,y\n1.0,0.0,0.0\n0.0,1.0,1.0\n")
        with pytest.raises(InvalidMass):
            load_bodies(str(path))

    def test_center_of_mass_frame(self, tmp_path):
        path = tmp_path / "bodies.csv"
        path.write_text("mass,x,y,vx,vy\n1.0,0,0,3.0,1.0\n3.0,1,0,-1.0,1.0\n")
        bodies = load_bodies(str(path), com_frame=True)
        assert bodies.vel.tolist() == [[3.0, 0.0], [-1.0, 0.0]]
        assert total_momentum(bodies.mass, bodies.vel).tolist() == [0.0, 0.0]
        assert bodies.pos.tolist() == [[0.0, 0.0], [1.0, 0.0]]


class TestCenterOfMassFrame:
    """Test center_of_mass_frame."""

    def test_leaves_input_untouched(self, two_body):
        moved = center_of_mass_frame(two_body)
        assert two_body.vel[1].tolist() == [100.0, 0.0]
        assert moved.vel[1, 0] < 100.0
        assert moved.vel[0, 0] < 0.0
        p = total_momentum(moved.mass, moved.vel)
        assert abs(p[0]) <= 1e-9 * two_body.mass[1] * 100.0

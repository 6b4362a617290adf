#!/usr/bin/env python3
"""
Tests for the elliptical orbit path model.
"""

import pytest

from solsim.orbit import OrbitPath
from solsim.physics import Vector


CENTER = Vector(480, 320)


class TestOrbitPosition:
    """Position on the rotated ellipse."""

    def test_zero_angles_on_x_axis(self):
        orbit = OrbitPath(orbit_pos=0, path_pos=0, rad_x=200, rad_y=100)
        assert orbit.position(CENTER) == Vector(680, 320)

    def test_quarter_turn_on_y_axis(self):
        orbit = OrbitPath(orbit_pos=90, path_pos=0, rad_x=200, rad_y=100)
        pos = orbit.position(CENTER)
        assert pos.x == pytest.approx(480)
        assert pos.y == pytest.approx(420)

    def test_path_rotation(self):
        """Rotating the ellipse by 90 swings the x semi-axis onto +y."""
        orbit = OrbitPath(orbit_pos=0, path_pos=90, rad_x=200, rad_y=100)
        pos = orbit.position(CENTER)
        assert pos.x == pytest.approx(480)
        assert pos.y == pytest.approx(520)

    def test_negative_radii_taken_by_absolute_value(self):
        orbit = OrbitPath(rad_x=-150, rad_y=-90)
        assert orbit.rad_x == 150
        assert orbit.rad_y == 90

    def test_initial_angles_wrapped(self):
        orbit = OrbitPath(orbit_pos=370, path_pos=-10)
        assert orbit.orbit_pos == pytest.approx(10)
        assert orbit.path_pos == pytest.approx(350)


class TestOrbitAdvance:
    """Angle progression."""

    def test_advance_wraps_forward(self):
        orbit = OrbitPath(orbit_pos=359.5, orbit_speed=1.0, path_pos=359.9, path_speed=0.2)
        orbit.advance()
        assert orbit.orbit_pos == pytest.approx(0.5)
        assert orbit.path_pos == pytest.approx(0.1)

    def test_advance_wraps_backward(self):
        orbit = OrbitPath(orbit_pos=0.2, orbit_speed=-0.62)
        orbit.advance()
        assert orbit.orbit_pos == pytest.approx(359.58)

    @pytest.mark.parametrize("orbit_speed,path_speed", [
        (-0.62, 0.073),
        (0.74, 0.092),
        (0.5, 0.01),
        (0.23, 0.04),
        (-0.31, 0.05),
    ], ids=["p1", "p2", "p3", "p4", "p5"])
    def test_angles_stay_in_range(self, orbit_speed, path_speed):
        orbit = OrbitPath(orbit_speed=orbit_speed, path_speed=path_speed, rad_x=200, rad_y=150)
        for _ in range(2000):
            orbit.advance()
            assert 0.0 <= orbit.orbit_pos < 360.0
            assert 0.0 <= orbit.path_pos < 360.0


class TestOrbitTangent:
    """Tangent sampling used when a planet breaks orbit."""

    def test_tangent_forward(self):
        """On a circle at angle 0, the forward tangent points just past 90."""
        orbit = OrbitPath(orbit_pos=0, orbit_speed=0.5, rad_x=100, rad_y=100)
        tangent = orbit.tangent(CENTER, 5.0)
        assert tangent.magnitude == pytest.approx(5.0)
        assert tangent.direction == pytest.approx(91.0)

    def test_tangent_backward(self):
        """Negative orbit speed samples the path behind."""
        orbit = OrbitPath(orbit_pos=0, orbit_speed=-0.5, rad_x=100, rad_y=100)
        tangent = orbit.tangent(CENTER, 5.0)
        assert tangent.direction == pytest.approx(269.0)

    def test_tangent_does_not_move_orbit(self):
        orbit = OrbitPath(orbit_pos=42, orbit_speed=0.5, rad_x=100, rad_y=80)
        before = orbit.position(CENTER)
        orbit.tangent(CENTER)
        assert orbit.orbit_pos == 42
        assert orbit.position(CENTER) == before

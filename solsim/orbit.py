"""
Elliptical orbit path model.

A planet on scripted motion sits on an ellipse around a center point. The
angle along the ellipse (orbit_pos) and the rotation of the ellipse itself
(path_pos) both advance every step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .physics import Vector, bearing, wrap_degrees


# Lookahead used to sample the orbital tangent (degrees)
TANGENT_LOOKAHEAD_DEG = 2.0


@dataclass
class OrbitPath:
    """
    Rotated ellipse orbit.

    Attributes:
        orbit_pos: Angle along the ellipse (degrees, [0, 360)).
        orbit_speed: Degrees added to orbit_pos per step (sign sets direction).
        path_pos: Rotation of the ellipse about its center (degrees).
        path_speed: Degrees added to path_pos per step.
        rad_x: Semi-axis along the ellipse's local x.
        rad_y: Semi-axis along the ellipse's local y.
    """
    orbit_pos: float = 0.0
    orbit_speed: float = 0.0
    path_pos: float = 0.0
    path_speed: float = 0.0
    rad_x: float = 100.0
    rad_y: float = 100.0

    def __post_init__(self):
        self.rad_x = abs(self.rad_x)
        self.rad_y = abs(self.rad_y)
        self.orbit_pos = wrap_degrees(self.orbit_pos)
        self.path_pos = wrap_degrees(self.path_pos)

    def point_at(self, center: Vector, orbit_pos: float) -> Tuple[float, float]:
        """Point on the rotated ellipse at a given orbit angle."""
        theta = math.radians(orbit_pos)
        phi = math.radians(self.path_pos)
        px = self.rad_x * math.cos(theta)
        py = self.rad_y * math.sin(theta)
        x = center.x + px * math.cos(phi) - py * math.sin(phi)
        y = center.y + px * math.sin(phi) + py * math.cos(phi)
        return x, y

    def position(self, center: Vector) -> Vector:
        """Current position on the path."""
        return Vector(*self.point_at(center, self.orbit_pos))

    def advance(self) -> None:
        """Advance both angles by one step."""
        self.orbit_pos = wrap_degrees(self.orbit_pos + self.orbit_speed)
        self.path_pos = wrap_degrees(self.path_pos + self.path_speed)

    def tangent(self, center: Vector, magnitude: float = 5.0) -> Vector:
        """
        Velocity along the path in the orbiting direction.

        Samples the path a couple of degrees ahead and takes the bearing
        between the two points. Does not move anything.
        """
        step = TANGENT_LOOKAHEAD_DEG if self.orbit_speed >= 0 else -TANGENT_LOOKAHEAD_DEG
        x1, y1 = self.point_at(center, self.orbit_pos)
        x2, y2 = self.point_at(center, self.orbit_pos + step)
        return Vector.from_polar(magnitude, bearing(x1, y1, x2, y2))

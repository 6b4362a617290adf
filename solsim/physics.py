#!/usr/bin/env python3
"""
Physics Module for the Solar System Simulator

Implements the 2-D motion model shared by every celestial body:
- Vector with synchronized cartesian and polar forms
- Angle helpers (bearing, wrapping, range correction)
- Body base class with Newtonian gravity accumulation (Euler integration)

Screen coordinates are used throughout: +x to the right, +y downward, so a
positive direction is a clockwise rotation from +x.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from .registry import EntityKind, CELESTIAL_KINDS


# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

# Gravitational constant (N m^2 / kg^2)
G = 6.67384e-11

# One display unit corresponds to this many meters when computing force
DISTANCE_SCALE = 1000.0


# =============================================================================
# ANGLE HELPERS
# =============================================================================

def wrap_degrees(degrees: float) -> float:
    """Normalize an angle into [0, 360)."""
    wrapped = degrees % 360.0
    # Float modulo of a tiny negative value can round up to exactly 360
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def bearing(x1: float, y1: float, x2: float, y2: float) -> float:
    """Direction in degrees from (x1, y1) toward (x2, y2), in [0, 360)."""
    return wrap_degrees(math.degrees(math.atan2(y2 - y1, x2 - x1)))


def correct_to_range(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def correct_to_range_with_excess(value: float, low: float, high: float) -> Tuple[float, float]:
    """
    Clamp value into [low, high] and report what was cut off.

    Returns:
        (clamped, excess) where excess is negative when value fell below
        low, positive when it rose above high, and zero otherwise.
    """
    if value < low:
        return low, value - low
    if value > high:
        return high, value - high
    return value, 0.0


# =============================================================================
# VECTOR CLASS
# =============================================================================

class Vector:
    """
    2-D vector kept in both cartesian (x, y) and polar (magnitude, direction)
    form.

    Every mutator recomputes the other representation so the two forms are
    always consistent. Direction is in degrees, normalized to [0, 360).
    Negative magnitudes passed to the setter are taken by absolute value.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self._x = float(x)
        self._y = float(y)
        self._magnitude = 0.0
        self._direction = 0.0
        self._sync_polar()

    @classmethod
    def from_polar(cls, magnitude: float, direction: float) -> Vector:
        """Create a vector from magnitude and direction in degrees."""
        vector = cls()
        vector._magnitude = abs(float(magnitude))
        vector._direction = wrap_degrees(float(direction))
        vector._sync_cartesian()
        return vector

    # -------------------------------------------------------------------------
    # Synchronization
    # -------------------------------------------------------------------------

    def _sync_polar(self) -> None:
        self._magnitude = math.hypot(self._x, self._y)
        if self._magnitude == 0.0:
            # Keep the last heading for a zero vector
            return
        self._direction = wrap_degrees(math.degrees(math.atan2(self._y, self._x)))

    def _sync_cartesian(self) -> None:
        rad = math.radians(self._direction)
        self._x = self._magnitude * math.cos(rad)
        self._y = self._magnitude * math.sin(rad)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._x = float(value)
        self._sync_polar()

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self._y = float(value)
        self._sync_polar()

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @magnitude.setter
    def magnitude(self, value: float) -> None:
        self._magnitude = abs(float(value))
        self._sync_cartesian()

    @property
    def direction(self) -> float:
        return self._direction

    @direction.setter
    def direction(self, value: float) -> None:
        self._direction = wrap_degrees(float(value))
        self._sync_cartesian()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_cartesian(self, x: float, y: float) -> None:
        """Replace both components at once."""
        self._x = float(x)
        self._y = float(y)
        self._sync_polar()

    def set_polar(self, magnitude: float, direction: float) -> None:
        """Replace magnitude and direction at once."""
        self._magnitude = abs(float(magnitude))
        self._direction = wrap_degrees(float(direction))
        self._sync_cartesian()

    def add(self, other: Vector) -> Vector:
        """Add other to this vector in place and return self."""
        self.set_cartesian(self._x + other.x, self._y + other.y)
        return self

    def scale(self, factor: float) -> Vector:
        """Scale this vector in place and return self."""
        self.set_cartesian(self._x * factor, self._y * factor)
        return self

    def reverse(self) -> Vector:
        """Point this vector the opposite way, in place."""
        self.set_cartesian(-self._x, -self._y)
        return self

    def reset(self) -> None:
        """Zero the vector."""
        self.set_cartesian(0.0, 0.0)

    def copy(self) -> Vector:
        """Duplicate both forms exactly, without recomputing polar from cartesian."""
        clone = Vector(self._x, self._y)
        clone._magnitude = self._magnitude
        clone._direction = self._direction
        return clone

    def dot(self, other: Vector) -> float:
        """Dot product."""
        return self._x * other.x + self._y * other.y

    def distance_to(self, other: Vector) -> float:
        """Euclidean distance between two position vectors."""
        return math.hypot(other.x - self._x, other.y - self._y)

    def bearing_to(self, other: Vector) -> float:
        """Direction from this position toward another, in degrees."""
        return bearing(self._x, self._y, other.x, other.y)

    def __add__(self, other: Vector) -> Vector:
        return Vector(self._x + other.x, self._y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self._x - other.x, self._y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self._x * scalar, self._y * scalar)

    def __rmul__(self, scalar: float) -> Vector:
        return self.__mul__(scalar)

    def __neg__(self) -> Vector:
        return Vector(-self._x, -self._y)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector):
            return False
        eps = 1e-9
        return abs(self._x - other.x) < eps and abs(self._y - other.y) < eps

    def __iter__(self):
        yield self._x
        yield self._y

    def __repr__(self) -> str:
        return (f"Vector(x={self._x:.3f}, y={self._y:.3f}, "
                f"|v|={self._magnitude:.3f}, dir={self._direction:.1f})")


# =============================================================================
# BODY BASE CLASS
# =============================================================================

class Body:
    """
    Base class for every celestial body (star, planet, moon, asteroid).

    A body has a fixed mass, a position, a velocity and a transient
    acceleration that collects the pull of every other celestial body in
    range during a step. Bodies under scripted motion set gravity_enabled
    to False and override move().

    Attributes:
        id: Registry id, assigned when the body is spawned.
        mass: Mass in kilograms (always positive, never changes).
        position: Current position in display units.
        velocity: Display units per step.
        acceleration: Accumulated acceleration for the current step.
        radius: Collision radius in display units.
        resource: Exploitable resource pool.
        attack_power: Damage potential used by stars and moons.
        gravity_enabled: Whether the body is pulled by gravity.
    """

    kind: Optional[EntityKind] = None

    def __init__(
        self,
        mass: float,
        position: Optional[Vector] = None,
        velocity: Optional[Vector] = None,
        radius: float = 0.0,
        resource: float = 0,
        attack_power: float = 0.0,
    ):
        self.id: Optional[int] = None
        self.mass = abs(mass)
        if self.mass == 0:
            raise ValueError("Body mass must be non-zero")
        self.position = position.copy() if position is not None else Vector()
        self.velocity = velocity.copy() if velocity is not None else Vector()
        self.acceleration = Vector()
        self.radius = abs(radius)
        self.resource = resource
        self.attack_power = attack_power
        self.gravity_enabled = True

    # -------------------------------------------------------------------------
    # Motion
    # -------------------------------------------------------------------------

    def gravity_sources(self, sim) -> Iterable[Body]:
        """Every other celestial body within the world query radius."""
        return sim.query_range(self.position, sim.config.world_width, CELESTIAL_KINDS, exclude=self.id)

    def apply_gravity(self, sim) -> None:
        """
        Accumulate the gravitational pull of every other body in range.

        F = G * m1 * m2 / (d * DISTANCE_SCALE)^2, directed from this body
        toward the other; the resulting acceleration is F / m1. A body at
        zero distance contributes nothing.
        """
        for other in self.gravity_sources(sim):
            distance = self.position.distance_to(other.position)
            if distance == 0:
                continue
            force = G * self.mass * other.mass / (distance * DISTANCE_SCALE) ** 2
            pull = Vector.from_polar(force / self.mass, self.position.bearing_to(other.position))
            self.acceleration.add(pull)

    def advance(self) -> None:
        """Move by the current velocity, then fold in this step's acceleration."""
        self.position.add(self.velocity)
        self.velocity.add(self.acceleration)
        self.acceleration.reset()

    def move(self, sim) -> None:
        if self.gravity_enabled:
            self.apply_gravity(sim)
            self.advance()

    def update(self, sim) -> None:
        """Per-step upkeep; bodies without upkeep do nothing."""

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def exploit(self, amount: float) -> float:
        """Remove up to amount from the resource pool; return what was taken."""
        taken = min(abs(amount), self.resource)
        self.resource -= taken
        return taken

    def exploit_fraction(self, fraction: float) -> float:
        """Remove a fraction of the resource pool; return what was taken."""
        fraction = correct_to_range(abs(fraction), 0.0, 1.0)
        return self.exploit(self.resource * fraction)

    def reduce_attack_power(self, factor: float) -> float:
        """Scale attack power by factor (0..1) and return the new value."""
        self.attack_power *= correct_to_range(abs(factor), 0.0, 1.0)
        return self.attack_power

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self.id}, "
                f"pos=({self.position.x:.1f}, {self.position.y:.1f}), mass={self.mass:.3g})")

"""
Star, moons and asteroids.

Planets have their own module; these are the simpler celestial bodies.
"""

from __future__ import annotations

import math
from typing import Optional

from .events import SimulationEventType
from .physics import Body, Vector, wrap_degrees
from .registry import EntityKind


# =============================================================================
# CONSTANTS
# =============================================================================

STAR_RADIUS = 40.0
STAR_BASE_ATTACK_POWER = 100.0
STAR_BASE_RADIATION_RADIUS = 100.0
STAR_GROWTH_INTERVAL = 100     # steps between attack/radiation growth
STAR_FLARE_INTERVAL = 150      # steps between radiation attacks

MOON_RADIUS = 8.0
MOON_RESOURCE = 10000
MOON_MASS = 1e10
MOON_ORBIT_SPACING = 30.0      # orbit radius per moon index
MOON_MAX_SPEED = 6.0           # deg/step
MOON_INFLUENCE_INTERVAL = 10
MOON_INFLUENCE_GAIN = 5
MOON_ATTACK_PER_INFLUENCE = 0.05
MOON_DRIFT = 5.0

ASTEROID_RADIUS = 10.0
ASTEROID_MASS = 1e10
ASTEROID_COLLISION_RADIUS = 50.0
ASTEROID_MIN_POWER = 350

# Asteroids are removed once they leave this margin around the world
ASTEROID_MARGIN_LEFT = 200
ASTEROID_MARGIN_TOP = 100
ASTEROID_MARGIN_RIGHT = 200
ASTEROID_MARGIN_BOTTOM = 200


# =============================================================================
# STAR
# =============================================================================

class Star(Body):
    """
    Stationary central star.

    Grows stronger over time and periodically scorches every planet inside
    its radiation radius.
    """

    kind = EntityKind.STAR

    def __init__(self, position: Vector, resource: int = 200000, mass: float = 1e20):
        super().__init__(mass, position, radius=STAR_RADIUS, resource=resource,
                         attack_power=STAR_BASE_ATTACK_POWER)
        self.radiation_radius = STAR_BASE_RADIATION_RADIUS
        self.counter = 0
        self.gravity_enabled = False

    def move(self, sim) -> None:
        pass

    def update(self, sim) -> None:
        self.counter += 1
        if self.counter % STAR_GROWTH_INTERVAL == 0:
            self.attack_power += 1
            self.radiation_radius += 1
        if self.counter % STAR_FLARE_INTERVAL == 0:
            self.flare(sim)
            self.counter = 0

    def flare(self, sim) -> int:
        """Attack every planet within the radiation radius; return how many were hit."""
        planets = sim.query_range(self.position, self.radiation_radius, [EntityKind.PLANET])
        for planet in planets:
            planet.attack(int(self.attack_power))
        if planets:
            sim._log_event(
                SimulationEventType.STAR_FLARE,
                entity_id=self.id,
                data={"damage": int(self.attack_power), "planets": [p.id for p in planets]},
            )
        return len(planets)


# =============================================================================
# MOON
# =============================================================================

class Moon(Body):
    """
    Moon orbiting its owner planet on a circle of radius (index + 1) * 30.

    Moons slowly accumulate influence; their attack power follows it. A moon
    without an owner drifts randomly instead.
    """

    kind = EntityKind.MOON

    def __init__(
        self,
        position: Vector,
        owner_id: Optional[int] = None,
        index: int = 0,
        speed: float = 0.0,
        angle: float = 0.0,
        resource: int = MOON_RESOURCE,
        mass: float = MOON_MASS,
    ):
        super().__init__(mass, position, radius=MOON_RADIUS, resource=resource)
        self.owner_id = owner_id
        self.orbit_radius = (abs(int(index)) + 1) * MOON_ORBIT_SPACING
        self.speed = speed
        self.angle = wrap_degrees(angle)
        self.influence = 0
        self.level = 0
        self.counter = 0
        self.gravity_enabled = False

    def move(self, sim) -> None:
        owner = sim.get(self.owner_id) if self.owner_id is not None else None
        if owner is not None:
            self.angle = wrap_degrees(self.angle + self.speed)
            rad = math.radians(self.angle)
            self.position.set_cartesian(
                owner.position.x + math.cos(rad) * self.orbit_radius,
                owner.position.y + math.sin(rad) * self.orbit_radius,
            )
        elif self.counter % 10 == 0:
            self.position.set_cartesian(
                self.position.x - sim.rng.random() * MOON_DRIFT,
                self.position.y - sim.rng.random() * MOON_DRIFT,
            )
        elif self.counter % 5 == 0:
            self.position.set_cartesian(
                self.position.x + sim.rng.random() * MOON_DRIFT,
                self.position.y + sim.rng.random() * MOON_DRIFT,
            )

    def update(self, sim) -> None:
        self.counter += 1
        if self.counter % MOON_INFLUENCE_INTERVAL == 0:
            self.influence += MOON_INFLUENCE_GAIN
            self.attack_power = self.influence * MOON_ATTACK_PER_INFLUENCE
            if self.influence >= 10 ** (self.level + 1):
                self.level += 1


# =============================================================================
# ASTEROID
# =============================================================================

class Asteroid(Body):
    """Gravity-driven rock that damages whatever it hits."""

    kind = EntityKind.ASTEROID

    def __init__(
        self,
        position: Vector,
        velocity: Optional[Vector] = None,
        explode_power: Optional[int] = None,
        mass: float = ASTEROID_MASS,
    ):
        super().__init__(mass, position, velocity, radius=ASTEROID_RADIUS, resource=0)
        self.explode_power = explode_power if explode_power is not None else ASTEROID_MIN_POWER

    def is_out_of_bounds(self, width: float, height: float) -> bool:
        x, y = self.position.x, self.position.y
        return (x < -ASTEROID_MARGIN_LEFT or x > width + ASTEROID_MARGIN_RIGHT
                or y < -ASTEROID_MARGIN_TOP or y > height + ASTEROID_MARGIN_BOTTOM)

    def update(self, sim) -> None:
        """Expire when far offscreen, otherwise resolve collisions."""
        if self.is_out_of_bounds(sim.config.world_width, sim.config.world_height):
            sim.remove_entity(self.id)
            return

        hits = sim.query_range(
            self.position, ASTEROID_COLLISION_RADIUS,
            [EntityKind.STAR, EntityKind.PLANET, EntityKind.MOON], exclude=self.id,
        )
        if not hits:
            return

        for body in hits:
            if body.kind == EntityKind.PLANET:
                body.attack(self.explode_power)
            elif body.kind == EntityKind.MOON:
                body.reduce_attack_power(0.7)
                body.exploit_fraction(0.5)
            # Stars simply consume the asteroid
            sim._log_event(
                SimulationEventType.ASTEROID_IMPACT,
                entity_id=self.id,
                target_id=body.id,
                data={"target_kind": body.kind.name, "power": self.explode_power},
            )
        sim.remove_entity(self.id)

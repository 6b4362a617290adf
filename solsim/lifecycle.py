"""
Asteroid spawn policy.

Asteroids appear at random in a band just outside the visible world and
head roughly toward the star; a destroyed planet breaks up into a burst of
asteroids flying off in every direction.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .events import SimulationEventType
from .physics import Vector
from .registry import EntityKind


# Width of the offscreen spawn band around the world
SPAWN_BAND = 100

# Velocity of spawned asteroids: randint(6) + 1 toward the star within a 120 deg cone
SPAWN_SPEED_MIN = 1
SPAWN_SPEED_SPREAD = 6
SPAWN_CONE_DEG = 120

# Burst: randint(4) + 4 asteroids, speed randint(5) + 1, any direction
BURST_MIN = 4
BURST_SPREAD = 4
BURST_SPEED_MIN = 1
BURST_SPEED_SPREAD = 5

EXPLODE_POWER_MIN = 350
EXPLODE_POWER_SPREAD = 900


def in_spawn_band(x: float, y: float, width: float, height: float) -> bool:
    """True inside the outer rectangle but outside the visible world."""
    inside_outer = -SPAWN_BAND <= x < width + SPAWN_BAND and -SPAWN_BAND <= y < height + SPAWN_BAND
    inside_world = 0 <= x < width and 0 <= y < height
    return inside_outer and not inside_world


def sample_spawn_position(rng, width: int, height: int) -> Tuple[int, int]:
    """Rejection-sample a point in the offscreen spawn band."""
    while True:
        x = rng.random_int(width + 2 * SPAWN_BAND + 1) - SPAWN_BAND
        y = rng.random_int(height + 2 * SPAWN_BAND + 1) - SPAWN_BAND
        if in_spawn_band(x, y, width, height):
            return x, y


def random_explode_power(rng) -> int:
    return rng.random_int(EXPLODE_POWER_SPREAD) + EXPLODE_POWER_MIN


def _star_position(sim) -> Vector:
    stars = sim.registry.of_kind(EntityKind.STAR)
    if stars:
        return stars[0].position
    return Vector(sim.config.world_width / 2, sim.config.world_height / 2)


def spawn_asteroid(sim):
    """Spawn one asteroid in the spawn band, aimed loosely at the star."""
    rng = sim.rng
    x, y = sample_spawn_position(rng, sim.config.world_width, sim.config.world_height)
    position = Vector(x, y)
    to_star = position.bearing_to(_star_position(sim))
    direction = rng.random_int(SPAWN_CONE_DEG + 1) + (to_star - SPAWN_CONE_DEG / 2)
    speed = rng.random_int(SPAWN_SPEED_SPREAD) + SPAWN_SPEED_MIN
    asteroid = sim.spawn_entity(
        EntityKind.ASTEROID, position, Vector.from_polar(speed, direction),
        explode_power=random_explode_power(rng),
    )
    sim._log_event(SimulationEventType.ASTEROID_SPAWNED, entity_id=asteroid.id,
                   data={"x": x, "y": y, "speed": speed})
    return asteroid


def spawn_asteroid_burst(sim, position: Vector) -> List:
    """Scatter randint(4) + 4 asteroids from a point."""
    rng = sim.rng
    count = rng.random_int(BURST_SPREAD) + BURST_MIN
    asteroids = []
    for _ in range(count):
        speed = rng.random_int(BURST_SPEED_SPREAD) + BURST_SPEED_MIN
        velocity = Vector.from_polar(speed, rng.random_int(360))
        asteroids.append(sim.spawn_entity(
            EntityKind.ASTEROID, position, velocity,
            explode_power=random_explode_power(rng),
        ))
    sim._log_event(SimulationEventType.ASTEROID_BURST,
                   data={"count": count, "x": position.x, "y": position.y})
    return asteroids


class AsteroidSpawner:
    """
    Probabilistic asteroid source.

    Each step an asteroid appears with probability 1 / spawn_rate. A rate of
    zero disables spawning; negative rates are taken by absolute value.
    """

    def __init__(self, spawn_rate: int):
        self.spawn_rate = abs(int(spawn_rate))

    def maybe_spawn(self, sim) -> Optional[object]:
        if self.spawn_rate <= 0:
            return None
        if sim.rng.random_int(self.spawn_rate) != 0:
            return None
        return spawn_asteroid(sim)

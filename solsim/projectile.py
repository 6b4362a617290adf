"""
Missiles fired by combat units.

A missile flies straight along its heading. It damages the first planet
(other than its owner) it touches; collisions with units are resolved by
the units themselves. A missile that reaches the world edge is flagged
and removed on its next update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from .events import SimulationEventType
from .physics import Vector, wrap_degrees
from .planet import PLANET_RADIUS
from .registry import EntityKind


# =============================================================================
# CONSTANTS
# =============================================================================

MISSILE_SPEED = 5.0
MISSILE_RADIUS = 4.0
MISSILE_PLANET_DAMAGE = 30


@dataclass
class Missile:
    """
    Straight-flying missile.

    Attributes:
        position: Current position.
        heading: Direction of travel (degrees).
        owner_id: Planet that owns the firing unit.
        speed: Distance covered per step.
        radius: Collision radius.
        pending_removal: Set once the missile reaches the world edge.
    """
    kind: ClassVar[EntityKind] = EntityKind.MISSILE

    position: Vector
    heading: float = 0.0
    owner_id: Optional[int] = None
    speed: float = MISSILE_SPEED
    radius: float = MISSILE_RADIUS
    pending_removal: bool = False
    id: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        self.position = self.position.copy()
        self.heading = wrap_degrees(self.heading)

    def at_world_edge(self, width: float, height: float) -> bool:
        x, y = self.position.x, self.position.y
        return x <= 0 or x >= width - 1 or y <= 0 or y >= height - 1

    def update(self, sim) -> None:
        if self.pending_removal:
            sim.remove_entity(self.id)
            return

        self.position.add(Vector.from_polar(self.speed, self.heading))

        for planet in sim.query_range(self.position, PLANET_RADIUS + self.radius, [EntityKind.PLANET]):
            if planet.id == self.owner_id:
                continue
            if self.position.distance_to(planet.position) > planet.radius + self.radius:
                continue
            planet.attack(MISSILE_PLANET_DAMAGE)
            sim._log_event(SimulationEventType.MISSILE_HIT, entity_id=self.id, target_id=planet.id,
                           data={"damage": MISSILE_PLANET_DAMAGE, "owner_id": self.owner_id})
            sim.remove_entity(self.id)
            return

        if self.at_world_edge(sim.config.world_width, sim.config.world_height):
            self.pending_removal = True

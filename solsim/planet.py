#!/usr/bin/env python3
"""
Planet Module for the Solar System Simulator

Each planet runs a civilization state machine driven by its resource pool:

    Unevolved(-1) -> 0 -> 1 -> 2 -> 3 -> 4 -> Ascended
    (any stage) -- health reaches 0 --> wiped out -> Unevolved

Per-step order:
1. Evolve life (life-supporting, uncivilized planets only)
2. Check stage against the resource table (promote or demote, once)
3. Grow resource and regenerate health/shield
4. Leech resource from less developed neighbors
5. Activate stage skills (unit spawning, shields, independence)
6. Sync status bars
7. Check ascension
8. Check death

Kardashev stages unlock: probes and satellites at Type I, destroyers at
Type II, a shield at Type III and independent motion at Type IV.
"""

from __future__ import annotations

import math
import string
from typing import List, Optional

from .events import SimulationEventType
from .lifecycle import spawn_asteroid_burst
from .orbit import OrbitPath
from .physics import Body, Vector, correct_to_range, correct_to_range_with_excess
from .registry import EntityKind


# =============================================================================
# CONSTANTS
# =============================================================================

# Resource needed to reach stages 1, 2, 3 and 4
STAGE_RESOURCE_FLAGS = [2500, 22000, 80000, 260000]
MAX_STAGE = len(STAGE_RESOURCE_FLAGS)
UNEVOLVED = -1

PLANET_RADIUS = 20.0
STARTING_RESOURCE = 100

# Health scales logarithmically with mass: int(ln(mass) / ln(HEALTH_BASE))
HEALTH_BASE = 1.006

# Steps needed for life to evolve: randint(EVO_SPREAD) + EVO_MIN
EVO_MIN = 700
EVO_SPREAD = 800

CIVILIZED_HEALTH_REGEN = 5
SHIELD_REGEN = 1

PROBE_SATELLITE_INTERVAL = 500
DESTROYER_INTERVAL = 700

BREAK_ORBIT_SPEED = 5.0
ASCENSION_DISTANCE = 1000.0

ROMAN_NUMERALS = ["0", "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X"]

HEALTH_BAR = 0
SHIELD_BAR = 1


def max_health_for_mass(mass: float) -> int:
    return int(math.log(abs(mass)) / math.log(HEALTH_BASE))


def generate_planet_name(rng) -> str:
    """Three uppercase letters, a dash and four digits, e.g. 'KTX-0419'."""
    letters = "".join(string.ascii_uppercase[rng.random_int(26)] for _ in range(3))
    digits = "".join(str(rng.random_int(10)) for _ in range(4))
    return f"{letters}-{digits}"


# =============================================================================
# PLANET
# =============================================================================

class Planet(Body):
    """
    Planet with an orbit, a resource economy and a civilization.

    Attributes:
        name: Generated designation.
        orbit: Scripted orbit path around `center`.
        center: Point the orbit is centered on (the star position).
        supports_life: Whether life can evolve here.
        health, max_health: Hull pool.
        shield, max_shield: Shield pool (max 0 until Type III).
        evolution, max_evo: Progress toward developing life.
        civ_stage: -1 when uncivilized, otherwise 0..4.
        has_civilization: True exactly when civ_stage >= 0.
        independent_motion: Moving freely on its own velocity (Type IV).
        has_ascended: Left the system after reaching Type IV.
        counter: Civilized step counter driving unit production.
    """

    kind = EntityKind.PLANET

    def __init__(
        self,
        mass: float,
        orbit: OrbitPath,
        center: Vector,
        rng,
        supports_life: bool = False,
        name: Optional[str] = None,
    ):
        super().__init__(mass, orbit.position(center), radius=PLANET_RADIUS, resource=STARTING_RESOURCE)
        self.orbit = orbit
        self.center = center.copy()
        self.supports_life = supports_life
        self.name = name or generate_planet_name(rng)

        self.max_health = max_health_for_mass(self.mass)
        self.health = self.max_health
        self.max_shield = 0
        self.shield = 0
        self.evolution = 0
        self.max_evo = rng.random_int(EVO_SPREAD) + EVO_MIN

        self.civ_stage = UNEVOLVED
        self.counter = 0
        self.gravity_enabled = False
        self.independent_motion = False
        self.has_ascended = False

    @property
    def has_civilization(self) -> bool:
        return self.civ_stage >= 0

    @property
    def kardashev_type(self) -> str:
        if 0 <= self.civ_stage < len(ROMAN_NUMERALS):
            return f"Kardashev Type {ROMAN_NUMERALS[self.civ_stage]}"
        return "Unevolved"

    # -------------------------------------------------------------------------
    # Motion
    # -------------------------------------------------------------------------

    def move(self, sim) -> None:
        if self.independent_motion:
            self.position.add(self.velocity)
        elif self.gravity_enabled:
            self.apply_gravity(sim)
            self.advance()
        else:
            self.orbit.advance()
            self.position = self.orbit.position(self.center)

    def break_orbit(self, sim) -> bool:
        """
        Leave the scripted orbit and fall under gravity.

        Velocity is seeded with the orbital tangent. Returns False if the
        orbit was already broken.
        """
        if self.gravity_enabled or self.independent_motion:
            return False
        self.velocity = self.orbit.tangent(self.center, BREAK_ORBIT_SPEED)
        self.gravity_enabled = True
        sim._log_event(SimulationEventType.ORBIT_BROKEN, entity_id=self.id,
                       data={"speed": self.velocity.magnitude, "heading": self.velocity.direction})
        return True

    def become_independent(self) -> bool:
        """Switch to free flight away from the system. Returns False if already independent."""
        if self.independent_motion:
            return False
        if self.gravity_enabled:
            self.velocity = Vector.from_polar(BREAK_ORBIT_SPEED, self.position.bearing_to(self.center))
            self.velocity.reverse()
        else:
            self.velocity = self.orbit.tangent(self.center, BREAK_ORBIT_SPEED)
        self.independent_motion = True
        return True

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def attack(self, damage: float) -> float:
        """
        Take damage: shield absorbs first, the remainder hits health.

        Returns:
            Remaining health.
        """
        self.shield, excess = correct_to_range_with_excess(self.shield - abs(damage), 0, self.max_shield)
        if excess < 0:
            self.health = correct_to_range(self.health + excess, 0, self.max_health)
        return self.health

    # -------------------------------------------------------------------------
    # Per-step update
    # -------------------------------------------------------------------------

    def update(self, sim) -> None:
        self.evolve_life(sim)
        self.check_stage(sim)
        self.grow()
        self.leech(sim)
        self.activate_skills(sim)
        self.sync_bars(sim)
        if self.check_ascension(sim):
            return
        self.check_death(sim)

    def evolve_life(self, sim) -> None:
        if not self.supports_life or self.has_civilization:
            return
        self.evolution = min(self.evolution + 1, self.max_evo)
        if self.evolution >= self.max_evo:
            self.civ_stage = 0
            self.counter = 0
            sim._log_event(SimulationEventType.LIFE_DEVELOPED, entity_id=self.id)
            sim.report_event(f"{self.name} has developed life.")

    def check_stage(self, sim) -> None:
        """Promote or demote by at most one stage against the resource table."""
        if not self.has_civilization or self.civ_stage >= MAX_STAGE:
            return
        if self.resource >= STAGE_RESOURCE_FLAGS[self.civ_stage]:
            self.civ_stage += 1
            sim._log_event(SimulationEventType.STAGE_ADVANCED, entity_id=self.id,
                           data={"stage": self.civ_stage})
            sim.report_event(f"{self.name} is now Stage {self.civ_stage}.")
        elif self.civ_stage > 0 and self.resource < STAGE_RESOURCE_FLAGS[self.civ_stage - 1]:
            self.civ_stage -= 1
            sim._log_event(SimulationEventType.STAGE_REGRESSED, entity_id=self.id,
                           data={"stage": self.civ_stage})
            sim.report_event(f"{self.name} has been sent back to Stage {self.civ_stage}.")

    def grow(self) -> None:
        if self.has_civilization:
            self.resource += 4 ** (self.civ_stage + 1)
            self.health = min(self.health + CIVILIZED_HEALTH_REGEN, self.max_health)
        else:
            self.resource += 1
        self.shield = min(self.shield + SHIELD_REGEN, self.max_shield)

    def leech_radius(self) -> float:
        if self.resource <= 0:
            return 0.0
        return math.ceil(20 * math.log10(self.resource))

    def leech(self, sim) -> int:
        """Drain every less developed planet in range; return the total gained."""
        if self.civ_stage < 1 or self.resource <= 0:
            return 0
        gained = 0
        for other in sim.query_range(self.position, self.leech_radius(), [EntityKind.PLANET], exclude=self.id):
            if other.civ_stage >= self.civ_stage:
                continue
            amount = 2 ** abs(self.civ_stage - other.civ_stage)
            other.resource = max(0, other.resource - amount)
            self.resource += amount
            gained += amount
        return gained

    def activate_skills(self, sim) -> None:
        if not self.has_civilization:
            self.counter = 0
            return

        self.counter += 1
        stage = self.civ_stage

        if stage >= 1 and self.counter % PROBE_SATELLITE_INTERVAL == 0:
            if len(sim.owned_units(self.id, EntityKind.PROBE)) < stage * 3:
                sim.spawn_entity(EntityKind.PROBE, self.position, owner_id=self.id)
            if len(sim.owned_units(self.id, EntityKind.SATELLITE)) < stage + 1:
                sim.spawn_entity(EntityKind.SATELLITE, self.position, owner_id=self.id)

        if stage >= 2 and self.counter % DESTROYER_INTERVAL == 0:
            if len(sim.owned_units(self.id, EntityKind.DESTROYER)) < stage * 2:
                sim.spawn_entity(EntityKind.DESTROYER, self.position, owner_id=self.id)
            self.counter = 0

        if stage >= 3 and self.max_shield == 0:
            self.max_shield = int(20 * math.sqrt(self.resource)) + 50
            self.shield = self.max_shield
            sim.status.create(self.id, [self.max_health, self.max_shield], [self.health, self.shield])
            sim._log_event(SimulationEventType.SHIELD_RAISED, entity_id=self.id,
                           data={"max_shield": self.max_shield})

        if stage >= 4 and self.become_independent():
            sim._log_event(SimulationEventType.INDEPENDENT_MOTION, entity_id=self.id)

    def sync_bars(self, sim) -> None:
        sim.push_status(self.id, HEALTH_BAR, self.health, self.max_health)
        if self.max_shield > 0:
            sim.push_status(self.id, SHIELD_BAR, self.shield, self.max_shield)

    def check_ascension(self, sim) -> bool:
        if self.civ_stage < MAX_STAGE or not self.independent_motion:
            return False
        if self.position.distance_to(self.center) < ASCENSION_DISTANCE:
            return False
        self.has_ascended = True
        sim._log_event(SimulationEventType.PLANET_ASCENDED, entity_id=self.id)
        sim.report_event(f"{self.name} has ascended beyond the system.")
        sim.remove_entity(self.id)
        return True

    def check_death(self, sim) -> bool:
        if self.health > 0:
            return False

        sim.clear_units(self.id)

        if self.has_civilization:
            self.wipe_out(sim)
        else:
            spawn_asteroid_burst(sim, self.position)
            sim._log_event(SimulationEventType.PLANET_DESTROYED, entity_id=self.id)
            sim.report_event(f"{self.name} was destroyed.")
            sim.remove_entity(self.id)
        return True

    def wipe_out(self, sim) -> None:
        """Reset to an unevolved planet after its civilization is destroyed."""
        self.max_shield = 0
        self.shield = 0
        self.max_health = max_health_for_mass(self.mass)
        self.health = self.max_health
        self.evolution = 0
        self.max_evo = sim.rng.random_int(EVO_SPREAD) + EVO_MIN
        self.civ_stage = UNEVOLVED
        self.resource //= 3
        self.counter = 0
        sim.status.create(self.id, [self.max_health], [self.health])
        sim._log_event(SimulationEventType.LIFE_WIPED_OUT, entity_id=self.id)
        sim.report_event(f"All life was wiped out on {self.name}.")

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def status_report(self, in_world: bool = True) -> List[str]:
        """Lines for the planet status panel."""
        if not in_world:
            return ["Ascended beyond system."] if self.has_ascended else ["Destroyed."]
        return [
            f"{self.name}: ",
            f"Evolved: {self.evolution}/{self.max_evo}",
            f"{self.resource} EP",
            self.kardashev_type,
            f"Health: {self.health}/{self.max_health} HP",
            f"Shielding: {self.shield}/{self.max_shield}",
        ]

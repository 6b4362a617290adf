#!/usr/bin/env python3
"""
Combat Unit Module for the Solar System Simulator

Civilized planets build three kinds of unit. All share one Unit type; the
behavior of each variant comes from the policy object it is composed with:

- ProbePolicy: scouts the nearest uncivilized body, never fires, and is
  removed once outside the world.
- SatellitePolicy: circles its owner planet and fires at enemy destroyers.
- DestroyerPolicy: hunts enemy destroyers, then satellites, then planets.

Friend-or-foe is decided purely by owner_id: a unit never targets or is
damaged by anything owned by its own planet.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .events import SimulationEventType
from .physics import Vector, correct_to_range, wrap_degrees
from .projectile import MISSILE_RADIUS
from .registry import CELESTIAL_KINDS, EntityKind


# =============================================================================
# CONSTANTS
# =============================================================================

WEAPON_COOLDOWN_THRESHOLD = 30
MISSILE_UNIT_DAMAGE = 25
UNIT_RADIUS = 12.0

PROBE_HEALTH_PER_STAGE = 120
SATELLITE_HEALTH_PER_STAGE = 500
DESTROYER_HEALTH_PER_STAGE = 350

PROBE_SCAN_RADIUS = 400.0

SATELLITE_ORBIT_RADIUS = 90.0
SATELLITE_SCAN_RADIUS = 150.0
SATELLITE_COOLDOWN_RATE = 2
SATELLITE_UPGRADED_COOLDOWN_RATE = 4
SATELLITE_IDLE_TURN = 4

DESTROYER_COOLDOWN_RATE = 4
DESTROYER_DESTROYER_RADIUS = 50.0
DESTROYER_SATELLITE_RADIUS = 300.0
DESTROYER_PLANET_RADIUS = 1500.0
DESTROYER_SPEED = 2.0
DESTROYER_APPROACH_DISTANCE = 100.0
DESTROYER_FIRING_DISTANCE = 115.0

# Owner stage at which satellites fire faster and destroyers self-repair
UPGRADE_STAGE = 3


def nearest(origin: Vector, candidates: Iterable, radius: float):
    """
    Closest candidate strictly inside radius.

    The best distance starts at the radius itself, so a candidate exactly on
    the boundary never wins; equal distances keep the earlier candidate.
    """
    best, best_distance = None, abs(radius)
    for candidate in candidates:
        distance = origin.distance_to(candidate.position)
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best


def nearest_enemy(unit: Unit, sim, kinds, radius: float):
    candidates = sim.query_range(unit.position, radius, kinds, exclude=unit.id)
    return nearest(unit.position, [c for c in candidates if c.owner_id != unit.owner_id], radius)


# =============================================================================
# UNIT
# =============================================================================

@dataclass
class Unit:
    """
    A combat unit owned by a planet.

    Attributes:
        kind: PROBE, SATELLITE or DESTROYER.
        position: Current position.
        owner_id: Id of the owning planet.
        policy: Behavior for this variant.
        max_health: Health pool capacity.
        health: Current health (defaults to max_health).
        rotation: Facing in degrees.
        cooldown: Weapon counter; fires at WEAPON_COOLDOWN_THRESHOLD.
        radius: Collision radius against missiles.
    """
    kind: EntityKind
    position: Vector
    owner_id: int
    policy: object
    max_health: float
    health: Optional[float] = None
    rotation: float = 0.0
    cooldown: float = 0.0
    radius: float = UNIT_RADIUS
    id: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        self.position = self.position.copy()
        self.max_health = abs(self.max_health)
        if self.health is None:
            self.health = self.max_health
        self.health = correct_to_range(self.health, 0, self.max_health)
        self.rotation = wrap_degrees(self.rotation)

    @property
    def is_destroyed(self) -> bool:
        return self.health <= 0

    @property
    def can_fire(self) -> bool:
        return self.cooldown >= WEAPON_COOLDOWN_THRESHOLD

    def turn_toward(self, position: Vector) -> None:
        self.rotation = self.position.bearing_to(position)

    def turn(self, degrees: float) -> None:
        self.rotation = wrap_degrees(self.rotation + degrees)

    def move_forward(self, distance: float) -> None:
        self.position.add(Vector.from_polar(distance, self.rotation))

    def fire(self, sim):
        """Launch a missile along the current facing if the weapon is ready."""
        if not self.can_fire:
            return None
        self.cooldown = 0
        missile = sim.spawn_entity(EntityKind.MISSILE, self.position, heading=self.rotation,
                                   owner_id=self.owner_id)
        sim._log_event(SimulationEventType.MISSILE_FIRED, entity_id=self.id, target_id=missile.id,
                       data={"heading": self.rotation})
        return missile

    def take_damage(self, amount: float) -> float:
        self.health = correct_to_range(self.health - abs(amount), 0, self.max_health)
        return self.health

    def repair(self) -> None:
        self.health = self.max_health

    def check_missile_hits(self, sim) -> bool:
        """
        Take damage from one enemy missile touching this unit.

        Returns True if the unit was destroyed.
        """
        for missile in sim.query_range(self.position, self.radius + MISSILE_RADIUS, [EntityKind.MISSILE]):
            if missile.owner_id == self.owner_id:
                continue
            self.take_damage(MISSILE_UNIT_DAMAGE)
            sim._log_event(SimulationEventType.MISSILE_HIT, entity_id=missile.id, target_id=self.id,
                           data={"damage": MISSILE_UNIT_DAMAGE, "owner_id": missile.owner_id})
            sim.remove_entity(missile.id)
            break

        if self.is_destroyed:
            sim._log_event(SimulationEventType.UNIT_DESTROYED, entity_id=self.id,
                           data={"kind": self.kind.name, "owner_id": self.owner_id})
            sim.remove_entity(self.id)
            return True
        return False

    def update(self, sim) -> None:
        self.policy.update(self, sim)
        if sim.contains(self.id):
            sim.push_status(self.id, 0, self.health, self.max_health)


# =============================================================================
# POLICIES
# =============================================================================

@dataclass
class ProbePolicy:
    """
    Scout behavior.

    Attributes:
        exhaustive_scan: Examine every candidate in range. When False, only
            the first candidate in enumeration order is considered.
    """
    kind = EntityKind.PROBE
    health_per_stage = PROBE_HEALTH_PER_STAGE

    exhaustive_scan: bool = True

    def scan_targets(self, unit: Unit, sim):
        candidates = sim.query_range(unit.position, PROBE_SCAN_RADIUS, CELESTIAL_KINDS)
        if not self.exhaustive_scan:
            candidates = candidates[:1]
        candidates = [
            body for body in candidates
            if not (body.kind == EntityKind.PLANET and body.has_civilization)
        ]
        return nearest(unit.position, candidates, PROBE_SCAN_RADIUS)

    def approach(self, unit: Unit, target, sim) -> bool:
        unit.turn_toward(target.position)
        return False

    def update(self, unit: Unit, sim) -> None:
        target = self.scan_targets(unit, sim)
        if target is not None:
            self.approach(unit, target, sim)

        if unit.check_missile_hits(sim):
            return

        x, y = unit.position.x, unit.position.y
        if not (0 <= x <= sim.config.world_width and 0 <= y <= sim.config.world_height):
            sim.remove_entity(unit.id)


@dataclass
class SatellitePolicy:
    """
    Guard behavior: circles the owner at a fixed radius.

    Attributes:
        orbit_degree: Position on the guard circle (0..359).
    """
    kind = EntityKind.SATELLITE
    health_per_stage = SATELLITE_HEALTH_PER_STAGE

    orbit_degree: int = 0

    def scan_targets(self, unit: Unit, sim):
        return nearest_enemy(unit, sim, [EntityKind.DESTROYER], SATELLITE_SCAN_RADIUS)

    def approach(self, unit: Unit, target, sim) -> bool:
        unit.turn_toward(target.position)
        return True

    def update(self, unit: Unit, sim) -> None:
        owner = sim.get(unit.owner_id)
        if owner is None:
            sim.remove_entity(unit.id)
            return

        upgraded = owner.civ_stage >= UPGRADE_STAGE
        unit.cooldown += SATELLITE_UPGRADED_COOLDOWN_RATE if upgraded else SATELLITE_COOLDOWN_RATE

        rad = math.radians(self.orbit_degree)
        unit.position.set_cartesian(
            owner.position.x + SATELLITE_ORBIT_RADIUS * math.sin(rad),
            owner.position.y + SATELLITE_ORBIT_RADIUS * math.cos(rad),
        )
        self.orbit_degree = 0 if self.orbit_degree >= 359 else self.orbit_degree + 1

        target = self.scan_targets(unit, sim)
        if target is not None:
            if self.approach(unit, target, sim):
                unit.fire(sim)
        else:
            unit.turn(sim.rng.random_int(SATELLITE_IDLE_TURN))

        unit.check_missile_hits(sim)


@dataclass
class DestroyerPolicy:
    """
    Attack behavior.

    Priority: enemy destroyers within 50, then enemy satellites within 300,
    then any planet other than the owner within 1500. Planets are
    approached until within 100 and fired on from 115.
    """
    kind = EntityKind.DESTROYER
    health_per_stage = DESTROYER_HEALTH_PER_STAGE

    upgraded: bool = False

    def scan_targets(self, unit: Unit, sim):
        target = nearest_enemy(unit, sim, [EntityKind.DESTROYER], DESTROYER_DESTROYER_RADIUS)
        if target is None:
            target = nearest_enemy(unit, sim, [EntityKind.SATELLITE], DESTROYER_SATELLITE_RADIUS)
        if target is None:
            planets = [
                p for p in sim.query_range(unit.position, DESTROYER_PLANET_RADIUS, [EntityKind.PLANET])
                if p.id != unit.owner_id
            ]
            target = nearest(unit.position, planets, DESTROYER_PLANET_RADIUS)
        return target

    def approach(self, unit: Unit, target, sim) -> bool:
        """Face the target; close in on planets. Returns True when in firing position."""
        unit.turn_toward(target.position)
        if target.kind != EntityKind.PLANET:
            return True
        if unit.position.distance_to(target.position) > DESTROYER_APPROACH_DISTANCE:
            unit.move_forward(DESTROYER_SPEED)
        return unit.position.distance_to(target.position) <= DESTROYER_FIRING_DISTANCE

    def update(self, unit: Unit, sim) -> None:
        owner = sim.get(unit.owner_id)
        self.upgraded = owner is not None and owner.civ_stage >= UPGRADE_STAGE
        if self.upgraded:
            unit.repair()

        target = self.scan_targets(unit, sim)
        unit.cooldown += DESTROYER_COOLDOWN_RATE
        if unit.check_missile_hits(sim):
            return

        if target is not None and self.approach(unit, target, sim):
            unit.fire(sim)


POLICY_TYPES = {
    EntityKind.PROBE: ProbePolicy,
    EntityKind.SATELLITE: SatellitePolicy,
    EntityKind.DESTROYER: DestroyerPolicy,
}

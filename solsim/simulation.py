#!/usr/bin/env python3
"""
Simulation Engine for the Solar System Simulator.

This module implements the fixed-step simulation loop. Each step runs in
five phases:
1. Body motion (gravity, scripted orbits, moon orbits)
2. Star, moon and planet upkeep (economy, stage transitions, spawning)
3. Combat units (target scan, movement, firing, missile hits)
4. Missiles and asteroids (flight, collisions, expiry)
5. Cleanup: registry compaction, asteroid spawn, status bar animation

The simulation object is the context every entity receives: it owns the
entity registry, the random source, the status board, the message log and
the event log. Nothing is global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from .bodies import MOON_MAX_SPEED, Asteroid, Moon, Star
from .config import SimulationConfig
from .events import MessageLog, SimulationEvent, SimulationEventType
from .lifecycle import AsteroidSpawner, random_explode_power
from .orbit import OrbitPath
from .physics import Vector
from .planet import Planet
from .projectile import Missile
from .registry import CELESTIAL_KINDS, UNIT_KINDS, EntityKind, EntityRegistry
from .rng import RandomSource
from .status import StatusBoard
from .units import POLICY_TYPES, Unit


# =============================================================================
# CONSTANTS
# =============================================================================

# Highlight glow is drawn this much larger than the entity
GLOW_SCALE = 1.5

# Entity kinds updated in each phase, in order
UPKEEP_KINDS = (EntityKind.STAR, EntityKind.MOON, EntityKind.PLANET)
PROJECTILE_KINDS = (EntityKind.MISSILE, EntityKind.ASTEROID)


@dataclass
class Glow:
    """Highlight artifact derived from a live entity each frame."""
    entity_id: int
    x: float
    y: float
    radius: float


class SolarSystemSimulation:
    """
    Main simulation engine.

    Attributes:
        config: Simulation settings.
        rng: Random source used by every entity.
        registry: Live entities keyed by id.
        status: Status bars keyed by entity id.
        messages: Scrolling player-facing message log.
        events: Chronological event log.
        current_step: Number of completed steps.
        planets: Planets in creation order (kept after removal, for reports).
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[Any] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or SimulationConfig()
        if rng is None:
            rng = RandomSource(seed if seed is not None else self.config.seed)
        self.rng = rng

        self.registry = EntityRegistry()
        self.status = StatusBoard()
        self.messages = MessageLog(self.config.message_log_lines)
        self.spawner = AsteroidSpawner(self.config.asteroid_spawn_rate)

        self.events: List[SimulationEvent] = []
        self.current_step = 0
        self.is_running = False
        self.planets: List[Planet] = []

        self._highlighted: List[int] = []
        self._event_callbacks: List[Callable[[SimulationEvent], None]] = []

    @property
    def width(self) -> int:
        return self.config.world_width

    @property
    def height(self) -> int:
        return self.config.world_height

    @property
    def center(self) -> Vector:
        return Vector(self.width / 2, self.height / 2)

    @property
    def star(self) -> Optional[Star]:
        stars = self.registry.of_kind(EntityKind.STAR)
        return stars[0] if stars else None

    # -------------------------------------------------------------------------
    # Entity Access
    # -------------------------------------------------------------------------

    def get(self, entity_id: Optional[int]) -> Optional[Any]:
        return self.registry.get(entity_id)

    def contains(self, entity_id: Optional[int]) -> bool:
        return self.registry.contains(entity_id)

    def query_range(
        self,
        position: Vector,
        radius: float,
        kinds,
        exclude: Optional[int] = None,
    ) -> List[Any]:
        """Entities of the given kinds within radius of position, in spawn order."""
        return self.registry.query_range(position, radius, kinds, exclude=exclude)

    def owned_units(self, owner_id: int, kind: Optional[EntityKind] = None) -> List[Unit]:
        """Units owned by a planet, optionally of one kind."""
        kinds = UNIT_KINDS if kind is None else (kind,)
        return self.registry.owned_by(owner_id, kinds)

    # -------------------------------------------------------------------------
    # Spawning and Removal
    # -------------------------------------------------------------------------

    def spawn_entity(
        self,
        kind: Union[EntityKind, str],
        position: Vector,
        initial_velocity: Optional[Vector] = None,
        **params,
    ) -> Optional[Any]:
        """
        Construct and register an entity.

        Args:
            kind: Entity kind (or its name, case-insensitive).
            position: Spawn position.
            initial_velocity: Starting velocity for bodies that move freely.
            **params: Kind-specific parameters:
                STAR: resource, mass
                PLANET: mass, orbit, supports_life, moons, name
                MOON: owner_id, index, speed, angle
                ASTEROID: explode_power
                PROBE/SATELLITE/DESTROYER: owner_id (required), policy
                MISSILE: heading, owner_id

        Returns:
            The new entity, or None for unknown kinds and units without a
            live owner planet.
        """
        kind = self._resolve_kind(kind)
        if kind is None:
            return None

        if kind == EntityKind.STAR:
            entity = Star(position, params.get("resource", self.config.star_resource),
                          params.get("mass", self.config.star_mass))
        elif kind == EntityKind.PLANET:
            return self._spawn_planet(position, **params)
        elif kind == EntityKind.MOON:
            entity = Moon(position, params.get("owner_id"), params.get("index", 0),
                          params.get("speed", 0.0), params.get("angle", 0.0))
        elif kind == EntityKind.ASTEROID:
            explode_power = params.get("explode_power")
            if explode_power is None:
                explode_power = random_explode_power(self.rng)
            entity = Asteroid(position, initial_velocity, explode_power)
        elif kind == EntityKind.MISSILE:
            entity = Missile(position, params.get("heading", 0.0), params.get("owner_id"))
        else:
            entity = self._build_unit(kind, position, params)
            if entity is None:
                return None

        self._register(entity)
        return entity

    def _resolve_kind(self, kind: Union[EntityKind, str]) -> Optional[EntityKind]:
        if isinstance(kind, EntityKind):
            return kind
        if isinstance(kind, str):
            try:
                return EntityKind[kind.upper()]
            except KeyError:
                return None
        return None

    def _register(self, entity: Any) -> int:
        entity_id = self.registry.add(entity)
        if entity.kind == EntityKind.PLANET or entity.kind in UNIT_KINDS:
            self.status.create(entity_id, [entity.max_health], [entity.health])
        self._log_event(SimulationEventType.ENTITY_SPAWNED, entity_id=entity_id,
                        data={"kind": entity.kind.name})
        return entity_id

    def _spawn_planet(self, position: Vector, **params) -> Planet:
        """Planets sit on their orbit around `position` (the orbit center)."""
        orbit = params.get("orbit") or OrbitPath()
        planet = Planet(
            params.get("mass", 1e13),
            orbit,
            position,
            self.rng,
            supports_life=params.get("supports_life", False),
            name=params.get("name"),
        )
        self._register(planet)
        self.planets.append(planet)

        for index in range(abs(int(params.get("moons", 0)))):
            speed = self.rng.random() * MOON_MAX_SPEED
            if self.rng.random_int(2) == 0:
                speed = -speed
            self.spawn_entity(EntityKind.MOON, planet.position, owner_id=planet.id,
                              index=index, speed=speed)
        return planet

    def _build_unit(self, kind: EntityKind, position: Vector, params: dict) -> Optional[Unit]:
        owner = self.get(params.get("owner_id"))
        if owner is None or owner.kind != EntityKind.PLANET:
            return None
        policy = params.get("policy") or POLICY_TYPES[kind]()
        stage = max(owner.civ_stage, 1)
        return Unit(kind, position, owner.id, policy, policy.health_per_stage * stage)

    def remove_entity(self, entity_id: Optional[int]) -> bool:
        """
        Remove an entity and everything that depends on it.

        Removing a planet also removes its units, its moons, its status bars
        and its highlight. Removing an unknown or already removed id is a
        no-op returning False.
        """
        entity = self.registry.remove(entity_id)
        if entity is None:
            return False

        self.status.discard(entity_id)
        if entity_id in self._highlighted:
            self._highlighted.remove(entity_id)

        if entity.kind == EntityKind.PLANET:
            for dependent in self.registry.owned_by(entity_id, UNIT_KINDS + (EntityKind.MOON,)):
                self.remove_entity(dependent.id)

        self._log_event(SimulationEventType.ENTITY_REMOVED, entity_id=entity_id,
                        data={"kind": entity.kind.name})
        return True

    def clear_units(self, owner_id: int) -> int:
        """Remove every unit a planet owns; return how many were removed."""
        units = self.owned_units(owner_id)
        for unit in units:
            self.remove_entity(unit.id)
        return len(units)

    # -------------------------------------------------------------------------
    # Display Bridges
    # -------------------------------------------------------------------------

    def report_event(self, message: str) -> None:
        """Append a player-facing message to the scrolling log."""
        self.messages.push(message)
        self._log_event(SimulationEventType.MESSAGE, data={"message": message})

    def push_status(self, entity_id: int, bar_index: int, value: float, maximum: Optional[float] = None) -> bool:
        return self.status.push_status(entity_id, bar_index, value, maximum)

    def pull_status(self, entity_id: int, bar_index: int) -> Optional[float]:
        return self.status.pull_status(entity_id, bar_index)

    def highlight(self, entity_id: int) -> bool:
        if not self.contains(entity_id):
            return False
        if entity_id not in self._highlighted:
            self._highlighted.append(entity_id)
        return True

    def unhighlight(self, entity_id: int) -> bool:
        if entity_id not in self._highlighted:
            return False
        self._highlighted.remove(entity_id)
        return True

    def glows(self) -> List[Glow]:
        """Highlight artifacts for every highlighted live entity, at current positions."""
        glows = []
        for entity_id in self._highlighted:
            entity = self.get(entity_id)
            if entity is None:
                continue
            glows.append(Glow(entity_id, entity.position.x, entity.position.y,
                              entity.radius * GLOW_SCALE))
        return glows

    def planet_report(self, index: int) -> List[str]:
        """Status panel lines for the index-th planet created, [] if out of range."""
        if index < 0 or index >= len(self.planets):
            return []
        planet = self.planets[index]
        return planet.status_report(in_world=self.contains(planet.id))

    # -------------------------------------------------------------------------
    # Simulation Loop
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """Register a callback invoked for every logged event."""
        self._event_callbacks.append(callback)

    def run(self, steps: int) -> List[SimulationEvent]:
        """Run a number of steps and return every event they produced."""
        start = len(self.events)
        self.is_running = True
        self._log_event(SimulationEventType.SIMULATION_STARTED, data={"steps": steps})
        for _ in range(max(0, int(steps))):
            if not self.is_running:
                break
            self.step()
        self._log_event(SimulationEventType.SIMULATION_ENDED, data={"step": self.current_step})
        self.is_running = False
        return self.events[start:]

    def stop(self) -> None:
        self.is_running = False

    def step(self) -> List[SimulationEvent]:
        """
        Advance the simulation by one step.

        Returns:
            Events logged during this step.
        """
        start = len(self.events)
        self.current_step += 1

        self._update_kinds(CELESTIAL_KINDS, "move")
        self._update_kinds(UPKEEP_KINDS, "update")
        self._update_kinds(UNIT_KINDS, "update")
        self._update_kinds(PROJECTILE_KINDS, "update")

        self.registry.compact()
        self.spawner.maybe_spawn(self)
        self.status.tick()

        return self.events[start:]

    def _update_kinds(self, kinds, method: str) -> None:
        # Snapshot first: entities may spawn or die while iterating
        for entity in self.registry.of_kinds(kinds):
            if self.contains(entity.id):
                getattr(entity, method)(self)

    def teardown(self) -> None:
        """Drop every entity and display artifact."""
        self.registry.clear()
        self.status.clear()
        self._highlighted.clear()
        self.is_running = False

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def _log_event(
        self,
        event_type: SimulationEventType,
        entity_id: Optional[int] = None,
        target_id: Optional[int] = None,
        data: Optional[dict] = None
    ) -> SimulationEvent:
        """Log a simulation event and notify callbacks."""
        event = SimulationEvent(
            event_type=event_type,
            step=self.current_step,
            entity_id=entity_id,
            target_id=target_id,
            data=data or {}
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception as e:
                print(f"[SIM] Event callback error: {e}")

        return event

    def get_events_by_type(self, event_type: SimulationEventType) -> List[SimulationEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def entity_counts(self) -> Dict[str, int]:
        return {kind.name: self.registry.count(kind) for kind in EntityKind}

"""Planetary defense simulator: a toy star system with civilizations, combat units and asteroids."""

from .bodies import Asteroid, Moon, Star
from .config import (
    PlanetSpec,
    SimulationConfig,
    load_config,
    spawn_rate_from_frames_per_thousand,
)
from .events import MessageLog, SimulationEvent, SimulationEventType
from .lifecycle import AsteroidSpawner, spawn_asteroid, spawn_asteroid_burst
from .orbit import OrbitPath
from .physics import (
    G,
    Body,
    Vector,
    bearing,
    correct_to_range,
    correct_to_range_with_excess,
    wrap_degrees,
)
from .planet import STAGE_RESOURCE_FLAGS, Planet
from .projectile import Missile
from .registry import CELESTIAL_KINDS, UNIT_KINDS, EntityKind, EntityRegistry
from .report import SystemReport, create_report_from_simulation
from .rng import RandomSource, SequenceRandom
from .scenarios import build_sol_system
from .simulation import Glow, SolarSystemSimulation
from .status import StatusBoard, StatusSet
from .units import DestroyerPolicy, ProbePolicy, SatellitePolicy, Unit

__all__ = [
    # Physics
    "G",
    "Vector",
    "Body",
    "bearing",
    "wrap_degrees",
    "correct_to_range",
    "correct_to_range_with_excess",
    "OrbitPath",
    # Entities
    "EntityKind",
    "EntityRegistry",
    "CELESTIAL_KINDS",
    "UNIT_KINDS",
    "Star",
    "Moon",
    "Asteroid",
    "Planet",
    "STAGE_RESOURCE_FLAGS",
    "Unit",
    "ProbePolicy",
    "SatellitePolicy",
    "DestroyerPolicy",
    "Missile",
    # Lifecycle
    "AsteroidSpawner",
    "spawn_asteroid",
    "spawn_asteroid_burst",
    # Simulation
    "SolarSystemSimulation",
    "Glow",
    "build_sol_system",
    "SimulationEvent",
    "SimulationEventType",
    "MessageLog",
    "StatusSet",
    "StatusBoard",
    "RandomSource",
    "SequenceRandom",
    # Config and reports
    "SimulationConfig",
    "PlanetSpec",
    "load_config",
    "spawn_rate_from_frames_per_thousand",
    "SystemReport",
    "create_report_from_simulation",
]

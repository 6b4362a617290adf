"""
Scenario construction.

Builds a ready-to-run star system from a configuration: one star at the
world center and each configured planet on its orbit, with its moons.

Usage:
    sim = build_sol_system(seed=42)
    sim.run(1000)
"""

from __future__ import annotations

from typing import Any, Optional

from .config import PlanetSpec, SimulationConfig
from .orbit import OrbitPath
from .registry import EntityKind
from .simulation import SolarSystemSimulation


def orbit_from_spec(spec: PlanetSpec) -> OrbitPath:
    return OrbitPath(
        orbit_pos=spec.orbit_pos,
        orbit_speed=spec.orbit_speed,
        path_pos=spec.path_pos,
        path_speed=spec.path_speed,
        rad_x=spec.orbit_rad_x,
        rad_y=spec.orbit_rad_y,
    )


def populate_system(sim: SolarSystemSimulation) -> SolarSystemSimulation:
    """Spawn the star and every configured planet into an empty simulation."""
    star = sim.spawn_entity(EntityKind.STAR, sim.center)
    for spec in sim.config.planets:
        sim.spawn_entity(
            EntityKind.PLANET,
            star.position,
            mass=spec.mass,
            orbit=orbit_from_spec(spec),
            supports_life=spec.supports_life,
            moons=spec.moons,
        )
    return sim


def build_sol_system(
    config: Optional[SimulationConfig] = None,
    rng: Optional[Any] = None,
    seed: Optional[int] = None,
) -> SolarSystemSimulation:
    """Create a simulation holding the configured star system."""
    sim = SolarSystemSimulation(config, rng=rng, seed=seed)
    return populate_system(sim)

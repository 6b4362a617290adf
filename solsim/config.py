"""
Simulation configuration.

Defaults reproduce the stock system: a 960x640 world, one star and five
planets on fixed elliptical orbits. Configurations load from JSON files of
the shape shipped in data/sol_system.json.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "data" / "sol_system.json"

# Menu default: one asteroid roughly every 250 steps
DEFAULT_ASTEROID_SPAWN_RATE = 250


@dataclass
class PlanetSpec:
    """
    Planet template.

    Attributes:
        moons: Number of moons spawned with the planet.
        mass: Planet mass (kg).
        supports_life: Whether life can evolve.
        orbit_pos, orbit_speed, path_pos, path_speed: Orbit angles (degrees).
        orbit_rad_x, orbit_rad_y: Ellipse semi-axes.
    """
    moons: int = 0
    mass: float = 1e13
    supports_life: bool = False
    orbit_pos: float = 0.0
    orbit_speed: float = 0.5
    path_pos: float = 0.0
    path_speed: float = 0.05
    orbit_rad_x: float = 200.0
    orbit_rad_y: float = 200.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PlanetSpec:
        try:
            return cls(
                moons=int(data.get("moons", 0)),
                mass=float(data["mass"]),
                supports_life=bool(data.get("supports_life", False)),
                orbit_pos=float(data.get("orbit_pos", 0.0)),
                orbit_speed=float(data.get("orbit_speed", 0.5)),
                path_pos=float(data.get("path_pos", 0.0)),
                path_speed=float(data.get("path_speed", 0.05)),
                orbit_rad_x=float(data.get("orbit_rad_x", 200.0)),
                orbit_rad_y=float(data.get("orbit_rad_y", 200.0)),
            )
        except KeyError as e:
            raise ValueError(f"Planet spec missing field: {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid planet spec {data!r}: {e}") from e


def _default_planets() -> List[PlanetSpec]:
    return [
        PlanetSpec(1, 1e13, True, 12, -0.62, 0, 0.073, 193, 184),
        PlanetSpec(0, 1e14, False, 95, 0.74, 0, 0.092, 243, 145),
        PlanetSpec(0, 1e13, True, 173, 0.5, 0, 0.01, 297, 182),
        PlanetSpec(2, 1e16, False, 276, 0.23, 0, 0.04, 352, 200),
        PlanetSpec(1, 1e13, True, 312, -0.31, 0, 0.05, 413, 313),
    ]


@dataclass
class SimulationConfig:
    """
    Top-level simulation settings.

    Attributes:
        world_width, world_height: Visible world size in display units.
        asteroid_spawn_rate: One-in-N chance per step of an asteroid (0 disables).
        star_resource, star_mass: Central star parameters.
        planets: Planet templates, in orbit order.
        message_log_lines: Number of lines shown by the message log.
        seed: Random seed (None for nondeterministic runs).
    """
    world_width: int = 960
    world_height: int = 640
    asteroid_spawn_rate: int = DEFAULT_ASTEROID_SPAWN_RATE
    star_resource: int = 200000
    star_mass: float = 1e20
    planets: List[PlanetSpec] = field(default_factory=_default_planets)
    message_log_lines: int = 3
    seed: Optional[int] = None

    def __post_init__(self):
        self.world_width = abs(int(self.world_width))
        self.world_height = abs(int(self.world_height))
        self.asteroid_spawn_rate = abs(int(self.asteroid_spawn_rate))
        if self.world_width == 0 or self.world_height == 0:
            raise ValueError("World dimensions must be non-zero")

    @classmethod
    def from_json(cls, path: str) -> SimulationConfig:
        """Load configuration from JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Simulation config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SimulationConfig:
        """Create configuration from dictionary."""
        world = data.get("world", {})
        star = data.get("star", {})
        planets_data = data.get("planets")
        planets = [PlanetSpec.from_dict(p) for p in planets_data] if planets_data is not None else _default_planets()

        return cls(
            world_width=world.get("width", 960),
            world_height=world.get("height", 640),
            asteroid_spawn_rate=data.get("asteroid_spawn_rate", DEFAULT_ASTEROID_SPAWN_RATE),
            star_resource=star.get("resource", 200000),
            star_mass=star.get("mass", 1e20),
            planets=planets,
            message_log_lines=data.get("message_log_lines", 3),
            seed=data.get("seed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "world": {"width": self.world_width, "height": self.world_height},
            "asteroid_spawn_rate": self.asteroid_spawn_rate,
            "star": {"resource": self.star_resource, "mass": self.star_mass},
            "planets": [asdict(p) for p in self.planets],
            "message_log_lines": self.message_log_lines,
            "seed": self.seed,
        }


def load_config(path: Optional[str] = None) -> SimulationConfig:
    """Load a configuration file, falling back to the bundled default."""
    if path is None:
        if DEFAULT_CONFIG_PATH.exists():
            return SimulationConfig.from_json(str(DEFAULT_CONFIG_PATH))
        return SimulationConfig()
    return SimulationConfig.from_json(path)


def spawn_rate_from_frames_per_thousand(asteroids_per_thousand: float) -> int:
    """
    Convert the menu's "asteroids per 1000 frames" setting into a 1-in-N rate.

    Zero (or less) disables spawning.
    """
    asteroids_per_thousand = abs(asteroids_per_thousand)
    if asteroids_per_thousand == 0:
        return 0
    return max(1, round(1000 / asteroids_per_thousand))

"""
System Report Generator for the Solar System Simulator.

Summarizes a simulation run: the fate of every planet, the entities still
alive, and counts of the notable events. Reports render as plain text or
JSON.

Usage:
    report = create_report_from_simulation(sim, "Sol run")
    print(report.to_text())
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .events import SimulationEventType


REPORT_WIDTH = 60
SEPARATOR_CHAR = "="

# Event types that make the key-events section
KEY_EVENT_TYPES = (
    SimulationEventType.LIFE_DEVELOPED,
    SimulationEventType.STAGE_ADVANCED,
    SimulationEventType.STAGE_REGRESSED,
    SimulationEventType.SHIELD_RAISED,
    SimulationEventType.INDEPENDENT_MOTION,
    SimulationEventType.PLANET_ASCENDED,
    SimulationEventType.LIFE_WIPED_OUT,
    SimulationEventType.PLANET_DESTROYED,
)


@dataclass
class PlanetSummary:
    """
    Final state of one planet.

    Attributes:
        name: Planet designation.
        status: "active", "ascended" or "destroyed".
        civ_stage: Final civilization stage (-1 when unevolved).
        resource: Final resource pool.
        health, max_health: Final hull pool.
        units: Units owned at the end of the run.
    """
    name: str
    status: str
    civ_stage: int
    resource: int
    health: float
    max_health: float
    units: int = 0


@dataclass
class SystemReport:
    """Summary of a finished (or paused) run."""
    name: str
    steps: int
    planets: List[PlanetSummary]
    entity_counts: Dict[str, int]
    event_counts: Dict[str, int]
    key_events: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    def to_text(self) -> str:
        lines = []
        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append("SYSTEM REPORT".center(REPORT_WIDTH))
        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append(f"Run: {self.name}")
        lines.append(f"Steps: {self.steps}")
        lines.append("")

        lines.append("PLANETS:")
        for p in self.planets:
            stage = "Unevolved" if p.civ_stage < 0 else f"Stage {p.civ_stage}"
            lines.append(
                f"  {p.name:<10} {p.status.upper():<10} {stage:<10} "
                f"{p.resource:>8} EP  HP {p.health:.0f}/{p.max_health:.0f}  units {p.units}"
            )
        lines.append("")

        lines.append("ENTITIES:")
        for kind, count in self.entity_counts.items():
            if count:
                lines.append(f"  {kind.title():<12}{count:>6}")
        lines.append("")

        lines.append("KEY EVENTS:")
        if self.key_events:
            for event in self.key_events:
                lines.append(f"  {event}")
        else:
            lines.append("  (none)")

        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        return "\n".join(lines)

    def to_json(self) -> str:
        data = {
            "name": self.name,
            "steps": self.steps,
            "planets": [vars(p) for p in self.planets],
            "entity_counts": self.entity_counts,
            "event_counts": self.event_counts,
            "key_events": self.key_events,
            "messages": self.messages,
        }
        return json.dumps(data, indent=2)


def _planet_status(sim, planet) -> str:
    if sim.contains(planet.id):
        return "active"
    return "ascended" if planet.has_ascended else "destroyed"


def create_report_from_simulation(sim, name: str = "Simulation") -> SystemReport:
    """Build a SystemReport from a simulation's current state and event log."""
    planets = [
        PlanetSummary(
            name=planet.name,
            status=_planet_status(sim, planet),
            civ_stage=planet.civ_stage,
            resource=planet.resource,
            health=planet.health,
            max_health=planet.max_health,
            units=len(sim.owned_units(planet.id)) if sim.contains(planet.id) else 0,
        )
        for planet in sim.planets
    ]

    counts = Counter(e.event_type.name for e in sim.events)
    key_events = [_describe(sim, e) for e in sim.events if e.event_type in KEY_EVENT_TYPES]

    return SystemReport(
        name=name,
        steps=sim.current_step,
        planets=planets,
        entity_counts=sim.entity_counts(),
        event_counts=dict(counts),
        key_events=key_events,
        messages=list(sim.messages.history),
    )


def _describe(sim, event) -> str:
    planet = _planet_by_id(sim, event.entity_id)
    subject = planet.name if planet is not None else f"#{event.entity_id}"
    detail = f" (stage {event.data['stage']})" if "stage" in event.data else ""
    return f"step {event.step:>6}: {subject} {event.event_type.name.lower().replace('_', ' ')}{detail}"


def _planet_by_id(sim, entity_id: Optional[int]) -> Optional[Any]:
    for planet in sim.planets:
        if planet.id == entity_id:
            return planet
    return None

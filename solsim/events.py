"""
Simulation event log and scrolling message log.

Events are recorded for analysis and reports; messages are the short
human-readable prompts shown to the player (a few lines at a time).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


# =============================================================================
# EVENT TYPES
# =============================================================================

class SimulationEventType(Enum):
    """Types of events that can occur during simulation."""
    # Lifecycle events
    SIMULATION_STARTED = auto()
    SIMULATION_ENDED = auto()
    ENTITY_SPAWNED = auto()
    ENTITY_REMOVED = auto()

    # Civilization events
    LIFE_DEVELOPED = auto()
    STAGE_ADVANCED = auto()
    STAGE_REGRESSED = auto()
    SHIELD_RAISED = auto()
    ORBIT_BROKEN = auto()
    INDEPENDENT_MOTION = auto()
    PLANET_ASCENDED = auto()
    LIFE_WIPED_OUT = auto()
    PLANET_DESTROYED = auto()

    # Combat events
    MISSILE_FIRED = auto()
    MISSILE_HIT = auto()
    UNIT_DESTROYED = auto()
    STAR_FLARE = auto()

    # Asteroid events
    ASTEROID_SPAWNED = auto()
    ASTEROID_BURST = auto()
    ASTEROID_IMPACT = auto()

    # Player-facing prompts
    MESSAGE = auto()


# =============================================================================
# SIMULATION EVENT
# =============================================================================

@dataclass
class SimulationEvent:
    """
    An event that occurs during simulation.

    Attributes:
        event_type: The type of event.
        step: Simulation step when the event occurred.
        entity_id: ID of the entity involved (if applicable).
        target_id: ID of the target (if applicable).
        data: Additional event-specific data.
    """
    event_type: SimulationEventType
    step: int
    entity_id: Optional[int] = None
    target_id: Optional[int] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        entity_str = f"[{self.entity_id}]" if self.entity_id is not None else ""
        target_str = f" -> {self.target_id}" if self.target_id is not None else ""
        return f"#{self.step} {entity_str} {self.event_type.name}{target_str}"


# =============================================================================
# MESSAGE LOG
# =============================================================================

class MessageLog:
    """
    Scrolling text log that keeps the most recent lines visible.

    The full history is retained for reports; `lines` holds only the last
    `max_lines` messages, oldest first.
    """

    def __init__(self, max_lines: int = 3):
        self.max_lines = max(1, abs(int(max_lines)))
        self.history: List[str] = []

    def push(self, message: str) -> None:
        self.history.append(str(message))

    @property
    def lines(self) -> List[str]:
        return self.history[-self.max_lines:]

    def clear(self) -> None:
        self.history.clear()

    def __len__(self) -> int:
        return len(self.history)

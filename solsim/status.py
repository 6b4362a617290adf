"""
Status bar numeric model.

A StatusSet is a group of bars (health, shield, ...) attached to one entity.
Only the numbers live here; drawing is left to whatever display consumes
them. The StatusBoard maps entity ids to their sets so the simulation can
push and pull values by id.

Invalid bar indices never raise: setters return False and getters None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .physics import correct_to_range


# Fraction of the gap between shown and actual value kept each tick
CHANGE_RATE_FACTOR = 0.95

# Values are rounded to this many decimals to avoid float drift
PRECISION = 9


@dataclass
class StatusBar:
    """
    One bar.

    Attributes:
        value: Actual value, in [0, maximum].
        maximum: Bar capacity (never negative).
        display: Value currently shown, eases toward `value` each tick.
        regen_rate: Amount added per tick while regenerating.
        regenerating: Whether tick() applies regen_rate.
        reset_when_full: Whether overflowing increments wrap to zero.
    """
    value: float = 0.0
    maximum: float = 0.0
    display: float = 0.0
    regen_rate: float = 0.0
    regenerating: bool = False
    reset_when_full: bool = False

    @property
    def fraction(self) -> float:
        if self.maximum <= 0:
            return 0.0
        return self.value / self.maximum


class StatusSet:
    """A fixed number of bars belonging to one entity."""

    def __init__(self, maxima: Optional[List[float]] = None, values: Optional[List[float]] = None):
        maxima = list(maxima) if maxima else [0.0]
        values = list(values) if values else list(maxima)
        self.bars: List[StatusBar] = []
        for i, maximum in enumerate(maxima):
            maximum = abs(maximum)
            value = correct_to_range(abs(values[i]) if i < len(values) else maximum, 0.0, maximum)
            self.bars.append(StatusBar(value=value, maximum=maximum, display=value))

    def __len__(self) -> int:
        return len(self.bars)

    def _bar(self, index: int) -> Optional[StatusBar]:
        if not isinstance(index, int) or index < 0 or index >= len(self.bars):
            return None
        return self.bars[index]

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def update(self, index: int, change: float) -> bool:
        """
        Shift a bar by change.

        The result is clamped to [0, max]. A bar flagged reset_when_full
        wraps around instead when a positive change carries it to the top.
        """
        bar = self._bar(index)
        if bar is None:
            return False

        target = bar.value + change
        if bar.reset_when_full and change > 0 and bar.maximum > 0:
            while target >= bar.maximum:
                target -= bar.maximum
        bar.value = round(correct_to_range(target, 0.0, bar.maximum), PRECISION)
        return True

    def update_to(self, index: int, target: float, maximum: Optional[float] = None) -> bool:
        """
        Set a bar to an absolute value by shifting it the difference.

        Going through update() lets a reset_when_full bar wrap. A new maximum
        is applied after the value, so overflow is judged against the old one.
        """
        bar = self._bar(index)
        if bar is None:
            return False
        self.update(index, abs(target) - bar.value)
        if maximum is not None:
            self.set_max(index, maximum)
        return True

    def set_max(self, index: int, maximum: float) -> bool:
        bar = self._bar(index)
        if bar is None:
            return False
        bar.maximum = abs(maximum)
        bar.value = correct_to_range(bar.value, 0.0, bar.maximum)
        bar.display = correct_to_range(bar.display, 0.0, bar.maximum)
        return True

    def set_regen_rate(self, index: int, rate: float) -> bool:
        bar = self._bar(index)
        if bar is None:
            return False
        bar.regen_rate = abs(rate)
        return True

    def toggle_regen(self, index: int, enabled: Optional[bool] = None) -> bool:
        bar = self._bar(index)
        if bar is None:
            return False
        bar.regenerating = (not bar.regenerating) if enabled is None else bool(enabled)
        return True

    def toggle_reset_when_full(self, index: int, enabled: Optional[bool] = None) -> bool:
        bar = self._bar(index)
        if bar is None:
            return False
        bar.reset_when_full = (not bar.reset_when_full) if enabled is None else bool(enabled)
        return True

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def get_status(self, index: int) -> Optional[float]:
        bar = self._bar(index)
        return None if bar is None else bar.value

    def get_max(self, index: int) -> Optional[float]:
        bar = self._bar(index)
        return None if bar is None else bar.maximum

    def get_display(self, index: int) -> Optional[float]:
        bar = self._bar(index)
        return None if bar is None else bar.display

    def get_regen_rate(self, index: int) -> Optional[float]:
        bar = self._bar(index)
        return None if bar is None else bar.regen_rate

    def is_full(self, index: int) -> Optional[bool]:
        bar = self._bar(index)
        return None if bar is None else bar.value >= bar.maximum

    def is_empty(self, index: int) -> Optional[bool]:
        bar = self._bar(index)
        return None if bar is None else bar.value <= 0

    # -------------------------------------------------------------------------
    # Animation
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Apply regeneration, then ease each displayed value toward its actual value."""
        for i, bar in enumerate(self.bars):
            if bar.regenerating and bar.regen_rate:
                self.update(i, bar.regen_rate)
            gap = bar.display - bar.value
            if abs(gap) < 10 ** -PRECISION:
                bar.display = bar.value
            else:
                bar.display = round(bar.value + gap * CHANGE_RATE_FACTOR, PRECISION)


class StatusBoard:
    """Status sets keyed by entity id."""

    def __init__(self):
        self._sets: Dict[int, StatusSet] = {}

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._sets

    def __len__(self) -> int:
        return len(self._sets)

    def create(self, entity_id: int, maxima: List[float], values: Optional[List[float]] = None) -> StatusSet:
        """Attach a new set to an entity, replacing any existing one."""
        status = StatusSet(maxima, values)
        self._sets[entity_id] = status
        return status

    def get(self, entity_id: Optional[int]) -> Optional[StatusSet]:
        return self._sets.get(entity_id)

    def discard(self, entity_id: Optional[int]) -> bool:
        return self._sets.pop(entity_id, None) is not None

    def push_status(self, entity_id: int, bar_index: int, value: float, maximum: Optional[float] = None) -> bool:
        status = self._sets.get(entity_id)
        if status is None:
            return False
        return status.update_to(bar_index, value, maximum)

    def pull_status(self, entity_id: int, bar_index: int) -> Optional[float]:
        status = self._sets.get(entity_id)
        if status is None:
            return None
        return status.get_status(bar_index)

    def tick(self) -> None:
        for status in self._sets.values():
            status.tick()

    def clear(self) -> None:
        self._sets.clear()

"""
Entity registry and spatial range query.

Entities live in an arena keyed by stable integer ids. Per-kind id lists
keep enumeration order (spawn order) and are compacted once per step, so
iteration never visits a removed entity twice. Range queries are
vectorized with numpy over the candidate positions.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional

import numpy as np


class EntityKind(Enum):
    """Every kind of entity the simulation can hold."""
    STAR = auto()
    PLANET = auto()
    MOON = auto()
    ASTEROID = auto()
    PROBE = auto()
    SATELLITE = auto()
    DESTROYER = auto()
    MISSILE = auto()


CELESTIAL_KINDS = (EntityKind.STAR, EntityKind.PLANET, EntityKind.MOON, EntityKind.ASTEROID)
UNIT_KINDS = (EntityKind.PROBE, EntityKind.SATELLITE, EntityKind.DESTROYER)


class EntityRegistry:
    """
    Arena of live entities with per-kind enumeration lists.

    Any object with `kind`, `id` and `position` attributes can be registered.
    Ids are assigned on add and never reused.
    """

    def __init__(self):
        self._entities: Dict[int, Any] = {}
        self._by_kind: Dict[EntityKind, List[int]] = {kind: [] for kind in EntityKind}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def add(self, entity: Any) -> int:
        """Register an entity and return its new id."""
        entity_id = self._next_id
        self._next_id += 1
        entity.id = entity_id
        self._entities[entity_id] = entity
        self._by_kind[entity.kind].append(entity_id)
        return entity_id

    def remove(self, entity_id: Optional[int]) -> Optional[Any]:
        """Drop an entity. Removing an unknown id is a no-op returning None."""
        return self._entities.pop(entity_id, None)

    def get(self, entity_id: Optional[int]) -> Optional[Any]:
        return self._entities.get(entity_id)

    def contains(self, entity_id: Optional[int]) -> bool:
        return entity_id in self._entities

    def of_kind(self, kind: EntityKind) -> List[Any]:
        """Live entities of one kind, in spawn order."""
        return [self._entities[i] for i in self._by_kind[kind] if i in self._entities]

    def of_kinds(self, kinds: Iterable[EntityKind]) -> List[Any]:
        """Live entities of several kinds, in spawn order across kinds."""
        ids = sorted(i for kind in set(kinds) for i in self._by_kind[kind] if i in self._entities)
        return [self._entities[i] for i in ids]

    def all(self) -> List[Any]:
        return list(self._entities.values())

    def count(self, kind: EntityKind) -> int:
        return sum(1 for i in self._by_kind[kind] if i in self._entities)

    def owned_by(self, owner_id: int, kinds: Iterable[EntityKind] = UNIT_KINDS) -> List[Any]:
        """Entities of the given kinds whose owner_id matches."""
        return [e for e in self.of_kinds(kinds) if getattr(e, "owner_id", None) == owner_id]

    def compact(self) -> int:
        """Purge removed ids from the enumeration lists; return how many were dropped."""
        dropped = 0
        for kind, ids in self._by_kind.items():
            live = [i for i in ids if i in self._entities]
            dropped += len(ids) - len(live)
            self._by_kind[kind] = live
        return dropped

    def clear(self) -> None:
        self._entities.clear()
        for ids in self._by_kind.values():
            ids.clear()

    def query_range(
        self,
        position: Any,
        radius: float,
        kinds: Iterable[EntityKind],
        exclude: Optional[int] = None,
    ) -> List[Any]:
        """
        Entities of the given kinds within radius of position.

        Distance is inclusive (d <= radius); radius is taken by absolute
        value. Results keep spawn order so callers that scan for the
        nearest match break ties by enumeration order.
        """
        candidates = [e for e in self.of_kinds(kinds) if e.id != exclude]
        if not candidates:
            return []

        coords = np.array([(e.position.x, e.position.y) for e in candidates], dtype=float)
        dist = np.hypot(coords[:, 0] - position.x, coords[:, 1] - position.y)
        mask = dist <= abs(radius)
        return [e for e, inside in zip(candidates, mask) if inside]

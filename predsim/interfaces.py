# predsim/interfaces.py
"""Boundary types shared by the core and its collaborators.

The core never knows how entities are found, how commands become motion or
how children enter the world. It only talks to these protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Protocol, Tuple

Vec = Tuple[float, float]


class EntityKind(Enum):
    PREY = auto()
    AGENT = auto()
    OBSTACLE = auto()


@dataclass(frozen=True)
class Entity:
    """One result of a neighbourhood query."""
    id: int
    kind: EntityKind
    position: Vec


@dataclass(frozen=True)
class RaycastHit:
    id: int
    kind: EntityKind
    distance: float


@dataclass(frozen=True)
class MovementCommand:
    forward: float = 0.0
    turn: float = 0.0
    # stay in place this tick; only the turn is applied
    hold: bool = False


STOP = MovementCommand(0.0, 0.0, hold=True)


class WorldQuery(Protocol):
    def entities_within(self, origin: Vec, radius: float) -> List[Entity]:
        ...

    def raycast_visible(self, origin: Vec, direction: Vec,
                        max_distance: float) -> Optional[RaycastHit]:
        ...

    def resolve(self, entity_id: int):
        """Return the live object behind entity_id or raise InvalidTarget."""
        ...


class Actuator(Protocol):
    def apply(self, agent, command: MovementCommand, dt: float) -> None:
        ...


class Spawner(Protocol):
    def spawn(self, network, position_hint: Vec, **inheritance) -> int:
        ...

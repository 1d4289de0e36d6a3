import copy
from types import SimpleNamespace

import numpy as np
import pytest

from blueprints import SPECIES_BLUEPRINTS
from predsim.errors import InvalidTarget
from predsim.interfaces import RaycastHit


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def blueprint():
    """Wolf blueprint with the random parts of spawning and wandering turned off."""
    bp = copy.deepcopy(SPECIES_BLUEPRINTS["wolf"])
    bp.update(
        initial_hunger_fraction=1.0,
        initial_love_max_fraction=0.0,
        wander_override_chance=0.0,
    )
    return bp


class FakeWorld:
    """Registry of plain objects with perfect line of sight unless blocked."""

    def __init__(self):
        self.objects = {}
        self.blocked = set()

    def add(self, obj_id, kind, position, love_full=True):
        obj = SimpleNamespace(
            id=obj_id, kind=kind, position=position, is_alive=True,
            metabolism=SimpleNamespace(love_is_full=love_full),
        )
        self.objects[obj_id] = obj
        return obj

    def resolve(self, entity_id):
        obj = self.objects.get(entity_id)
        if obj is None or not obj.is_alive:
            raise InvalidTarget(entity_id)
        return obj

    def raycast_visible(self, origin, direction, max_distance):
        best = None
        for obj in self.objects.values():
            dx = obj.position[0] - origin[0]
            dy = obj.position[1] - origin[1]
            distance = (dx * dx + dy * dy) ** 0.5
            if distance == 0 or distance > max_distance:
                continue
            if abs(dx / distance - direction[0]) > 1e-6 or abs(dy / distance - direction[1]) > 1e-6:
                continue
            if best is None or distance < best.distance:
                best = RaycastHit(obj.id, obj.kind, distance)
        if best is None or best.id in self.blocked:
            return None
        return best


@pytest.fixture
def fake_world():
    return FakeWorld()
